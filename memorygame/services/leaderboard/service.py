import math
from typing import Any, Dict, List, Optional, Tuple

from memorygame.errors import ValidationError
from memorygame.models import DEFAULT_MODE
from memorygame.services.games.state import GameMode, parse_mode
from .store import ScoreStore

DEFAULT_LIMIT = 10
DEFAULT_NAME_MAX_LENGTH = 20
# Largest value a portable SQL INTEGER column holds
MAX_MOVES = 2 ** 31 - 1


def _is_number(value: Any) -> bool:
    # bool is an int subclass; JSON true/false is not a count
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large to convert to float
        return False


def validate_submission(
    name: Any,
    moves: Any,
    time_seconds: Any,
    mode: Any = None,
    name_max_length: int = DEFAULT_NAME_MAX_LENGTH,
) -> Tuple[str, int, float, str]:
    """Check a score submission field by field.

    Fields are checked in the order name, moves, time, mode and the first
    failure is raised. Returns the normalized (name, moves, time, mode).
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError('name', 'Name is required')
    name = name.strip()
    if len(name) > name_max_length:
        raise ValidationError('name', f'Name must be at most {name_max_length} characters')

    if not _is_number(moves) or not 0 <= moves <= MAX_MOVES or not float(moves).is_integer():
        raise ValidationError('moves', 'Invalid moves count')

    if not _is_number(time_seconds) or time_seconds < 0:
        raise ValidationError('time', 'Invalid time')

    resolved_mode = parse_mode(mode) if mode is not None else GameMode(DEFAULT_MODE)
    return name, int(moves), float(time_seconds), resolved_mode.value


class LeaderboardService:
    """Validates leaderboard requests and relays them to the score store."""

    def __init__(self, store: Optional[ScoreStore] = None, limit: int = DEFAULT_LIMIT,
                 name_max_length: int = DEFAULT_NAME_MAX_LENGTH):
        self.store = store or ScoreStore()
        self.limit = limit
        self.name_max_length = name_max_length

    @classmethod
    def from_config(cls, config, store: Optional[ScoreStore] = None) -> 'LeaderboardService':
        return cls(
            store=store,
            limit=int(config.get('LEADERBOARD_LIMIT', DEFAULT_LIMIT)),
            name_max_length=int(config.get('NAME_MAX_LENGTH', DEFAULT_NAME_MAX_LENGTH)),
        )

    def submit(self, name: Any, moves: Any, time_seconds: Any, mode: Any = None) -> Dict[str, Any]:
        name, moves, time_seconds, mode = validate_submission(
            name, moves, time_seconds, mode, name_max_length=self.name_max_length
        )
        entry = self.store.insert(name, moves, time_seconds, mode)
        return entry.to_dict()

    def top_entries(self, mode: Any = None) -> List[Dict[str, Any]]:
        """Global top list, or the top list of a single mode when one is given."""
        mode_value = parse_mode(mode).value if mode is not None else None
        return [e.to_dict() for e in self.store.query_top(self.limit, mode_value)]

    def top_entries_by_mode(self) -> Dict[str, List[Dict[str, Any]]]:
        return {m.value: self.top_entries(m.value) for m in GameMode}
