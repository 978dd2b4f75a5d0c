"""Session state for a single memory game.

Cards and sessions are immutable; the reducer returns new values instead
of mutating them, so a deferred callback can never hold a card that has
changed under it.
"""

from __future__ import annotations

import random
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from memorygame.errors import ValidationError

# Seven emoji and one image, as shipped with the browser client
SYMBOLS: Tuple[str, ...] = ('🎮', '🎯', '🎨', '🎭', '🎪', '🎸', '🎺', '/alphalogo.jpg')


class GamePhase(str, Enum):
    NOT_STARTED = 'not-started'
    MEMORIZING = 'memorizing'
    PLAYING = 'playing'
    WON = 'won'
    FAILED = 'failed'

    @property
    def is_terminal(self) -> bool:
        return self in (GamePhase.WON, GamePhase.FAILED)


class GameMode(str, Enum):
    NORMAL = 'normal'
    CHALLENGE = 'challenge'


def parse_mode(value: Any) -> GameMode:
    """Coerce a client-supplied mode, raising ValidationError('mode') if unknown."""
    if isinstance(value, GameMode):
        return value
    try:
        return GameMode(value)
    except ValueError:
        raise ValidationError('mode', 'Invalid game mode') from None


@dataclass(frozen=True)
class EngineSettings:
    pair_count: int = 8
    memorize_seconds: int = 5
    challenge_time_limit: int = 15
    match_delay: float = 0.5
    mismatch_delay: float = 1.0
    tick_interval: float = 1.0

    @classmethod
    def from_config(cls, config) -> EngineSettings:
        return cls(
            pair_count=int(config.get('PAIR_COUNT', 8)),
            memorize_seconds=int(config.get('MEMORIZE_DURATION_SEC', 5)),
            challenge_time_limit=int(config.get('CHALLENGE_TIME_LIMIT_SEC', 15)),
            match_delay=int(config.get('MATCH_DELAY_MS', 500)) / 1000.0,
            mismatch_delay=int(config.get('MISMATCH_DELAY_MS', 1000)) / 1000.0,
        )


@dataclass(frozen=True)
class Card:
    id: int
    symbol: str
    is_flipped: bool = False
    is_matched: bool = False

    @property
    def is_image(self) -> bool:
        return self.symbol.startswith('/')

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'symbol': self.symbol,
            'isFlipped': self.is_flipped,
            'isMatched': self.is_matched,
            'isImage': self.is_image,
        }


@dataclass(frozen=True)
class Session:
    cards: Tuple[Card, ...]
    mode: GameMode = GameMode.NORMAL
    phase: GamePhase = GamePhase.NOT_STARTED
    moves: int = 0
    elapsed_seconds: int = 0
    memorize_seconds_remaining: int = 5
    player_name: str = ''
    # Ids of flipped, unmatched cards awaiting resolution (at most two)
    face_up: Tuple[int, ...] = ()
    # Identifies this session to timers armed on its behalf
    token: str = field(default_factory=lambda: uuid.uuid4().hex)

    def card(self, card_id: int) -> Optional[Card]:
        for c in self.cards:
            if c.id == card_id:
                return c
        return None

    @property
    def is_solved(self) -> bool:
        return bool(self.cards) and all(c.is_matched for c in self.cards)

    def with_cards(self, **changes: Any) -> Tuple[Card, ...]:
        """All cards with the same attribute changes applied."""
        return tuple(replace(c, **changes) for c in self.cards)

    def with_card_ids(self, ids, **changes: Any) -> Tuple[Card, ...]:
        return tuple(replace(c, **changes) if c.id in ids else c for c in self.cards)


def build_deck(pair_count: int, rng: Optional[random.Random] = None) -> Tuple[Card, ...]:
    """Deal two cards per symbol in a uniformly random order."""
    if not 1 <= pair_count <= len(SYMBOLS):
        raise ValueError(f'pair_count must be between 1 and {len(SYMBOLS)}, got {pair_count}')
    symbols = list(SYMBOLS[:pair_count]) * 2
    # random.shuffle is Fisher-Yates
    (rng or random).shuffle(symbols)
    return tuple(Card(id=index, symbol=symbol) for index, symbol in enumerate(symbols))


def new_session(mode: Any = GameMode.NORMAL, settings: Optional[EngineSettings] = None,
                rng: Optional[random.Random] = None) -> Session:
    settings = settings or EngineSettings()
    return Session(
        cards=build_deck(settings.pair_count, rng),
        mode=parse_mode(mode),
        memorize_seconds_remaining=settings.memorize_seconds,
    )


def format_time(seconds: int) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f'{minutes}:{secs:02d}'


def session_to_dict(session: Session) -> Dict[str, Any]:
    """Shape rendered by the browser client."""
    return {
        'cards': [c.to_dict() for c in session.cards],
        'moves': session.moves,
        'elapsedSeconds': session.elapsed_seconds,
        'formattedTime': format_time(session.elapsed_seconds),
        'mode': session.mode.value,
        'phase': session.phase.value,
        'memorizeSecondsRemaining': session.memorize_seconds_remaining,
        'playerName': session.player_name,
        'faceUp': list(session.face_up),
    }
