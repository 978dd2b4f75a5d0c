import logging
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from memorygame import db
from memorygame.errors import StoreError
from memorygame.models import DEFAULT_MODE, LeaderboardEntry

logger = logging.getLogger(__name__)


class ScoreStore:
    """Append-only leaderboard storage backed by the SQLAlchemy session.

    Each insert is committed on its own, so concurrent submissions never
    depend on each other. Reads use the (moves, time_seconds) index.
    """

    def __init__(self, session=None):
        self._session = session if session is not None else db.session

    def insert(self, name: str, moves: int, time_seconds: float, mode: str = DEFAULT_MODE) -> LeaderboardEntry:
        entry = LeaderboardEntry(name=name, moves=moves, time_seconds=time_seconds, mode=mode)
        try:
            self._session.add(entry)
            self._session.commit()
        except (SQLAlchemyError, OverflowError, ValueError) as exc:
            # DBAPI drivers raise OverflowError/ValueError for values they cannot bind
            self._session.rollback()
            logger.exception(f"[leaderboard-insert-failed] name={name} moves={moves} time={time_seconds}")
            raise StoreError('Failed to save leaderboard entry') from exc
        logger.info(
            f"[leaderboard-insert] id={entry.id} name={entry.name} moves={entry.moves} "
            f"time={entry.time_seconds} mode={entry.mode}"
        )
        return entry

    def query_top(self, limit: int, mode: Optional[str] = None) -> List[LeaderboardEntry]:
        """Best `limit` entries: fewest moves first, then fastest time."""
        try:
            query = self._session.query(LeaderboardEntry)
            if mode == DEFAULT_MODE:
                query = query.filter(or_(LeaderboardEntry.mode == mode, LeaderboardEntry.mode.is_(None)))
            elif mode is not None:
                query = query.filter(LeaderboardEntry.mode == mode)
            return (
                query.order_by(
                    LeaderboardEntry.moves.asc(),
                    LeaderboardEntry.time_seconds.asc(),
                    LeaderboardEntry.id.asc(),
                )
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.exception(f"[leaderboard-query-failed] limit={limit} mode={mode}")
            raise StoreError('Failed to read leaderboard') from exc
