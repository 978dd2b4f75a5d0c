import logging
import random
import threading
from typing import Any, Callable, List, Optional

from memorygame.errors import MemoryGameError
from .reducer import (
    CancelTimers, EngineResult, Event, Flip, NewSession, Reset, ScheduleEvent, Start,
    SubmitScore, reduce,
)
from .scheduler import TimerHandle
from .state import EngineSettings, GameMode, Session, new_session, parse_mode

logger = logging.getLogger(__name__)

Listener = Callable[[Session], None]
ScoreSubmitter = Callable[[SubmitScore], Any]


class GameEngine:
    """Owns one player's session and runs the effects the reducer asks for.

    Every timer is armed with the token of the session that armed it. A
    callback whose token no longer matches the live session is dropped, and
    replacing the session also cancels every pending timer.
    """

    def __init__(self, scheduler, settings: Optional[EngineSettings] = None,
                 submit_score: Optional[ScoreSubmitter] = None,
                 rng: Optional[random.Random] = None, mode: Any = GameMode.NORMAL):
        self.settings = settings or EngineSettings()
        self.scheduler = scheduler
        self._submit_score = submit_score
        self._rng = rng
        # Timer callbacks may run on background threads
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._timers: List[TimerHandle] = []
        self._session = new_session(mode, self.settings, rng)
        self.last_submission: Any = None

    @property
    def session(self) -> Session:
        return self._session

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event) -> EngineResult:
        with self._lock:
            previous = self._session
            result = reduce(previous, event, self.settings, self._rng)
            self._session = result.session
            submissions = []
            for effect in result.effects:
                if isinstance(effect, CancelTimers):
                    self._cancel_timers()
                elif isinstance(effect, ScheduleEvent):
                    self._arm(effect)
                elif isinstance(effect, SubmitScore):
                    submissions.append(effect)
            if result.session is not previous:
                self._notify()
            for score in submissions:
                self._submit(score)
            return result

    # Commands -------------------------------------------------------------

    def new_session(self, mode: Any = GameMode.NORMAL) -> EngineResult:
        return self.dispatch(NewSession(parse_mode(mode)))

    def start(self, player_name: str) -> EngineResult:
        return self.dispatch(Start(player_name))

    def flip(self, card_id: int) -> EngineResult:
        return self.dispatch(Flip(card_id))

    def reset(self) -> EngineResult:
        return self.dispatch(Reset())

    def close(self) -> None:
        with self._lock:
            self._cancel_timers()
            self._listeners.clear()

    # Internals ------------------------------------------------------------

    def _arm(self, effect: ScheduleEvent) -> None:
        token = self._session.token
        self._timers = [t for t in self._timers if not t.done]
        self._timers.append(self.scheduler.call_later(effect.delay, self._fire, token, effect.event))
        logger.debug(f"[timer-set] session={token[:8]} event={type(effect.event).__name__} delay={effect.delay}s")

    def _fire(self, token: str, event: Event) -> None:
        with self._lock:
            if token != self._session.token:
                logger.debug(f"[timer-stale] session={token[:8]} event={type(event).__name__} skipped")
                return
            self.dispatch(event)

    def _cancel_timers(self) -> None:
        if self._timers:
            logger.debug(f"[timer-cancel] count={len(self._timers)}")
        for handle in self._timers:
            handle.cancel()
        self._timers = []

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._session)

    def _submit(self, score: SubmitScore) -> None:
        if self._submit_score is None:
            return
        try:
            self.last_submission = self._submit_score(score)
        except MemoryGameError as exc:
            # The win stands even if the score could not be saved
            logger.warning(f"[score-submit-failed] name={score.name} moves={score.moves} error={exc}")
        except Exception:
            logger.exception(f"[score-submit-error] name={score.name} moves={score.moves}")
