"""
Reducer - the only place a game session changes.

reduce(session, event) -> EngineResult(session, effects, error)

The reducer never sleeps and never touches timers or storage. Anything
that must happen later or outside the session is returned as an effect
for GameEngine to carry out. Events that are not legal in the current
phase return the session unchanged.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple, Type, Union

from .state import EngineSettings, GameMode, GamePhase, Session, new_session

NAME_REQUIRED = 'Please enter your name!'


# =============================================================================
# Events
# =============================================================================

@dataclass(frozen=True)
class NewSession:
    mode: GameMode = GameMode.NORMAL


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class Start:
    player_name: str


@dataclass(frozen=True)
class MemorizeTick:
    pass


@dataclass(frozen=True)
class PlayTick:
    pass


@dataclass(frozen=True)
class Flip:
    card_id: int


@dataclass(frozen=True)
class ResolvePair:
    first_id: int
    second_id: int


Event = Union[NewSession, Reset, Start, MemorizeTick, PlayTick, Flip, ResolvePair]


# =============================================================================
# Effects
# =============================================================================

@dataclass(frozen=True)
class ScheduleEvent:
    """Feed `event` back into the reducer after `delay` seconds."""
    delay: float
    event: Event


@dataclass(frozen=True)
class CancelTimers:
    pass


@dataclass(frozen=True)
class SubmitScore:
    name: str
    moves: int
    time_seconds: int
    mode: str


Effect = Union[ScheduleEvent, CancelTimers, SubmitScore]


@dataclass(frozen=True)
class EngineResult:
    session: Session
    effects: Tuple[Effect, ...] = ()
    error: Optional[str] = None

    @classmethod
    def unchanged(cls, session: Session) -> EngineResult:
        return cls(session)


# =============================================================================
# Handlers
# =============================================================================

def _new_session(session: Session, event: NewSession, settings: EngineSettings, rng) -> EngineResult:
    return EngineResult(new_session(event.mode, settings, rng), (CancelTimers(),))


def _reset(session: Session, event: Reset, settings: EngineSettings, rng) -> EngineResult:
    return EngineResult(new_session(GameMode.NORMAL, settings, rng), (CancelTimers(),))


def _start(session: Session, event: Start, settings: EngineSettings, rng) -> EngineResult:
    if session.phase != GamePhase.NOT_STARTED:
        return EngineResult.unchanged(session)
    name = (event.player_name or '').strip()
    if not name:
        return EngineResult(session, error=NAME_REQUIRED)
    started = replace(
        session,
        cards=session.with_cards(is_flipped=True),
        phase=GamePhase.MEMORIZING,
        memorize_seconds_remaining=settings.memorize_seconds,
        player_name=name,
    )
    return EngineResult(started, (ScheduleEvent(settings.tick_interval, MemorizeTick()),))


def _memorize_tick(session: Session, event: MemorizeTick, settings: EngineSettings, rng) -> EngineResult:
    if session.phase != GamePhase.MEMORIZING:
        return EngineResult.unchanged(session)
    remaining = session.memorize_seconds_remaining - 1
    if remaining > 0:
        counted = replace(session, memorize_seconds_remaining=remaining)
        return EngineResult(counted, (ScheduleEvent(settings.tick_interval, MemorizeTick()),))
    playing = replace(
        session,
        cards=session.with_cards(is_flipped=False),
        phase=GamePhase.PLAYING,
        memorize_seconds_remaining=settings.memorize_seconds,
    )
    return EngineResult(playing, (ScheduleEvent(settings.tick_interval, PlayTick()),))


def _play_tick(session: Session, event: PlayTick, settings: EngineSettings, rng) -> EngineResult:
    if session.phase != GamePhase.PLAYING:
        return EngineResult.unchanged(session)
    elapsed = session.elapsed_seconds + 1
    if session.mode == GameMode.CHALLENGE and elapsed >= settings.challenge_time_limit:
        failed = replace(session, elapsed_seconds=elapsed, phase=GamePhase.FAILED)
        return EngineResult(failed, (CancelTimers(),))
    ticked = replace(session, elapsed_seconds=elapsed)
    return EngineResult(ticked, (ScheduleEvent(settings.tick_interval, PlayTick()),))


def _flip(session: Session, event: Flip, settings: EngineSettings, rng) -> EngineResult:
    if session.phase != GamePhase.PLAYING or len(session.face_up) >= 2:
        return EngineResult.unchanged(session)
    card = session.card(event.card_id)
    if card is None or card.is_flipped or card.is_matched:
        return EngineResult.unchanged(session)

    face_up = session.face_up + (card.id,)
    flipped = replace(session, cards=session.with_card_ids({card.id}, is_flipped=True), face_up=face_up)
    if len(face_up) < 2:
        return EngineResult(flipped)

    first_id, second_id = face_up
    first, second = flipped.card(first_id), flipped.card(second_id)
    delay = settings.match_delay if first.symbol == second.symbol else settings.mismatch_delay
    flipped = replace(flipped, moves=flipped.moves + 1)
    return EngineResult(flipped, (ScheduleEvent(delay, ResolvePair(first_id, second_id)),))


def _resolve_pair(session: Session, event: ResolvePair, settings: EngineSettings, rng) -> EngineResult:
    # Reads the session as it is now; a pair that is no longer pending is ignored
    ids = {event.first_id, event.second_id}
    if session.phase != GamePhase.PLAYING or not ids.issubset(session.face_up):
        return EngineResult.unchanged(session)
    first, second = session.card(event.first_id), session.card(event.second_id)
    face_up = tuple(i for i in session.face_up if i not in ids)

    if first.symbol != second.symbol:
        hidden = replace(session, cards=session.with_card_ids(ids, is_flipped=False), face_up=face_up)
        return EngineResult(hidden)

    matched = replace(session, cards=session.with_card_ids(ids, is_matched=True), face_up=face_up)
    if not matched.is_solved:
        return EngineResult(matched)

    won = replace(matched, phase=GamePhase.WON)
    submit = SubmitScore(
        name=won.player_name,
        moves=won.moves,
        time_seconds=won.elapsed_seconds,
        mode=won.mode.value,
    )
    return EngineResult(won, (CancelTimers(), submit))


Handler = Callable[[Session, Event, EngineSettings, Optional[random.Random]], EngineResult]

_HANDLERS: Dict[Type, Handler] = {
    NewSession: _new_session,
    Reset: _reset,
    Start: _start,
    MemorizeTick: _memorize_tick,
    PlayTick: _play_tick,
    Flip: _flip,
    ResolvePair: _resolve_pair,
}


def reduce(session: Session, event: Event, settings: Optional[EngineSettings] = None,
           rng: Optional[random.Random] = None) -> EngineResult:
    """Apply one event to a session."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f'Unknown game event: {event!r}')
    return handler(session, event, settings or EngineSettings(), rng)
