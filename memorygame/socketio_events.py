from typing import Dict

from flask import current_app, request
from flask_socketio import emit

from memorygame import socketio
from memorygame.errors import ValidationError
from memorygame.services.games.engine import GameEngine
from memorygame.services.games.reducer import SubmitScore
from memorygame.services.games.scheduler import ManualScheduler, SocketIOScheduler
from memorygame.services.games.state import EngineSettings, session_to_dict
from memorygame.services.leaderboard.service import LeaderboardService

NAMESPACE = '/ws'

# One engine per connected browser, keyed by Socket.IO sid
_engines: Dict[str, GameEngine] = {}


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _make_scheduler(app):
    if app.config.get('GAME_SCHEDULER') == 'manual':
        return ManualScheduler()
    return SocketIOScheduler(socketio)


def _make_submitter(app, sid: str):
    def _submit(score: SubmitScore):
        with app.app_context():
            entry = LeaderboardService.from_config(app.config).submit(
                score.name, score.moves, score.time_seconds, score.mode
            )
        socketio.emit('score_submitted', entry, to=sid, namespace=NAMESPACE)
        return entry
    return _submit


def _create_engine(app, sid: str) -> GameEngine:
    engine = GameEngine(
        _make_scheduler(app),
        settings=EngineSettings.from_config(app.config),
        submit_score=_make_submitter(app, sid),
    )

    def _push_state(session):
        # Use socketio.emit since this may be called from a background task
        socketio.emit('state_update', session_to_dict(session), to=sid, namespace=NAMESPACE)

    engine.subscribe(_push_state)
    return engine


def get_engine(sid: str) -> GameEngine:
    return _engines[sid]


def _payload(data) -> dict:
    # Clients may send a bare string or list instead of an object
    return data if isinstance(data, dict) else {}


def _current_engine():
    engine = _engines.get(_get_sid())
    if engine is None:
        emit('error', {'message': 'No game session for this connection'})
    return engine


def handle_connect(auth=None):
    sid = _get_sid()
    app = current_app._get_current_object()
    _engines[sid] = _create_engine(app, sid)
    app.logger.info(f"[ws-connect] sid={sid}")
    emit('connected', {'message': f'Connected to {NAMESPACE}'})
    emit('state_update', session_to_dict(_engines[sid].session))


def handle_disconnect(reason=None):
    sid = _get_sid()
    engine = _engines.pop(sid, None)
    if engine is not None:
        engine.close()
    current_app.logger.info(f"[ws-disconnect] sid={sid} reason={reason}")


def handle_new_session(data):
    engine = _current_engine()
    if engine is None:
        return
    try:
        engine.new_session(_payload(data).get('mode') or 'normal')
    except ValidationError as exc:
        emit('error', {'message': exc.message, 'field': exc.field})


def handle_start_game(data):
    engine = _current_engine()
    if engine is None:
        return
    result = engine.start(_payload(data).get('name') or '')
    if result.error:
        emit('error', {'message': result.error, 'field': 'name'})


def handle_flip_card(data):
    engine = _current_engine()
    if engine is None:
        return
    card_id = _payload(data).get('card_id')
    if isinstance(card_id, bool) or not isinstance(card_id, int):
        emit('error', {'message': 'card_id must be an integer', 'field': 'card_id'})
        return
    engine.flip(card_id)


def handle_reset_game(data=None):
    engine = _current_engine()
    if engine is None:
        return
    engine.reset()


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    socketio.on_event('new_session', handle_new_session, namespace=NAMESPACE)
    socketio.on_event('start_game', handle_start_game, namespace=NAMESPACE)
    socketio.on_event('flip_card', handle_flip_card, namespace=NAMESPACE)
    socketio.on_event('reset_game', handle_reset_game, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
