from flask import Blueprint, current_app, jsonify, request

from memorygame.errors import StoreError, ValidationError
from memorygame.services.leaderboard.service import LeaderboardService

leaderboard = Blueprint('leaderboard', __name__)

# ?mode=all asks for the single global list older clients expect
GLOBAL_SCOPE = 'all'


def _service() -> LeaderboardService:
    return LeaderboardService.from_config(current_app.config)


def _fail(message: str, status: int):
    return jsonify({'success': False, 'error': message}), status


@leaderboard.route('', methods=['GET'])
def get_leaderboard():
    """
    Top entries, fewest moves first and then fastest time.

    Without `mode` both per-mode lists are returned; with a mode only that
    list; `mode=all` returns the global list.
    """
    mode = request.args.get('mode')
    service = _service()
    try:
        if mode is None:
            data = service.top_entries_by_mode()
        elif mode == GLOBAL_SCOPE:
            data = service.top_entries()
        else:
            data = service.top_entries(mode)
    except ValidationError as exc:
        return _fail(exc.message, 400)
    except StoreError:
        current_app.logger.error(f"[leaderboard-get] failed mode={mode}")
        return _fail('Failed to fetch leaderboard', 500)
    return jsonify({'success': True, 'data': data})


@leaderboard.route('', methods=['POST'])
def add_leaderboard_entry():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        entry = _service().submit(data.get('name'), data.get('moves'), data.get('time'), data.get('mode'))
    except ValidationError as exc:
        current_app.logger.info(f"[leaderboard-post] rejected field={exc.field}")
        return _fail(exc.message, 400)
    except StoreError:
        current_app.logger.error("[leaderboard-post] store failure")
        return _fail('Failed to save to leaderboard', 500)
    return jsonify({'success': True, 'data': entry}), 201
