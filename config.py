import os


def _origins(value):
    return [o.strip() for o in value.split(',') if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///memorygame.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ORIGINS = _origins(os.environ.get(
        'CORS_ORIGINS',
        'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
    ))
    # Board: number of distinct symbols, each dealt twice
    PAIR_COUNT = int(os.environ.get('PAIR_COUNT', '8'))
    # Phase timers (seconds)
    MEMORIZE_DURATION_SEC = int(os.environ.get('MEMORIZE_DURATION_SEC', '5'))
    CHALLENGE_TIME_LIMIT_SEC = int(os.environ.get('CHALLENGE_TIME_LIMIT_SEC', '15'))
    # Reveal pause before a flipped pair is resolved (ms)
    MATCH_DELAY_MS = int(os.environ.get('MATCH_DELAY_MS', '500'))
    MISMATCH_DELAY_MS = int(os.environ.get('MISMATCH_DELAY_MS', '1000'))
    # Leaderboard
    LEADERBOARD_LIMIT = int(os.environ.get('LEADERBOARD_LIMIT', '10'))
    NAME_MAX_LENGTH = int(os.environ.get('NAME_MAX_LENGTH', '20'))
    # 'socketio' runs timers as Socket.IO background tasks; 'manual' needs an explicit clock
    GAME_SCHEDULER = os.environ.get('GAME_SCHEDULER', 'socketio')
