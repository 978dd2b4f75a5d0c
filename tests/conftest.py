import os
import random
import sys

import pytest

# Ensure the project root (containing the `memorygame` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from memorygame import create_app, db, socketio
from memorygame.services.games.engine import GameEngine
from memorygame.services.games.scheduler import ManualScheduler


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:3000']
    GAME_SCHEDULER = 'manual'
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import memorygame.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def clock():
    return ManualScheduler()


@pytest.fixture()
def submissions():
    return []


@pytest.fixture()
def engine(clock, submissions):
    def _record(score):
        submissions.append(score)
        return score
    return GameEngine(clock, submit_score=_record, rng=random.Random(1234))


def pairs_of(session):
    """Card ids grouped by symbol, in deck order."""
    by_symbol = {}
    for card in session.cards:
        by_symbol.setdefault(card.symbol, []).append(card.id)
    return list(by_symbol.values())


def mismatched_ids(session):
    first = session.cards[0]
    other = next(c for c in session.cards if c.symbol != first.symbol)
    return first.id, other.id
