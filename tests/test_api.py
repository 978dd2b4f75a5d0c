import pytest

from memorygame.errors import StoreError
from memorygame.services.leaderboard.store import ScoreStore


def _post(client, **body):
    return client.post('/api/leaderboard', json=body)


def test_index(client):
    res = client.get('/')
    assert res.status_code == 200
    assert 'message' in res.get_json()


def test_post_entry(client):
    res = _post(client, name='  Alice ', moves=9, time=31, mode='challenge')
    assert res.status_code == 201
    body = res.get_json()
    assert body['success'] is True
    entry = body['data']
    assert entry['name'] == 'Alice'
    assert entry['moves'] == 9
    assert entry['time'] == 31
    assert entry['mode'] == 'challenge'
    assert set(entry) == {'id', 'name', 'moves', 'time', 'date', 'mode'}


def test_post_without_mode_defaults_to_normal(client):
    res = _post(client, name='Bob', moves=8, time=40)
    assert res.status_code == 201
    assert res.get_json()['data']['mode'] == 'normal'


@pytest.mark.parametrize('body, message', [
    ({'name': '', 'moves': 3, 'time': 10}, 'Name is required'),
    ({'moves': 3, 'time': 10}, 'Name is required'),
    ({'name': 'x' * 21, 'moves': 3, 'time': 10}, 'Name must be at most 20 characters'),
    ({'name': 'Al', 'moves': -1, 'time': 10}, 'Invalid moves count'),
    ({'name': 'Al', 'moves': 3, 'time': -1}, 'Invalid time'),
    ({'name': 'Al', 'moves': 3, 'time': '10'}, 'Invalid time'),
    ({'name': 'Al', 'moves': 3, 'time': 10, 'mode': 'bogus'}, 'Invalid game mode'),
    ({'name': '', 'moves': -1, 'time': -1, 'mode': 'bogus'}, 'Name is required'),
])
def test_post_validation(client, body, message):
    res = client.post('/api/leaderboard', json=body)
    assert res.status_code == 400
    assert res.get_json() == {'success': False, 'error': message}


def test_post_non_json_body(client):
    res = client.post('/api/leaderboard', data='not json', content_type='text/plain')
    assert res.status_code == 400
    assert res.get_json()['error'] == 'Name is required'


def test_get_grouped_by_mode(client):
    _post(client, name='N1', moves=10, time=60)
    _post(client, name='C1', moves=8, time=14, mode='challenge')
    res = client.get('/api/leaderboard')
    assert res.status_code == 200
    data = res.get_json()['data']
    assert [e['name'] for e in data['normal']] == ['N1']
    assert [e['name'] for e in data['challenge']] == ['C1']


def test_get_single_mode(client):
    _post(client, name='N1', moves=10, time=60)
    _post(client, name='C1', moves=8, time=14, mode='challenge')
    res = client.get('/api/leaderboard?mode=normal')
    assert res.status_code == 200
    assert [e['name'] for e in res.get_json()['data']] == ['N1']


def test_get_global_list_sorted(client):
    _post(client, name='A', moves=3, time=50)
    _post(client, name='B', moves=2, time=99, mode='challenge')
    _post(client, name='C', moves=2, time=10)
    res = client.get('/api/leaderboard?mode=all')
    assert res.status_code == 200
    data = res.get_json()['data']
    assert [(e['moves'], e['time']) for e in data] == [(2, 10), (2, 99), (3, 50)]


def test_get_unknown_mode(client):
    res = client.get('/api/leaderboard?mode=bogus')
    assert res.status_code == 400
    assert res.get_json() == {'success': False, 'error': 'Invalid game mode'}


def test_bare_route(client):
    res = client.post('/leaderboard', json={'name': 'Al', 'moves': 3, 'time': 10})
    assert res.status_code == 201
    res = client.get('/leaderboard?mode=all')
    assert res.status_code == 200
    assert len(res.get_json()['data']) == 1


def test_get_store_failure(client, monkeypatch):
    def _boom(self, limit, mode=None):
        raise StoreError('Failed to read leaderboard')
    monkeypatch.setattr(ScoreStore, 'query_top', _boom)
    res = client.get('/api/leaderboard')
    assert res.status_code == 500
    assert res.get_json() == {'success': False, 'error': 'Failed to fetch leaderboard'}


def test_post_store_failure(client, monkeypatch):
    def _boom(self, name, moves, time_seconds, mode='normal'):
        raise StoreError('Failed to save leaderboard entry')
    monkeypatch.setattr(ScoreStore, 'insert', _boom)
    res = _post(client, name='Al', moves=3, time=10)
    assert res.status_code == 500
    assert res.get_json() == {'success': False, 'error': 'Failed to save to leaderboard'}


def test_validation_checked_before_store(client, monkeypatch):
    def _boom(self, *args, **kwargs):
        raise StoreError('unreachable')
    monkeypatch.setattr(ScoreStore, 'insert', _boom)
    res = _post(client, name='Al', moves=-1, time=10)
    assert res.status_code == 400


def test_post_oversized_moves_is_rejected(client):
    res = _post(client, name='Al', moves=int('9' * 30), time=10)
    assert res.status_code == 400
    assert res.get_json() == {'success': False, 'error': 'Invalid moves count'}


def test_post_oversized_time_is_rejected(client):
    res = _post(client, name='Al', moves=3, time=int('9' * 400))
    assert res.status_code == 400
    assert res.get_json() == {'success': False, 'error': 'Invalid time'}


def test_post_driver_overflow_maps_to_500(client, monkeypatch):
    from memorygame import db

    def _overflow():
        raise OverflowError('Python int too large to convert to SQLite INTEGER')
    monkeypatch.setattr(db.session, 'commit', _overflow)
    res = _post(client, name='Al', moves=3, time=10)
    assert res.status_code == 500
    assert res.get_json() == {'success': False, 'error': 'Failed to save to leaderboard'}
