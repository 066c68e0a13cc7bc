import pytest

from slide2048.game.engine import GameEngine
from slide2048.game.rng import SequenceRandom
from slide2048.ui import web
from slide2048.utils.storage import MemoryStore

EXAMPLE = [
    [2, 2, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
]


@pytest.fixture
def session():
    engine = GameEngine(size=4, random_source=SequenceRandom([0.0]))
    current = web.create_session(store=MemoryStore(), engine=engine)
    current.engine.grid = [list(row) for row in EXAMPLE]
    yield current
    web.session = None


@pytest.fixture
def client(session):
    web.app.config['TESTING'] = True
    return web.app.test_client()


@pytest.fixture
def socket_client(session):
    test_client = web.socketio.test_client(web.app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


def events(received, name):
    return [message["args"][0] for message in received if message["name"] == name]


class TestHttp:
    def test_state(self, client):
        data = client.get('/state').get_json()
        assert data["grid"] == EXAMPLE
        assert data["gameState"] == "playing"
        assert data["canUndo"] is False
        assert client.get('/').get_json() == data

    def test_move(self, client):
        data = client.post('/move', json={"direction": "left"}).get_json()
        assert data["moved"] is True
        assert data["result"]["scoreGain"] == 4
        assert data["result"]["mergedTiles"] == [4]
        assert data["result"]["newTile"] == {"r": 0, "c": 1, "value": 2}
        assert data["state"]["grid"][0] == [4, 2, 0, 0]
        assert data["state"]["canUndo"] is True

    def test_noop_move(self, client):
        client.post('/move', json={"direction": "left"})
        data = client.post('/move', json={"direction": "left"}).get_json()
        assert data["moved"] is False
        assert "result" not in data

    def test_bad_direction(self, client):
        response = client.post('/move', json={"direction": "sideways"})
        assert response.status_code == 400
        assert "error" in response.get_json()
        assert client.post('/move').status_code == 400

    def test_undo(self, client):
        client.post('/move', json={"direction": "left"})
        data = client.post('/undo').get_json()
        assert data["undone"] is True
        assert data["grid"] == EXAMPLE
        assert client.post('/undo').get_json()["undone"] is False

    def test_continue_after_win(self, client, session):
        session.engine.grid = [[1024, 1024, 0, 0]] + [[0] * 4 for _ in range(3)]
        data = client.post('/move', json={"direction": "left"}).get_json()
        assert data["result"]["gameState"] == "won"
        assert client.post('/move', json={"direction": "down"}).get_json()["moved"] is False

        data = client.post('/continue').get_json()
        assert data["gameState"] == "playing"
        assert data["wonBefore"] is True

    def test_new_game_and_stats(self, client):
        client.post('/move', json={"direction": "left"})
        data = client.post('/new').get_json()
        assert data["moveId"] == 0
        assert data["score"] == 0

        stats = client.get('/stats').get_json()
        assert stats["gamesPlayed"] == 1
        assert stats["bestTile"] == 4
        assert stats["playTime"] == "0 seconds"


class TestSocket:
    def test_connect_sends_state(self, socket_client):
        states = events(socket_client.get_received(), 'game_state')
        assert states and states[0]["grid"] == EXAMPLE

    def test_move_result(self, socket_client):
        socket_client.get_received()
        socket_client.emit('move', {'direction': 'left'})
        results = events(socket_client.get_received(), 'move_result')
        assert len(results) == 1
        assert results[0]["result"]["scoreGain"] == 4
        assert results[0]["state"]["score"] == 4

    def test_move_rejected(self, socket_client):
        socket_client.get_received()
        socket_client.emit('move', 'left')
        socket_client.emit('move', 'left')
        received = socket_client.get_received()
        assert len(events(received, 'move_result')) == 1
        rejected = events(received, 'move_rejected')
        assert rejected[0]["direction"] == "left"

    def test_invalid_direction(self, socket_client):
        socket_client.get_received()
        socket_client.emit('move', {'direction': 'nowhere'})
        errors = events(socket_client.get_received(), 'error')
        assert "nowhere" in errors[0]["message"]

    def test_undo_and_new_game(self, socket_client, session):
        socket_client.emit('move', {'direction': 'left'})
        socket_client.get_received()

        socket_client.emit('undo')
        states = events(socket_client.get_received(), 'game_state')
        assert states[-1]["grid"] == EXAMPLE

        socket_client.emit('new_game')
        states = events(socket_client.get_received(), 'game_state')
        assert states[-1]["moveId"] == 0

    def test_stats(self, socket_client):
        socket_client.get_received()
        socket_client.emit('stats')
        stats = events(socket_client.get_received(), 'stats_update')
        assert stats[0]["gamesPlayed"] == 0


def test_play_timer_ticks(session, monkeypatch):
    monkeypatch.setattr(web.config, "PLAY_TIMER_INTERVAL", 0.25)
    thread = web.start_play_timer()
    try:
        for _ in range(400):
            if session.stats()["totalPlayTime"] > 0:
                break
            thread.join(0.02)
    finally:
        web.stop_timer()
    total = session.stats()["totalPlayTime"]
    # Fractional intervals are stored as whole seconds
    assert total >= 1
    assert type(total) is int
    assert web.play_timer_thread is None
