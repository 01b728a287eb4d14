import os
import sys
import pytest

# Ensure the backend root (containing the `sudoku_royale` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from sudoku_royale import create_app, db, socketio
from sudoku_royale.services.battle_royale import RoomSettings, rooms
from sudoku_royale.services.sudoku.generator import cached_puzzle

NAMESPACE = '/battle-royale'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Easy puzzles keep generation quick
    BR_DIFFICULTY = 'easy'
    BR_COUNTDOWN_SEC = 0
    BR_MIN_PLAYERS = 2
    BR_MAX_PLAYERS = 20
    BR_ELIMINATION_INTERVAL_SEC = 60
    BR_ELIMINATION_FRACTION = 0.25
    ROOM_CODE_LENGTH = 6
    ROOM_CODE_ATTEMPTS = 10
    DAILY_DIFFICULTY = 'easy'
    TIME_ATTACK_LIMIT_SEC = 600


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import sudoku_royale.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    rooms.clear()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace=NAMESPACE,
    )
    yield test_client
    if test_client.is_connected(NAMESPACE):
        test_client.disconnect(namespace=NAMESPACE)


@pytest.fixture(scope='session')
def easy_puzzle():
    return cached_puzzle('easy', 4242)


@pytest.fixture()
def settings():
    return RoomSettings.clamped(max_players=20, min_players=2, elimination_interval=60,
                                elimination_fraction=0.25, difficulty='easy')


@pytest.fixture(scope='session')
def open_cells(easy_puzzle):
    """Cells of ``easy_puzzle`` that start blank, in row-major order."""
    return [(r, c) for r in range(9) for c in range(9) if easy_puzzle.givens[r][c] == 0]
