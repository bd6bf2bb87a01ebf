import os
import sys
import pytest

# Ensure the backend root (containing the `playsib` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from config import Config
from playsib import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SESSION_DURATION_SEC = 60
    QUESTION_DURATION_SEC = 20
    REVEAL_DELAY_SEC = 2
    POINTS_PER_CORRECT = 10
    WHEEL_MIN_SPINS = 4
    WHEEL_MAX_SPINS = 7
    LEADERBOARD_LIMIT = 50
    AROUND_RANGE = 5
    WEEKLY_WINDOW_DAYS = 7
    CATEGORIES = list(Config.CATEGORIES)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import playsib.models  # noqa: F401
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
def seeded(flask_app):
    from playsib.seed import seed_questions
    seed_questions(db.session, flask_app.config['CATEGORIES'])
    return flask_app.config['CATEGORIES']


@pytest.fixture()
def make_user(flask_app):
    from playsib.models import User

    def _make(nickname, high_score=0, created_at=None):
        user = User(nickname=nickname, high_score=high_score)
        if created_at is not None:
            user.created_at = created_at
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture()
def ticking(flask_app):
    """Run the real once-per-second ticker against a 2 second session."""
    flask_app.config.update(ENABLE_TICKER_IN_TESTS=True, SESSION_DURATION_SEC=2)
    return flask_app
