import os
import sys
import pytest

# Ensure the backend root (containing the `scanrelay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from scanrelay import create_app, socketio
from scanrelay.services.sessions.aggregation import AggregationEngine
from scanrelay.services.sessions.lifecycle import LifecycleManager
from scanrelay.services.sessions.scheduler import EvictionScheduler
from scanrelay.services.sessions.scoring import ScoringTable
from scanrelay.services.sessions.store import SessionStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SESSION_GRACE_PERIOD_SEC = 0
    BROADCAST_SCOPE = 'global'
    SOCKETIO_NAMESPACE = '/'


class RecordingGateway:
    """Collects outbound events instead of emitting them."""

    def __init__(self):
        self.broadcasts = []
        self.replies = []
        self.joined = []

    def broadcast(self, event, payload, session_id=None):
        self.broadcasts.append((event, payload))

    def reply(self, event, payload):
        self.replies.append((event, payload))

    def join(self, session_id):
        self.joined.append(session_id)

    def broadcast_names(self):
        return [name for name, _ in self.broadcasts]

    def clear(self):
        self.broadcasts.clear()
        self.replies.clear()


class ManualTasks:
    """Background task runner that holds tasks until ``run_all`` is called."""

    def __init__(self):
        self.tasks = []

    def start(self, fn, *args):
        self.tasks.append((fn, args))

    def run_all(self):
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)


class FakeClock:
    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


@pytest.fixture()
def store():
    return SessionStore()


@pytest.fixture()
def gateway():
    return RecordingGateway()


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def scoring():
    return ScoringTable({'APEL': 20, 'JERUK': 15, 'PISANG': 10, 'MANGGA': 25}, default=10)


@pytest.fixture()
def tasks():
    return ManualTasks()


@pytest.fixture()
def scheduler(store, tasks):
    return EvictionScheduler(store, tasks.start, sleep=lambda _: None)


@pytest.fixture()
def engine(store, scoring, gateway, clock):
    return AggregationEngine(store, scoring, gateway, clock=clock)


@pytest.fixture()
def lifecycle(store, gateway, scheduler, clock):
    return LifecycleManager(store, gateway, scheduler, grace_period_sec=30, clock=clock)


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
