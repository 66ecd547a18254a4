import os
import random
import sys
import pytest

# Ensure the backend root (containing the `duorelay` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from duorelay import create_app, socketio
from duorelay.broadcast import Broadcaster
from duorelay.services.match import MatchCoordinator


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    ALLOWED_ORIGINS = '*'
    SOCKETIO_NAMESPACE = '/'
    GAME_OVER_GUARD = True
    LOG_LEVEL = 'DEBUG'


class RecordingBroadcaster(Broadcaster):
    """Keeps every outbound event as (channel, event, payload)."""

    def __init__(self):
        self.sent = []

    def send(self, channel, event, payload):
        self.sent.append((channel, event, payload))

    def to(self, channel):
        return [(event, payload) for ch, event, payload in self.sent if ch == channel]

    def named(self, event):
        return [(ch, payload) for ch, name, payload in self.sent if name == event]

    def clear(self):
        self.sent = []


@pytest.fixture()
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture()
def coordinator(broadcaster):
    return MatchCoordinator(broadcaster, rng=random.Random(1234))


@pytest.fixture()
def paired(coordinator, broadcaster):
    """A live session between sid-a (player1) and sid-b (player2)."""
    coordinator.seek('sid-a', 'sid-a', 'Alice', 'knight')
    session = coordinator.seek('sid-b', 'sid-b', 'Bob', 'mage')
    broadcaster.clear()
    return session


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    created = []

    def _make():
        test_client = socketio.test_client(
            flask_app,
            flask_test_client=flask_app.test_client(),
            namespace='/'
        )
        test_client.get_received('/')  # drop the connect ack
        created.append(test_client)
        return test_client

    yield _make
    for test_client in created:
        try:
            if test_client.is_connected('/'):
                test_client.disconnect(namespace='/')
        except Exception:
            pass
