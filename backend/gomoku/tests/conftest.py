import pytest

from gomoku.logic.rng import create_rng
from gomoku.messaging.router import MessageRouter
from gomoku.server.settings import GameServerSettings
from gomoku.session.manager import SessionManager
from gomoku.session.registry import RoomRegistry
from gomoku.tests.mocks import MockConnection

TEST_SEED = 1234


@pytest.fixture
def rng():
    return create_rng(TEST_SEED)


@pytest.fixture
def registry(rng):
    return RoomRegistry(rng)


@pytest.fixture
def session_manager(registry, rng):
    return SessionManager(registry, rng)


@pytest.fixture
def message_router(session_manager):
    return MessageRouter(session_manager)


@pytest.fixture
def mock_connection():
    return MockConnection()


@pytest.fixture
def settings():
    return GameServerSettings(rng_seed=TEST_SEED)
