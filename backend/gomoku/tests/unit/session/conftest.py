import pytest

from gomoku.session.manager import SessionManager
from gomoku.session.registry import RoomRegistry
from gomoku.tests.mocks import MockConnection


@pytest.fixture
def manager(rng):
    registry = RoomRegistry(rng, code_factory=iter(["ROOM01", "ROOM02", "ROOM03", "ROOM04"]).__next__)
    return SessionManager(registry, rng)


@pytest.fixture
def connected(manager):
    """Factory connecting a MockConnection under a fixed identity."""

    async def _connect(client_id: str) -> MockConnection:
        connection = MockConnection(connection_id=f"conn-{client_id}")
        await manager.register_connection(connection, client_id)
        return connection

    return _connect
