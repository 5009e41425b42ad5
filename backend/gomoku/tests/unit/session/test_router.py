from unittest.mock import AsyncMock

import pytest

from gomoku.messaging.router import MessageRouter
from gomoku.tests.mocks import MockConnection


@pytest.fixture
def session_mock():
    mock = AsyncMock()
    mock.register_connection.return_value = "alice"
    # unregister_connection is synchronous
    mock.unregister_connection = lambda connection: None
    return mock


class TestMessageRouter:
    @pytest.mark.parametrize(
        ("message", "method"),
        [
            ({"type": "create_room"}, "create_room"),
            ({"type": "request_restart", "payload": {}}, "request_restart"),
            ({"type": "leave_room", "payload": None}, "leave_room"),
        ],
    )
    async def test_dispatch_without_payload(self, session_mock, message, method):
        connection = MockConnection()
        await MessageRouter(session_mock).handle_message(connection, message)
        getattr(session_mock, method).assert_awaited_once_with(connection)

    async def test_dispatch_join_room(self, session_mock):
        connection = MockConnection()
        await MessageRouter(session_mock).handle_message(
            connection, {"type": "join_room", "payload": {"code": "ABC123"}}
        )
        session_mock.join_room.assert_awaited_once_with(connection, "ABC123")

    async def test_dispatch_place_stone(self, session_mock):
        connection = MockConnection()
        await MessageRouter(session_mock).handle_message(
            connection, {"type": "place_stone", "payload": {"x": 1, "y": 2}}
        )
        session_mock.place_stone.assert_awaited_once_with(connection, 1, 2)

    async def test_invalid_message_dropped_silently(self, session_mock):
        connection = MockConnection()
        router = MessageRouter(session_mock)

        await router.handle_message(connection, {"type": "place_stone", "payload": {"x": "left"}})
        await router.handle_message(connection, {"type": "shout"})

        session_mock.place_stone.assert_not_awaited()
        assert connection.sent_messages == []

    async def test_connect_returns_identity(self, session_mock):
        connection = MockConnection()
        assert await MessageRouter(session_mock).handle_connect(connection, "alice") == "alice"
        session_mock.register_connection.assert_awaited_once_with(connection, "alice")

    async def test_disconnect_leaves_room(self, session_mock):
        connection = MockConnection()
        await MessageRouter(session_mock).handle_disconnect(connection)
        session_mock.leave_room.assert_awaited_once_with(connection)


class TestRouterWithSessionManager:
    async def test_disconnect_deletes_lone_room(self, message_router, session_manager):
        connection = MockConnection()
        await message_router.handle_connect(connection, "alice")
        await message_router.handle_message(connection, {"type": "create_room", "payload": {}})
        code = session_manager.get_room_code(connection.connection_id)
        assert code is not None

        await message_router.handle_disconnect(connection)

        assert session_manager.registry.get_room(code) is None
        assert session_manager.connection_count == 0
