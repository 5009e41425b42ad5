from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from gomoku.messaging.types import (
    CreateRoomMessage,
    JoinRoomMessage,
    LeaveRoomMessage,
    PlaceStoneMessage,
    RequestRestartMessage,
    parse_client_message,
)

if TYPE_CHECKING:
    from gomoku.messaging.protocol import ConnectionProtocol
    from gomoku.session.manager import SessionManager

logger = structlog.get_logger()


class MessageRouter:
    """
    Routes incoming messages to the session manager.

    This class contains pure dispatch logic and can be tested
    without real WebSocket connections.
    """

    def __init__(self, session_manager: SessionManager) -> None:
        self._session_manager = session_manager

    async def handle_message(
        self,
        connection: ConnectionProtocol,
        raw_message: dict[str, Any],
    ) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            # malformed envelopes are dropped without a reply
            logger.warning(
                "dropping invalid message",
                connection_id=connection.connection_id,
                error_count=e.error_count() if isinstance(e, ValidationError) else 1,
            )
            return

        if isinstance(message, CreateRoomMessage):
            await self._session_manager.create_room(connection)
        elif isinstance(message, JoinRoomMessage):
            await self._session_manager.join_room(connection, message.payload.code)
        elif isinstance(message, PlaceStoneMessage):
            await self._session_manager.place_stone(connection, message.payload.x, message.payload.y)
        elif isinstance(message, RequestRestartMessage):
            await self._session_manager.request_restart(connection)
        elif isinstance(message, LeaveRoomMessage):
            await self._session_manager.leave_room(connection)

    async def handle_connect(self, connection: ConnectionProtocol, client_id: str | None = None) -> str:
        """Bind the connection to an identity and greet it. Returns the identity."""
        return await self._session_manager.register_connection(connection, client_id)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        await self._session_manager.leave_room(connection)
        self._session_manager.unregister_connection(connection)
