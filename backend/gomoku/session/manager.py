from __future__ import annotations

import contextlib
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import structlog

from gomoku.logic import game
from gomoku.logic.events import RoomUpdateEvent
from gomoku.logic.game import JoinRejection
from gomoku.logic.rng import create_rng
from gomoku.messaging.event_payload import event_message
from gomoku.messaging.types import (
    ErrorMessage,
    ErrorPayload,
    HelloMessage,
    HelloPayload,
    RoomCreatedMessage,
    to_wire,
)
from gomoku.session.broadcast import broadcast_to_connections
from gomoku.session.registry import RoomRegistry

if TYPE_CHECKING:
    import random

    from gomoku.logic.events import RoomEvent
    from gomoku.logic.state import Room
    from gomoku.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()

DEFAULT_MAX_SEND_FAILURES = 3

_REJECTION_MESSAGES = {
    JoinRejection.ROOM_NOT_FOUND: "Room not found",
    JoinRejection.ROOM_FULL: "Room is full",
}


class SessionManager:
    """
    Gateway between live connections and the rooms they play in.

    Owns the connection table, the connection -> identity binding and the
    connection -> room binding, and holds the RoomRegistry. Every handler
    applies its state change synchronously before the first await, so a
    single event loop orders all moves without locks.
    """

    def __init__(
        self,
        registry: RoomRegistry | None = None,
        rng: random.Random | None = None,
        *,
        max_send_failures: int = DEFAULT_MAX_SEND_FAILURES,
    ) -> None:
        self._rng = rng or create_rng()
        self._registry = registry or RoomRegistry(self._rng)
        self._max_send_failures = max_send_failures
        self._connections: dict[str, ConnectionProtocol] = {}
        self._client_ids: dict[str, str] = {}  # connection_id -> client_id
        self._connection_rooms: dict[str, str] = {}  # connection_id -> room code
        self._send_failures: dict[str, int] = {}  # connection_id -> consecutive failed sends

    @property
    def registry(self) -> RoomRegistry:
        return self._registry

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    def get_client_id(self, connection_id: str) -> str | None:
        return self._client_ids.get(connection_id)

    def get_room_code(self, connection_id: str) -> str | None:
        return self._connection_rooms.get(connection_id)

    # --- Connection lifecycle ---

    async def register_connection(self, connection: ConnectionProtocol, client_id: str | None = None) -> str:
        """Bind an identity to the connection and send `hello`. Returns the identity."""
        client_id = client_id or uuid4().hex
        self._connections[connection.connection_id] = connection
        self._client_ids[connection.connection_id] = client_id
        logger.info("client connected", connection_id=connection.connection_id, client_id=client_id)
        await self._send(connection, to_wire(HelloMessage(payload=HelloPayload(client_id=client_id))))
        return client_id

    def unregister_connection(self, connection: ConnectionProtocol) -> None:
        connection_id = connection.connection_id
        self._connections.pop(connection_id, None)
        self._client_ids.pop(connection_id, None)
        self._connection_rooms.pop(connection_id, None)
        self._send_failures.pop(connection_id, None)

    async def shutdown(self) -> None:
        """Close every live connection and forget all rooms."""
        for connection in list(self._connections.values()):
            with contextlib.suppress(RuntimeError, OSError):
                await connection.close(code=1001, reason="server_shutdown")
        self._connections.clear()
        self._client_ids.clear()
        self._connection_rooms.clear()
        self._send_failures.clear()
        self._registry.clear()

    # --- Room operations ---

    def create_room_code(self) -> str:
        """Create a room nobody is attached to yet and return its invite code."""
        return self._registry.create_room().code

    async def create_room(self, connection: ConnectionProtocol) -> None:
        client_id = self._client_ids.get(connection.connection_id)
        if client_id is None:
            return
        await self._detach(connection)

        room = self._registry.create_room()
        events = game.open_room(room, connection.connection_id, client_id)
        self._connection_rooms[connection.connection_id] = room.code
        created = to_wire(RoomCreatedMessage(payload=room.to_public()))

        await self._broadcast(room, events)
        await self._send(connection, created)

    async def join_room(self, connection: ConnectionProtocol, code: str | None) -> None:
        client_id = self._client_ids.get(connection.connection_id)
        if client_id is None:
            return
        room = self._registry.get_room(code) if code else None
        current_code = self._connection_rooms.get(connection.connection_id)

        if room is not None and room.code == current_code:
            # already seated here; just resync this client
            await self._send(connection, event_message(RoomUpdateEvent(room=room.to_public())))
            return

        result = game.join_room(room, connection.connection_id, client_id, self._rng)
        if isinstance(result, JoinRejection):
            logger.info("join rejected", code=code, client_id=client_id, reason=result)
            error = ErrorMessage(payload=ErrorPayload(message=_REJECTION_MESSAGES[result]))
            await self._send(connection, to_wire(error))
            return

        if current_code is not None:
            await self._detach(connection)
        self._connection_rooms[connection.connection_id] = room.code
        await self._broadcast(room, result)

    async def place_stone(self, connection: ConnectionProtocol, x: int, y: int) -> None:
        located = self._locate(connection)
        if located is None:
            return
        room, client_id = located
        await self._broadcast(room, game.place_stone(room, client_id, x, y))

    async def request_restart(self, connection: ConnectionProtocol) -> None:
        located = self._locate(connection)
        if located is None:
            return
        room, client_id = located
        await self._broadcast(room, game.request_restart(room, client_id))

    async def leave_room(self, connection: ConnectionProtocol) -> None:
        await self._detach(connection)

    # --- Internal helpers ---

    def _locate(self, connection: ConnectionProtocol) -> tuple[Room, str] | None:
        """Resolve the room and identity bound to a connection, if both still exist."""
        code = self._connection_rooms.get(connection.connection_id)
        client_id = self._client_ids.get(connection.connection_id)
        if code is None or client_id is None:
            return None
        room = self._registry.get_room(code)
        if room is None:
            return None
        return room, client_id

    async def _detach(self, connection: ConnectionProtocol) -> None:
        """Remove the connection from its room; delete the room once nobody is left."""
        code = self._connection_rooms.pop(connection.connection_id, None)
        if code is None:
            return
        room = self._registry.get_room(code)
        if room is None:
            return
        client_id = self._client_ids.get(connection.connection_id, "")
        events = game.leave_room(room, connection.connection_id, client_id)
        if room.is_empty:
            self._registry.delete_room(room.code)
        await self._broadcast(room, events)

    async def _broadcast(self, room: Room, events: list[RoomEvent]) -> None:
        for event in events:
            message = event_message(event)
            recipients = [self._connections[cid] for cid in list(room.connections) if cid in self._connections]
            failed = await broadcast_to_connections(recipients, message)
            await self._record_send_results(recipients, failed)

    async def _send(self, connection: ConnectionProtocol, message: dict[str, Any]) -> None:
        failed = await broadcast_to_connections([connection], message)
        await self._record_send_results([connection], failed)

    async def _record_send_results(self, recipients: list[ConnectionProtocol], failed: list[str]) -> None:
        """Track consecutive send failures and prune connections that keep failing."""
        to_prune: list[ConnectionProtocol] = []
        for connection in recipients:
            connection_id = connection.connection_id
            if connection_id not in failed:
                self._send_failures.pop(connection_id, None)
                continue
            count = self._send_failures.get(connection_id, 0) + 1
            self._send_failures[connection_id] = count
            if count >= self._max_send_failures:
                to_prune.append(connection)

        for connection in to_prune:
            await self._prune(connection)

    async def _prune(self, connection: ConnectionProtocol) -> None:
        logger.warning(
            "pruning unresponsive connection",
            connection_id=connection.connection_id,
            failures=self._send_failures.get(connection.connection_id),
        )
        self._send_failures.pop(connection.connection_id, None)
        with contextlib.suppress(RuntimeError, OSError):
            await connection.close(code=1011, reason="send_failed")
        await self._detach(connection)
