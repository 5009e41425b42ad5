from __future__ import annotations

import contextlib
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from gomoku.messaging.encoder import DecodeError, decode
from gomoku.messaging.protocol import ConnectionProtocol
from gomoku.server.rate_limit import DEFAULT_MESSAGE_BURST, DEFAULT_MESSAGE_RATE, MessageThrottle

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import Callable

    from gomoku.messaging.router import MessageRouter

# Client-chosen identity tokens travel in invite URLs.
_CLIENT_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")

DEFAULT_MAX_DECODE_ERRORS = 5
DECODE_ERROR_CLOSE_CODE = 4004


@dataclass(frozen=True)
class TransportLimits:
    """Per-connection limits applied by the receive loop."""

    message_rate: float = DEFAULT_MESSAGE_RATE
    message_burst: int = DEFAULT_MESSAGE_BURST
    # consecutive undecodable frames before the socket is closed
    max_decode_errors: int = DEFAULT_MAX_DECODE_ERRORS


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    async def send_text(self, data: str) -> None:
        try:
            await self._websocket.send_text(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_text(self) -> str:
        """Return the next frame as text. Binary frames are read as UTF-8."""
        message = await self._websocket.receive()
        if message["type"] == "websocket.disconnect":
            raise ConnectionError("WebSocket already disconnected")
        text = message.get("text")
        if text is not None:
            return text
        return (message.get("bytes") or b"").decode("utf-8", errors="replace")

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


def resolve_client_id(websocket: WebSocket) -> str | None:
    """Return the `cid` query parameter if it is a well-formed token."""
    client_id = websocket.query_params.get("cid")
    if client_id and _CLIENT_ID_PATTERN.fullmatch(client_id):
        return client_id
    return None


async def serve_connection(
    connection: ConnectionProtocol,
    router: MessageRouter,
    client_id: str | None = None,
    limits: TransportLimits | None = None,
    *,
    clock: Callable[[], float] = time.monotonic,
) -> None:
    """
    Greet the connection, feed its frames to the router until it goes away,
    then run the departure path.

    Undecodable frames are dropped and counted; a valid frame clears the count.
    Frames over the throttle allowance are dropped after decoding, so garbage
    keeps counting toward the close even while throttled.
    """
    limits = limits or TransportLimits()
    throttle = MessageThrottle(limits.message_rate, limits.message_burst, clock)
    decode_errors = 0

    client_id = await router.handle_connect(connection, client_id)
    structlog.contextvars.bind_contextvars(client_id=client_id)
    logger.info("client session started")

    try:
        while True:
            raw = await connection.receive_text()

            try:
                data = decode(raw)
            except DecodeError as e:
                decode_errors += 1
                logger.debug("dropping undecodable frame", error=str(e), strikes=decode_errors)
                if decode_errors >= limits.max_decode_errors:
                    logger.info("too many decode errors, disconnecting")
                    await connection.close(code=DECODE_ERROR_CLOSE_CODE, reason="too_many_decode_errors")
                    return
                continue

            decode_errors = 0

            if not throttle.admit():
                logger.warning("rate limited, dropping message", message_type=data.get("type"))
                continue
            await router.handle_message(connection, data)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        logger.info("client session ended")
        await router.handle_disconnect(connection)


async def websocket_endpoint(
    websocket: WebSocket,
    router: MessageRouter,
    limits: TransportLimits | None = None,
) -> None:
    await websocket.accept()

    connection = WebSocketConnection(websocket)
    structlog.contextvars.bind_contextvars(connection_id=connection.connection_id)
    try:
        await serve_connection(connection, router, resolve_client_id(websocket), limits)
    finally:
        structlog.contextvars.clear_contextvars()
