"""Best-effort fan-out of one message to a group of connections."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gomoku.messaging.protocol import ConnectionProtocol

logger = structlog.get_logger()


async def broadcast_to_connections(
    connections: Iterable[ConnectionProtocol],
    message: dict[str, Any],
) -> list[str]:
    """Send `message` to every connection and return the ids whose send failed.

    A dead or closed recipient never aborts delivery to the others. The
    caller snapshots `connections` so departures during the awaits are safe.
    """
    failed: list[str] = []
    for connection in connections:
        try:
            await connection.send_message(message)
        except (RuntimeError, OSError) as e:
            logger.debug("send failed", connection_id=connection.connection_id, error=str(e))
            failed.append(connection.connection_id)
    return failed
