"""Abstract connection protocol for JSON text-frame communication."""

from abc import ABC, abstractmethod
from typing import Any

from gomoku.messaging.encoder import encode


class ConnectionProtocol(ABC):
    """
    Abstract interface for a client connection.

    This abstraction allows message handling logic to be tested
    without real WebSocket connections. One JSON object per message.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str:
        """Unique identifier for this connection."""
        ...

    @abstractmethod
    async def send_text(self, data: str) -> None:
        """
        Send a text frame to the client.
        """
        ...

    @abstractmethod
    async def receive_text(self) -> str:
        """
        Receive the next frame from the client as text.
        """
        ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None:
        """
        Close the connection.
        """
        ...

    async def send_message(self, data: dict[str, Any]) -> None:
        """
        Send a message to the client as JSON.
        """
        await self.send_text(encode(data))
