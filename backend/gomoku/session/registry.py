"""In-memory room registry keyed by invite code."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from gomoku.logic.rng import create_rng, generate_invite_code
from gomoku.logic.state import Room

if TYPE_CHECKING:
    import random
    from collections.abc import Callable

logger = structlog.get_logger()

DEFAULT_MAX_CODE_ATTEMPTS = 16


class RoomCodeExhaustedError(RuntimeError):
    """No unused invite code was found within the attempt budget."""


def normalize_code(code: str) -> str:
    """Invite codes are typed by humans: ignore surrounding whitespace and case."""
    return code.strip().upper()


class RoomRegistry:
    """
    Own every live Room for one server process.

    Codes come from `code_factory` (default: random invite codes drawn from
    `rng`). A generated code that is already in use is retried rather than
    overwriting the existing room.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        *,
        code_factory: Callable[[], str] | None = None,
        max_code_attempts: int = DEFAULT_MAX_CODE_ATTEMPTS,
    ) -> None:
        self._rng = rng or create_rng()
        self._code_factory = code_factory or (lambda: generate_invite_code(self._rng))
        self._max_code_attempts = max_code_attempts
        self._rooms: dict[str, Room] = {}

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def create_room(self) -> Room:
        for _ in range(self._max_code_attempts):
            code = self._code_factory()
            if code not in self._rooms:
                room = Room(code=code)
                self._rooms[code] = room
                logger.info("room created", room=code, room_count=self.room_count)
                return room
            logger.warning("invite code collision, retrying", room=code)
        raise RoomCodeExhaustedError(f"no free invite code after {self._max_code_attempts} attempts")

    def get_room(self, code: str) -> Room | None:
        return self._rooms.get(normalize_code(code))

    def delete_room(self, code: str) -> None:
        if self._rooms.pop(code, None) is not None:
            logger.info("room deleted", room=code, room_count=self.room_count)

    def clear(self) -> None:
        """Drop every room (server shutdown)."""
        self._rooms.clear()
