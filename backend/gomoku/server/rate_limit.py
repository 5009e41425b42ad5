"""Per-connection throttling of client messages."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

# A player sends one message per click. 20/sec sustained with a burst of 40
# leaves room for a reconnecting client replaying its last few actions.
DEFAULT_MESSAGE_RATE = 20.0
DEFAULT_MESSAGE_BURST = 40


class MessageThrottle:
    """
    Token bucket over the messages of one connection.

    The allowance starts full at `burst`, refills continuously at `rate` per
    second and never exceeds `burst`. Each admitted message spends one unit.
    `clock` returns seconds and defaults to time.monotonic.
    """

    def __init__(
        self,
        rate: float = DEFAULT_MESSAGE_RATE,
        burst: int = DEFAULT_MESSAGE_BURST,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._rate = rate
        self._burst = float(burst)
        self._clock = clock
        self._allowance = self._burst
        self._checked_at = clock()

    @property
    def allowance(self) -> float:
        return self._allowance

    def admit(self) -> bool:
        """Spend one unit if available. False means the message should be dropped."""
        now = self._clock()
        refill = (now - self._checked_at) * self._rate
        self._checked_at = now
        self._allowance = min(self._burst, self._allowance + refill)
        if self._allowance < 1.0:
            return False
        self._allowance -= 1.0
        return True
