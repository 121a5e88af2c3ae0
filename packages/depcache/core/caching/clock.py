"""Current-time providers for cache expiry.

All times are integer milliseconds since the Unix epoch.
"""

import time
from typing import Protocol


class Clock(Protocol):
    """Protocol for current-time providers."""

    def now_ms(self) -> int:
        """Return the current time in epoch milliseconds."""
        ...


class SystemClock:
    """Wall-clock time from time.time()."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """
    Manually advanced clock for deterministic tests.

    Example:
        >>> clock = ManualClock(start_ms=0)
        >>> clock.advance(999)
        >>> clock.now_ms()
        999
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now_ms = start_ms

    def now_ms(self) -> int:
        return self._now_ms

    def advance(self, ms: int) -> None:
        """Move the clock forward by ms milliseconds."""
        if ms < 0:
            raise ValueError(f"Cannot move clock backwards: {ms}")
        self._now_ms += ms

    def set(self, now_ms: int) -> None:
        """Jump to an absolute time."""
        self._now_ms = now_ms
