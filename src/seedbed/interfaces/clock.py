"""Clock interface and the system clock.

Readiness polling and credential issuance read time through this port so
tests can drive backoff and expiry deterministically.
"""

from __future__ import annotations

import abc
import threading
import time
from datetime import datetime, timezone


class Clock(abc.ABC):
    """Contract for a source of time and a cancellable sleep."""

    @abc.abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic timestamp in seconds."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current wall-clock time as a tz-aware UTC datetime."""

    @abc.abstractmethod
    def sleep(self, seconds: float, cancel_event: threading.Event | None = None) -> bool:
        """Block for `seconds`, waking early if `cancel_event` is set.

        Args:
            seconds: Duration to sleep. Non-positive values return immediately.
            cancel_event: Optional event that interrupts the sleep when set.

        Returns:
            bool: True if the sleep was interrupted by cancellation.
        """


class SystemClock(Clock):
    """Clock backed by the process's monotonic and wall clocks."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def sleep(self, seconds: float, cancel_event: threading.Event | None = None) -> bool:
        if seconds <= 0:
            return cancel_event.is_set() if cancel_event is not None else False
        if cancel_event is None:
            time.sleep(seconds)
            return False
        return cancel_event.wait(seconds)
