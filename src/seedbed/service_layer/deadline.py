"""Deadlines and cancellation for bounded operations.

A `Deadline` pairs an absolute expiry (on an injected `Clock`) with an
optional cancellation event. Every network call in the bootstrap sequence is
run through `run_with_deadline`, which returns control to the caller as soon
as the deadline expires or is cancelled, even if the underlying call is still
blocked.
"""

from __future__ import annotations

import math
import threading
from collections.abc import Callable
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, wait
from typing import TypeVar

from seedbed.domain.errors import DeadlineExceededError, OperationCancelledError
from seedbed.interfaces.clock import Clock, SystemClock

T = TypeVar("T")

# Upper bound on how long a blocked call goes unobserved between checks.
POLL_INTERVAL = 0.05


class Deadline:
    """An absolute point in time after which an operation must give up.

    Args:
        timeout: Seconds from now until expiry. None means no expiry
            (cancellation still applies).
        clock: Time source; defaults to the system clock.
        cancel_event: Event that cancels the deadline when set. A fresh event
            is created when omitted.
    """

    def __init__(
        self,
        timeout: float | None,
        *,
        clock: Clock | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.clock = clock or SystemClock()
        self.cancel_event = cancel_event or threading.Event()
        self.expires_at = (
            math.inf if timeout is None else self.clock.monotonic() + max(timeout, 0.0)
        )

    def __repr__(self) -> str:
        return f"Deadline(remaining={self.remaining():.3f}, cancelled={self.cancelled})"

    def child(self, timeout: float | None) -> Deadline:
        """Return a deadline bounded by both `timeout` and this deadline.

        The child shares this deadline's clock and cancellation event.
        """
        child = Deadline(timeout, clock=self.clock, cancel_event=self.cancel_event)
        child.expires_at = min(child.expires_at, self.expires_at)
        return child

    def remaining(self) -> float:
        """Seconds left before expiry (0.0 once expired, inf if unbounded)."""
        return max(self.expires_at - self.clock.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        """True once the expiry time has been reached."""
        return self.remaining() <= 0.0

    @property
    def cancelled(self) -> bool:
        """True once `cancel()` was called or the shared event was set."""
        return self.cancel_event.is_set()

    @property
    def done(self) -> bool:
        """True if the deadline is expired or cancelled."""
        return self.cancelled or self.expired

    def cancel(self) -> None:
        """Cancel this deadline and every deadline sharing its event."""
        self.cancel_event.set()

    def check(self, operation: str) -> None:
        """Raise if the deadline is cancelled or expired.

        Cancellation takes precedence over expiry.

        Raises:
            OperationCancelledError: If the deadline was cancelled.
            DeadlineExceededError: If the deadline expired.
        """
        if self.cancelled:
            raise OperationCancelledError(operation)
        if self.expired:
            raise DeadlineExceededError(operation)

    def sleep(self, seconds: float) -> None:
        """Sleep for `seconds`, capped at the remaining time; wakes on cancel."""
        duration = min(seconds, self.remaining())
        if duration > 0:
            self.clock.sleep(duration, self.cancel_event)


def run_with_deadline(
    func: Callable[..., T], deadline: Deadline, operation: str, *args, **kwargs
) -> T:
    """Call `func(*args, **kwargs)` and wait for it no longer than `deadline`.

    The call runs on a worker thread. If the deadline expires or is cancelled
    first, the worker is abandoned and an error is raised immediately.

    Args:
        func: The blocking callable to run.
        deadline: Bound on how long to wait for the call.
        operation: Short description used in error messages
            (e.g. "creating collection user").

    Returns:
        Whatever `func` returns.

    Raises:
        OperationCancelledError: If the deadline was cancelled.
        DeadlineExceededError: If the deadline expired before the call returned.
        Exception: Whatever `func` raised.
    """
    deadline.check(operation)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="seedbed-call")
    try:
        future = executor.submit(func, *args, **kwargs)
        while True:
            completed, _ = wait(
                [future],
                timeout=min(deadline.remaining(), POLL_INTERVAL),
                return_when=FIRST_COMPLETED,
            )
            if completed:
                return future.result()
            if deadline.done:
                future.cancel()
                deadline.check(operation)
    finally:
        executor.shutdown(wait=False)
