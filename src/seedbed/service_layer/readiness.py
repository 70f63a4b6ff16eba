"""Readiness polling for a database endpoint.

`ConnectionStatusChecker` repeatedly checks a server (by listing its
databases) until a check succeeds or the caller's deadline fires. Between
failed checks it sleeps ``attempt * base_interval`` seconds, so a slow
instance start is tolerated without busy-polling.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from seedbed.domain.errors import (
    ClientError,
    DeadlineExceededError,
    OperationCancelledError,
    ReadinessCancelledError,
    UnreachableError,
)

from .deadline import Deadline, run_with_deadline

if TYPE_CHECKING:
    from seedbed.interfaces.database import DatabaseClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_INTERVAL = 0.1


def backoff_delay(attempt: int, base_interval: float = DEFAULT_BASE_INTERVAL) -> float:
    """Return the linear backoff delay after failed check number `attempt`."""
    return attempt * base_interval


@dataclass(frozen=True)
class ReadinessResult:
    """Outcome of a successful readiness check."""

    attempts: int
    elapsed: float


class ConnectionStatusChecker:
    """Poll a database server until it accepts requests.

    Args:
        base_interval: Backoff unit in seconds; the n-th failed check is
            followed by a sleep of ``n * base_interval``. Must be positive.
    """

    def __init__(self, base_interval: float = DEFAULT_BASE_INTERVAL) -> None:
        if base_interval <= 0:
            raise ValueError("base_interval must be > 0")
        self.base_interval = base_interval

    def check_ready(self, client: DatabaseClient, deadline: Deadline) -> ReadinessResult:
        """Block until `client` can list databases or `deadline` fires.

        The deadline is checked before every check, so an already expired or
        cancelled deadline returns without issuing one.

        Args:
            client: Client bound to the server to check.
            deadline: Bound on the whole polling loop.

        Returns:
            ReadinessResult: Number of checks issued and time spent.

        Raises:
            ReadinessCancelledError: If the deadline was cancelled first.
            UnreachableError: If the deadline expired before a check succeeded.
        """
        endpoint = client.endpoint
        started = deadline.clock.monotonic()
        attempts = 0
        last_error: Exception | None = None

        while True:
            if deadline.cancelled:
                raise ReadinessCancelledError(endpoint, attempts) from last_error
            if deadline.expired:
                raise UnreachableError(endpoint, attempts) from last_error

            attempts += 1
            try:
                run_with_deadline(
                    client.list_databases, deadline, f"probing {endpoint}"
                )
            except OperationCancelledError as e:
                raise ReadinessCancelledError(endpoint, attempts) from e
            except DeadlineExceededError as e:
                raise UnreachableError(endpoint, attempts) from e
            except ClientError as e:
                last_error = e
                delay = backoff_delay(attempts, self.base_interval)
                logger.debug(
                    "Check %d of %s failed (%s); retrying in %.1fs",
                    attempts,
                    endpoint,
                    e,
                    delay,
                )
                deadline.sleep(delay)
                continue

            elapsed = deadline.clock.monotonic() - started
            logger.debug("%s ready after %d check(s)", endpoint, attempts)
            return ReadinessResult(attempts=attempts, elapsed=elapsed)
