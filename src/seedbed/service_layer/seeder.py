"""Transactional loading of seed data."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seedbed.domain.errors import SeedbedError, SeedError
from seedbed.domain.value_objects import SeedBatch

from .deadline import Deadline, run_with_deadline

if TYPE_CHECKING:
    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.database import Database

logger = logging.getLogger(__name__)

DEFAULT_SEED_TIMEOUT = 5.0


class Seeder:
    """Run a seed script as one query against a ready schema.

    Atomicity comes from the database's query engine: when any statement of
    the script fails, the engine discards the whole script. The seeder only
    reports the failure, with the script attached.

    Args:
        timeout: Seconds allowed for the seed query.
        clock: Time source for the seed deadline.
    """

    def __init__(
        self, timeout: float = DEFAULT_SEED_TIMEOUT, clock: Clock | None = None
    ) -> None:
        self.timeout = timeout
        self.clock = clock

    def seed(
        self,
        db: Database,
        script: SeedBatch | str,
        timeout: float | None = None,
        *,
        deadline: Deadline | None = None,
    ) -> None:
        """Execute `script` against `db`.

        Args:
            db: Target logical database, already migrated.
            script: The seed batch (or bare script text).
            timeout: Overrides the seeder's default timeout.
            deadline: Optional outer deadline for cancellation.

        Raises:
            SeedError: If the script failed; none of its effects remain.
        """
        batch = SeedBatch(script) if isinstance(script, str) else script
        if batch.is_empty:
            logger.debug("Empty seed script for %s; nothing to do", db.name)
            return

        timeout = self.timeout if timeout is None else timeout
        call_deadline = (
            deadline.child(timeout)
            if deadline is not None
            else Deadline(timeout, clock=self.clock)
        )
        try:
            run_with_deadline(
                db.run_query,
                call_deadline,
                f"seeding {db.name}",
                batch.script,
                dict(batch.bind_vars),
            )
        except SeedbedError as e:
            raise SeedError(batch.script, e) from e
        logger.debug("Seeded %s", db.name)
