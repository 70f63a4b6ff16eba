"""Idempotent creation of document and edge collections.

There is no migration history: the migrator simply ensures every named
collection exists with the right kind. Document collections are created
before edge collections. Each creation gets its own short deadline; the first
failure aborts the run, and already-created collections are left in place
since creating them again is a no-op.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from seedbed.domain.errors import SchemaError, SeedbedError
from seedbed.domain.value_objects import MigrationSpec

from .deadline import Deadline, run_with_deadline

if TYPE_CHECKING:
    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.database import Database

logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_TIMEOUT = 1.0


class SchemaMigrator:
    """Ensure a logical database contains a set of collections.

    Args:
        per_collection_timeout: Seconds allowed for each creation call.
        clock: Time source for the per-collection deadlines.
    """

    def __init__(
        self,
        per_collection_timeout: float = DEFAULT_COLLECTION_TIMEOUT,
        clock: Clock | None = None,
    ) -> None:
        self.per_collection_timeout = per_collection_timeout
        self.clock = clock

    def migrate(
        self,
        db: Database,
        document_collections: Iterable[str] = (),
        edge_collections: Iterable[str] = (),
        per_collection_timeout: float | None = None,
        *,
        deadline: Deadline | None = None,
    ) -> None:
        """Create every listed collection that does not exist yet.

        Args:
            db: Target logical database.
            document_collections: Names of document collections.
            edge_collections: Names of edge collections.
            per_collection_timeout: Overrides the migrator's default timeout.
            deadline: Optional outer deadline; its cancellation and expiry
                also bound every creation call.

        Raises:
            SchemaError: Naming the first collection that could not be created.
        """
        spec = MigrationSpec(tuple(document_collections), tuple(edge_collections))
        timeout = (
            self.per_collection_timeout
            if per_collection_timeout is None
            else per_collection_timeout
        )

        for collection in spec.specs():
            call_deadline = (
                deadline.child(timeout)
                if deadline is not None
                else Deadline(timeout, clock=self.clock)
            )
            kind = collection.kind.value
            try:
                run_with_deadline(
                    db.create_collection,
                    call_deadline,
                    f"creating {collection.name} {kind} collection",
                    collection.name,
                    collection.kind,
                )
            except SeedbedError as e:
                logger.debug(
                    "Creating %s %s collection failed: %s", collection.name, kind, e
                )
                raise SchemaError(collection.name, kind, e) from e
            logger.debug("Ensured %s collection %s", kind, collection.name)

    def migrate_spec(
        self, db: Database, spec: MigrationSpec, *, deadline: Deadline | None = None
    ) -> None:
        """Apply a `MigrationSpec` (see `migrate`)."""
        self.migrate(
            db, spec.document_collections, spec.edge_collections, deadline=deadline
        )
