"""Provisioning of a logical database.

`DatabaseProvisioner` opens a client, makes sure the logical database exists
(creating it with an admin user if absent), then applies the schema and the
seed data. Every step is bounded by its own deadline, and every failure is
reported as a `ProvisioningError` naming the phase that failed.

The exists-then-create check is not atomic. Two provisioners targeting the
same name at the same time may both see "absent"; the losing create surfaces
as an error rather than being ignored. Concurrent runs must use distinct
database names (see `seedbed.adapters.id_generators.unique_database_name`).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seedbed.domain.errors import ProvisioningError, SeedbedError
from seedbed.domain.value_objects import MigrationSpec, SeedBatch

from .deadline import Deadline, run_with_deadline
from .migrator import SchemaMigrator
from .readiness import ConnectionStatusChecker
from .seeder import Seeder

if TYPE_CHECKING:
    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.database import (
        Database,
        DatabaseClient,
        DatabaseClientFactory,
        DatabaseConfig,
        DatabaseUser,
    )

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_TIMEOUT = 5.0

PHASE_CONNECT = "connect"
PHASE_DATABASE = "database"
PHASE_MIGRATE = "migrate"
PHASE_SEED = "seed"


class DatabaseProvisioner:
    """Compose connection, database creation, migration and seeding.

    Args:
        client_factory: Opens clients from a `DatabaseConfig`.
        migrator: Collection migrator; a default one is built when omitted.
        seeder: Seed loader; a default one is built when omitted.
        database_timeout: Seconds allowed for each database-level call.
        clock: Time source for the per-step deadlines.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        client_factory: DatabaseClientFactory,
        migrator: SchemaMigrator | None = None,
        seeder: Seeder | None = None,
        *,
        database_timeout: float = DEFAULT_DATABASE_TIMEOUT,
        clock: Clock | None = None,
    ) -> None:
        self.client_factory = client_factory
        self.migrator = migrator or SchemaMigrator(clock=clock)
        self.seeder = seeder or Seeder(clock=clock)
        self.database_timeout = database_timeout
        self.clock = clock

    def _deadline(self, timeout: float, parent: Deadline | None) -> Deadline:
        if parent is not None:
            return parent.child(timeout)
        return Deadline(timeout, clock=self.clock)

    def connect(self, config: DatabaseConfig) -> DatabaseClient:
        """Open a client for `config`; no network round trip is made.

        Raises:
            DatabaseConnectionError: If the configuration is unusable.
        """
        client = self.client_factory.connect(config)
        logger.debug("Opened client for %s", client.endpoint)
        return client

    def ensure_database(
        self,
        client: DatabaseClient,
        name: str,
        admin_user: DatabaseUser,
        *,
        deadline: Deadline | None = None,
    ) -> Database:
        """Open logical database `name`, creating it first if it is absent.

        Raises:
            DatabaseAlreadyExistsError: If a concurrent caller created it between
                the existence check and the create.
            SeedbedError: If a request failed or its deadline fired.
        """
        exists = run_with_deadline(
            client.database_exists,
            self._deadline(self.database_timeout, deadline),
            f"checking for database {name}",
            name,
        )
        if exists:
            logger.debug("Database %s exists; opening it", name)
            return run_with_deadline(
                client.database,
                self._deadline(self.database_timeout, deadline),
                f"opening database {name}",
                name,
            )

        logger.debug("Creating database %s for user %s", name, admin_user.username)
        return run_with_deadline(
            client.create_database,
            self._deadline(self.database_timeout, deadline),
            f"creating database {name}",
            name,
            admin_user,
        )

    def provision(  # pylint: disable=too-many-arguments
        self,
        config: DatabaseConfig,
        database_name: str,
        migration: MigrationSpec | None = None,
        seed: SeedBatch | str | None = None,
        *,
        client: DatabaseClient | None = None,
        admin_user: DatabaseUser | None = None,
        deadline: Deadline | None = None,
    ) -> Database:
        """Return a migrated, seeded handle to logical database `database_name`.

        Args:
            config: Connection settings (used to open a client when `client`
                is not supplied, and as the default admin user).
            database_name: The logical database to provision.
            migration: Collections to ensure.
            seed: Seed script to load after migration.
            client: An already-open client to reuse; the caller keeps
                ownership of it. When omitted, a client is opened, closed on
                failure and otherwise closed along with the returned handle.
            admin_user: User attached to a newly created database; defaults to
                the configured user.
            deadline: Optional outer deadline for cancellation.

        Raises:
            ProvisioningError: Wrapping the failure of the phase that failed.
        """
        migration = migration or MigrationSpec()
        admin_user = admin_user or config.admin_user

        if client is not None:
            return self._provision(
                client, database_name, migration, seed, admin_user, deadline
            )

        try:
            client = self.connect(config)
        except SeedbedError as e:
            raise ProvisioningError(database_name, PHASE_CONNECT, e) from e
        return self._provision_owned(
            client, database_name, migration, seed, admin_user, deadline
        )

    def _provision_owned(  # pylint: disable=too-many-arguments
        self,
        client: DatabaseClient,
        database_name: str,
        migration: MigrationSpec,
        seed: SeedBatch | str | None,
        admin_user: DatabaseUser,
        deadline: Deadline | None,
    ) -> Database:
        # The client was opened for this call: it is closed on failure and
        # otherwise handed to the returned handle.
        try:
            db = self._provision(
                client, database_name, migration, seed, admin_user, deadline
            )
        except BaseException:
            client.close()
            raise
        db.adopt_client(client)
        return db

    def _provision(  # pylint: disable=too-many-arguments
        self,
        client: DatabaseClient,
        database_name: str,
        migration: MigrationSpec,
        seed: SeedBatch | str | None,
        admin_user: DatabaseUser,
        deadline: Deadline | None,
    ) -> Database:
        try:
            db = self.ensure_database(
                client, database_name, admin_user, deadline=deadline
            )
        except SeedbedError as e:
            raise ProvisioningError(database_name, PHASE_DATABASE, e) from e

        phase = PHASE_MIGRATE
        try:
            self.migrator.migrate_spec(db, migration, deadline=deadline)
            phase = PHASE_SEED
            if seed is not None:
                self.seeder.seed(db, seed, deadline=deadline)
        except SeedbedError as e:
            db.close()
            raise ProvisioningError(database_name, phase, e) from e

        logger.info("Provisioned database %s", database_name)
        return db

    def bootstrap(  # pylint: disable=too-many-arguments
        self,
        config: DatabaseConfig,
        database_name: str,
        migration: MigrationSpec | None = None,
        seed: SeedBatch | str | None = None,
        *,
        readiness_timeout: float = 30.0,
        checker: ConnectionStatusChecker | None = None,
        deadline: Deadline | None = None,
    ) -> Database:
        """Wait for an externally managed server, then provision it.

        The client opened here is closed with the returned handle.

        Raises:
            ReadinessError: If the server never became reachable.
            ProvisioningError: If provisioning failed.
        """
        checker = checker or ConnectionStatusChecker()
        try:
            client = self.connect(config)
        except SeedbedError as e:
            raise ProvisioningError(database_name, PHASE_CONNECT, e) from e
        try:
            checker.check_ready(client, self._deadline(readiness_timeout, deadline))
        except BaseException:
            client.close()
            raise
        return self._provision_owned(
            client,
            database_name,
            migration or MigrationSpec(),
            seed,
            config.admin_user,
            deadline,
        )
