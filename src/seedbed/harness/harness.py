"""Disposable, provisioned database environments for integration tests.

An `IntegrationHarness` drives one run through these states::

    uninitialized -> instance starting -> awaiting ready -> provisioning
        -> ready -> torn down

Any failure before ``ready`` moves the run to ``failed``. On failure the
instance's own logs are copied into the run's log sink, the run is torn down
and `HarnessStartupError` is raised; the caller never receives a partially
provisioned bundle.

A successful `start()` returns a `HarnessBundle`: the live database handle,
the run's logger, the authenticator, the credential issuer and an idempotent
teardown closure.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from seedbed import __version__
from seedbed.adapters.id_generators import unique_database_name
from seedbed.domain.errors import HarnessStartupError
from seedbed.domain.value_objects import HarnessState, MigrationSpec, SeedBatch
from seedbed.interfaces.clock import SystemClock
from seedbed.logging import LogSink, log_startup
from seedbed.service_layer import ConnectionStatusChecker, DatabaseProvisioner
from seedbed.service_layer.deadline import Deadline
from seedbed.service_layer.migrator import SchemaMigrator
from seedbed.service_layer.seeder import Seeder

from .credentials import CredentialIssuer
from .state import RunStateMachine

if TYPE_CHECKING:
    from rich.console import Console

    from seedbed.auth import Authenticator
    from seedbed.config import HarnessConfig
    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.database import (
        Database,
        DatabaseClient,
        DatabaseClientFactory,
    )
    from seedbed.interfaces.id_generator import IdGenerator
    from seedbed.interfaces.instances import InstanceManager, InstanceRef
    from seedbed.interfaces.redactor import Redactor

logger = logging.getLogger(__name__)


@dataclass
class HarnessBundle:
    """What a test receives from a successful `IntegrationHarness.start`.

    Attributes:
        db: Live handle to the provisioned logical database.
        log: The run's logger; its records are printed at teardown.
        auth: Authenticator that accepts tokens from `issuer`.
        issuer: Mints valid and invalid test credentials.
        database_name: Name of the provisioned logical database.
        instance: The database instance the run is bound to.
        teardown: Idempotent cleanup closure.
        sink: The run's log sink.
        machine: The run's lifecycle state.
    """

    db: Database
    log: logging.Logger
    auth: Authenticator
    issuer: CredentialIssuer
    database_name: str
    instance: InstanceRef
    teardown: Callable[[], None]
    sink: LogSink | None = field(default=None, repr=False)
    machine: RunStateMachine | None = field(default=None, repr=False)

    @property
    def state(self) -> HarnessState | None:
        """Current lifecycle state of the run."""
        return self.machine.state if self.machine is not None else None

    def token(self, subject: str, roles: Iterable[str] | str) -> str:
        """Return a valid signed token for `subject`."""
        return self.issuer.issue_token(subject, roles)

    def invalid_token(self) -> str:
        """Return a well-formed token that `auth` rejects."""
        return self.issuer.issue_invalid_token()

    def __enter__(self) -> HarnessBundle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.teardown()


class _Run:  # pylint: disable=too-many-instance-attributes
    """Resources and state of one harness run."""

    def __init__(
        self, database_name: str, sink: LogSink, instance_manager: InstanceManager
    ) -> None:
        self.database_name = database_name
        self.sink = sink
        self.instance_manager = instance_manager
        self.machine = RunStateMachine()
        self.instance: InstanceRef | None = None
        self.client: DatabaseClient | None = None
        self.db: Database | None = None
        self._torn_down = False
        self._lock = threading.Lock()

    def capture_instance_logs(self) -> str:
        """Copy the instance's output into the sink and return it.

        Returns an empty string if the logs cannot be read.
        """
        if self.instance is None:
            return ""
        try:
            text = self.instance_manager.dump_logs(self.instance)
        except Exception as e:  # pylint: disable=broad-except
            self.sink.logger.warning("Cannot read instance logs: %s", e)
            return ""
        if text:
            self.sink.logger.error("Instance logs:\n%s", text.rstrip())
        return text

    def teardown(self) -> None:
        """Release everything the run holds. Safe to call more than once.

        The captured logs are printed on every attempt. If releasing a
        resource fails the error propagates and the run stays open, so a
        later call retries what is left.
        """
        with self._lock:
            if self._torn_down:
                return
            if self.machine.can_transition(HarnessState.TORN_DOWN):
                self.machine.transition(HarnessState.TORN_DOWN)
            self.sink.logger.info("Tearing down %s", self.database_name)

            released = False
            try:
                if self.db is not None:
                    self.db.close()
                if self.client is not None:
                    self.client.close()
                if self.instance is not None and self.instance.owned:
                    self.instance_manager.stop_instance(self.instance)
                released = True
            except Exception as e:
                self.sink.logger.error(
                    "Tearing down %s failed: %s", self.database_name, e
                )
                raise
            finally:
                self.sink.dump()
                if released:
                    self._torn_down = True
                    self.sink.close()


class IntegrationHarness:  # pylint: disable=too-many-instance-attributes
    """Start, provision and tear down disposable test databases.

    Args:
        config: Harness settings (image, credentials, timeouts).
        instance_manager: Starts and stops database instances.
        provisioner: Creates, migrates and seeds logical databases.
        checker: Readiness poller; built from ``config.timeouts`` if omitted.
        issuer: Credential issuer; a fresh one (new key pair) if omitted.
        clock: Time source for deadlines and credentials.
        redactor: Applied to every record captured in a run's log sink.
        id_generator: Source of generated database name suffixes.
        console: Rich console the sinks print to at teardown.
    """

    def __init__(  # pylint: disable=too-many-arguments
        self,
        config: HarnessConfig,
        instance_manager: InstanceManager,
        provisioner: DatabaseProvisioner,
        checker: ConnectionStatusChecker | None = None,
        issuer: CredentialIssuer | None = None,
        clock: Clock | None = None,
        *,
        redactor: Redactor | None = None,
        id_generator: IdGenerator | None = None,
        console: Console | None = None,
    ) -> None:
        self.config = config
        self.instance_manager = instance_manager
        self.provisioner = provisioner
        self.clock = clock or SystemClock()
        self.checker = checker or ConnectionStatusChecker(
            config.timeouts.base_interval
        )
        self.issuer = issuer or CredentialIssuer(clock=self.clock)
        self.redactor = redactor
        self.id_generator = id_generator
        self.console = console

    @classmethod
    def from_client_factory(  # pylint: disable=too-many-arguments
        cls,
        config: HarnessConfig,
        instance_manager: InstanceManager,
        client_factory: DatabaseClientFactory,
        *,
        clock: Clock | None = None,
        **kwargs,
    ) -> IntegrationHarness:
        """Build a harness whose provisioner uses ``config.timeouts``."""
        timeouts = config.timeouts
        provisioner = DatabaseProvisioner(
            client_factory,
            SchemaMigrator(timeouts.collection, clock=clock),
            Seeder(timeouts.seed, clock=clock),
            database_timeout=timeouts.database,
            clock=clock,
        )
        return cls(config, instance_manager, provisioner, clock=clock, **kwargs)

    @property
    def auth(self) -> Authenticator:
        """Authenticator that verifies this harness's credentials."""
        return self.issuer.authenticator

    def start_instance(self) -> InstanceRef:
        """Start an instance that several runs can share.

        Pass the result to `start(instance=...)`; runs never stop it. Stop it
        with `stop_instance` when done.

        Raises:
            InstanceError: If the instance could not be started.
        """
        instance = self.config.instance
        return self.instance_manager.start_instance(
            instance.image, instance.port, instance.env
        )

    def stop_instance(self, ref: InstanceRef) -> None:
        """Stop an instance started with `start_instance`."""
        self.instance_manager.stop_instance(ref)

    def start(  # pylint: disable=too-many-arguments
        self,
        database_name: str | None = None,
        migration: MigrationSpec | None = None,
        seed: SeedBatch | str | None = None,
        *,
        instance: InstanceRef | None = None,
        cancel_event: threading.Event | None = None,
    ) -> HarnessBundle:
        """Provision a database and return the bundle for one test run.

        Args:
            database_name: Logical database to provision; a unique name is
                generated when omitted.
            migration: Collections to ensure.
            seed: Seed script to load after migration.
            instance: Existing instance to use. It is not stopped at teardown.
            cancel_event: Setting it aborts readiness polling and provisioning.

        Returns:
            HarnessBundle: Handle, logger, auth and teardown for the run.

        Raises:
            HarnessStartupError: If any step failed; the run has already been
                torn down and the instance logs are attached.
        """
        database_name = database_name or unique_database_name(
            id_generator=self.id_generator
        )
        sink = LogSink(database_name, redactor=self.redactor, console=self.console)
        run = _Run(database_name, sink, self.instance_manager)

        try:
            self._start(run, migration, seed, instance, cancel_event)
        except Exception as e:
            failed_state = run.machine.fail()
            logger.warning(
                "Run %s failed while %s", run.database_name, failed_state.value
            )
            sink.logger.error("Harness failed while %s: %s", failed_state.value, e)
            instance_logs = run.capture_instance_logs()
            try:
                run.teardown()
            except Exception as teardown_error:  # pylint: disable=broad-except
                logger.warning(
                    "Teardown of failed run %s also failed: %s",
                    run.database_name,
                    teardown_error,
                )
            raise HarnessStartupError(failed_state.value, e, instance_logs) from e
        except BaseException:
            run.machine.fail()
            run.teardown()
            raise

        return HarnessBundle(
            db=run.db,
            log=sink.logger,
            auth=self.auth,
            issuer=self.issuer,
            database_name=database_name,
            instance=run.instance,
            teardown=run.teardown,
            sink=sink,
            machine=run.machine,
        )

    def _start(  # pylint: disable=too-many-arguments
        self,
        run: _Run,
        migration: MigrationSpec | None,
        seed: SeedBatch | str | None,
        instance: InstanceRef | None,
        cancel_event: threading.Event | None,
    ) -> None:
        log = run.sink.logger
        timeouts = self.config.timeouts

        run.machine.transition(HarnessState.INSTANCE_STARTING)
        if instance is None:
            log.info("Starting database instance ...")
            run.instance = self.start_instance()
        else:
            run.instance = replace(instance, owned=False)

        db_config = self.config.database_config(run.instance.host, run.instance.port)
        log_startup(
            log,
            app_version=__version__,
            endpoint=db_config.endpoint,
            database=run.database_name,
            image=self.config.instance.image if run.instance.owned else None,
            redactor=self.redactor,
        )

        run.machine.transition(HarnessState.AWAITING_READY)
        log.info("Waiting for database to be ready ...")
        run.client = self.provisioner.connect(db_config)
        result = self.checker.check_ready(
            run.client,
            Deadline(timeouts.readiness, clock=self.clock, cancel_event=cancel_event),
        )
        log.info("Database ready after %d check(s)", result.attempts)

        run.machine.transition(HarnessState.PROVISIONING)
        log.info("Migrate and seed database ...")
        run.db = self.provisioner.provision(
            db_config,
            run.database_name,
            migration,
            seed,
            client=run.client,
            admin_user=self.config.admin_user,
            deadline=Deadline(None, clock=self.clock, cancel_event=cancel_event),
        )

        run.machine.transition(HarnessState.READY)
        log.info("Ready for testing ...")

    @contextmanager
    def run(  # pylint: disable=too-many-arguments
        self,
        database_name: str | None = None,
        migration: MigrationSpec | None = None,
        seed: SeedBatch | str | None = None,
        *,
        instance: InstanceRef | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Iterator[HarnessBundle]:
        """Context manager form of `start`; tears down on exit."""
        bundle = self.start(
            database_name,
            migration,
            seed,
            instance=instance,
            cancel_event=cancel_event,
        )
        try:
            yield bundle
        finally:
            bundle.teardown()
