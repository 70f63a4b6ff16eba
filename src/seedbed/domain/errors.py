"""Error taxonomy for SEEDBED.

Every error raised by the library derives from `SeedbedError`. Lower-level
errors are chained (``raise ... from cause``) so the original failure stays
available on ``__cause__``.
"""

from __future__ import annotations


class SeedbedError(Exception):
    """Base class for all SEEDBED errors."""


# ============================================================================
#                              Configuration
# ============================================================================


class ConfigError(SeedbedError):
    """Raised when a configuration value is missing or malformed."""


class DatabaseUrlNotSetError(ConfigError):
    """Raised when the SEEDBED_DB_URL environment variable is not set."""


# ============================================================================
#                          Deadlines & cancellation
# ============================================================================


class DeadlineError(SeedbedError):
    """Base class for bounded operations that did not complete in time."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation


class DeadlineExceededError(DeadlineError):
    """Raised when an operation's deadline elapsed before it completed."""

    def __init__(self, operation: str) -> None:
        super().__init__(operation, f"Deadline exceeded while {operation}.")


class OperationCancelledError(DeadlineError):
    """Raised when an operation was cancelled by its caller."""

    def __init__(self, operation: str) -> None:
        super().__init__(operation, f"Cancelled while {operation}.")


# ============================================================================
#                         Database client operations
# ============================================================================


class ClientError(SeedbedError):
    """Raised by database client adapters when a request fails.

    Attributes:
        code (int | None): Backend error number, when the server supplied one.
    """

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class CollectionKindConflictError(ClientError):
    """Conflict: a collection exists under the same name with another kind."""

    def __init__(self, collection: str, existing: str, requested: str) -> None:
        super().__init__(
            f"Collection '{collection}' already exists as a {existing} collection; "
            f"cannot create it as a {requested} collection."
        )
        self.collection = collection
        self.existing = existing
        self.requested = requested


class DatabaseAlreadyExistsError(ClientError):
    """Raised when creating a logical database whose name is already taken."""

    def __init__(self, database: str, code: int | None = None) -> None:
        super().__init__(f"Database '{database}' already exists.", code)
        self.database = database


class HandleClosedError(ClientError):
    """Raised when a database handle is used after it was closed."""

    def __init__(self, database: str) -> None:
        super().__init__(f"Database handle for '{database}' is closed.")
        self.database = database


class DatabaseConnectionError(SeedbedError):
    """Raised when a client connection cannot be opened.

    This is a configuration failure, not a readiness failure: opening a
    client performs no network round trip.
    """

    def __init__(self, endpoint: str, reason: str) -> None:
        super().__init__(f"Cannot open a client for {endpoint}: {reason}")
        self.endpoint = endpoint


# ============================================================================
#                                Readiness
# ============================================================================


class ReadinessError(SeedbedError):
    """Base class for readiness polling failures."""

    def __init__(self, endpoint: str, attempts: int, message: str) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.attempts = attempts


class UnreachableError(ReadinessError):
    """Raised when the deadline elapsed before any check succeeded."""

    def __init__(self, endpoint: str, attempts: int) -> None:
        super().__init__(
            endpoint,
            attempts,
            f"Database at {endpoint} was unreachable after {attempts} attempt(s).",
        )


class ReadinessCancelledError(ReadinessError):
    """Raised when the caller cancelled readiness polling."""

    def __init__(self, endpoint: str, attempts: int) -> None:
        super().__init__(
            endpoint,
            attempts,
            f"Readiness check for {endpoint} cancelled after {attempts} attempt(s).",
        )


# ============================================================================
#                          Migration & seeding
# ============================================================================


class SchemaError(SeedbedError):
    """Raised when a collection could not be created.

    Attributes:
        collection (str): Name of the collection that failed.
        kind (str): Collection kind ("document" or "edge").
    """

    def __init__(self, collection: str, kind: str, cause: Exception) -> None:
        super().__init__(f"Error creating {collection} {kind} collection: {cause}")
        self.collection = collection
        self.kind = kind


class SeedError(SeedbedError):
    """Raised when the seed script failed; no part of it took effect.

    Attributes:
        script (str): The offending script text.
    """

    def __init__(self, script: str, cause: Exception) -> None:
        super().__init__(f"Error running seed script:\n{script}\n{cause}")
        self.script = script


class ProvisioningError(SeedbedError):
    """Raised when provisioning a logical database failed.

    Attributes:
        database (str): The logical database being provisioned.
        phase (str): One of "connect", "database", "migrate" or "seed".
    """

    def __init__(self, database: str, phase: str, cause: Exception) -> None:
        super().__init__(f"Provisioning '{database}' failed during {phase}: {cause}")
        self.database = database
        self.phase = phase


# ============================================================================
#                         Instances & the harness
# ============================================================================


class InstanceError(SeedbedError):
    """Raised when a database instance could not be started."""

    def __init__(self, image: str, reason: str) -> None:
        super().__init__(f"Cannot start database instance from '{image}': {reason}")
        self.image = image


class SigningError(SeedbedError):
    """Raised when a credential could not be signed."""


class InvalidTransitionError(SeedbedError):
    """Raised when the harness is asked to move to a state it cannot reach."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot transition harness from {current} to {target}.")
        self.current = current
        self.target = target


class HarnessStartupError(SeedbedError):
    """Raised when the harness could not reach the READY state.

    Attributes:
        state (str): The state the harness was in when it failed.
        instance_logs (str): Logs captured from the database instance.
    """

    def __init__(self, state: str, cause: Exception, instance_logs: str = "") -> None:
        super().__init__(f"Harness failed while {state}: {cause}")
        self.state = state
        self.instance_logs = instance_logs
