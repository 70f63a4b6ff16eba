"""Unit tests for domain errors."""

import pytest

from seedbed.domain import errors

# pylint: disable=magic-value-comparison


class TestSchemaError:
    """Tests for the SchemaError domain error."""

    @staticmethod
    def test_attributes() -> None:
        """Test that the error names the collection and its kind."""
        cause = errors.ClientError("refused")
        error = errors.SchemaError("placed", "edge", cause)
        assert error.collection == "placed"
        assert error.kind == "edge"

    @staticmethod
    def test_error_message() -> None:
        """Test that the error message is formatted correctly."""
        error = errors.SchemaError("users", "document", errors.ClientError("boom"))
        assert str(error) == "Error creating users document collection: boom"


class TestSeedError:
    """Tests for the SeedError domain error."""

    @staticmethod
    def test_carries_script() -> None:
        """Test that the offending script is kept verbatim."""
        script = "INSERT @user INTO users"
        error = errors.SeedError(script, errors.ClientError("unique constraint"))
        assert error.script == script

    @staticmethod
    def test_error_message() -> None:
        """Test that the message shows the script then the cause."""
        error = errors.SeedError("RETURN 1", errors.ClientError("bad"))
        assert str(error) == "Error running seed script:\nRETURN 1\nbad"


class TestProvisioningError:
    """Tests for the ProvisioningError domain error."""

    @staticmethod
    def test_attributes_and_message() -> None:
        """Test that database and phase are exposed and rendered."""
        error = errors.ProvisioningError("test_db", "seed", ValueError("x"))
        assert error.database == "test_db"
        assert error.phase == "seed"
        assert str(error) == "Provisioning 'test_db' failed during seed: x"


class TestReadinessErrors:
    """Tests for the readiness error family."""

    @staticmethod
    @pytest.mark.parametrize(
        "error_type", [errors.UnreachableError, errors.ReadinessCancelledError]
    )
    def test_attributes(error_type) -> None:
        """Test that endpoint and attempt count are exposed."""
        error = error_type("http://localhost:8529", 3)
        assert isinstance(error, errors.ReadinessError)
        assert error.endpoint == "http://localhost:8529"
        assert error.attempts == 3
        assert "3 attempt(s)" in str(error)


class TestClientErrors:
    """Tests for client-level errors."""

    @staticmethod
    def test_kind_conflict_is_client_error() -> None:
        """Test that a kind conflict is reported as a client failure."""
        error = errors.CollectionKindConflictError("users", "document", "edge")
        assert isinstance(error, errors.ClientError)
        assert error.existing == "document"
        assert error.requested == "edge"
        assert str(error) == (
            "Collection 'users' already exists as a document collection; "
            "cannot create it as a edge collection."
        )

    @staticmethod
    def test_database_already_exists_keeps_code() -> None:
        """Test that the backend error number is kept."""
        error = errors.DatabaseAlreadyExistsError("test_db", 1207)
        assert error.database == "test_db"
        assert error.code == 1207

    @staticmethod
    def test_handle_closed_message() -> None:
        """Test that the closed handle names its database."""
        error = errors.HandleClosedError("test_db")
        assert str(error) == "Database handle for 'test_db' is closed."


class TestHarnessErrors:
    """Tests for harness errors."""

    @staticmethod
    def test_startup_error() -> None:
        """Test that the failed state and instance logs are exposed."""
        cause = errors.UnreachableError("http://h:1", 4)
        error = errors.HarnessStartupError("awaiting ready", cause, "log line")
        assert error.state == "awaiting ready"
        assert error.instance_logs == "log line"
        assert str(error).startswith("Harness failed while awaiting ready: ")

    @staticmethod
    def test_invalid_transition() -> None:
        """Test that both ends of the rejected transition are exposed."""
        error = errors.InvalidTransitionError("ready", "provisioning")
        assert error.current == "ready"
        assert error.target == "provisioning"
        assert str(error) == "Cannot transition harness from ready to provisioning."

    @staticmethod
    @pytest.mark.parametrize(
        "error_type",
        [
            errors.ConfigError,
            errors.DatabaseUrlNotSetError,
            errors.SigningError,
        ],
    )
    def test_simple_errors_are_seedbed_errors(error_type) -> None:
        """Test that message-only errors share the common base."""
        assert issubclass(error_type, errors.SeedbedError)
