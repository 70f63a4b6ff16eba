"""Unit tests for domain value objects."""

import pytest

from seedbed.domain.value_objects import (
    CollectionKind,
    CollectionSpec,
    HarnessState,
    MigrationSpec,
    SeedBatch,
)

# pylint: disable=magic-value-comparison


def test_collection_spec_rejects_empty_name() -> None:
    """A collection must have a name."""
    with pytest.raises(ValueError, match="must not be empty"):
        CollectionSpec("", CollectionKind.DOCUMENT)


def test_migration_spec_yields_documents_before_edges() -> None:
    """specs() lists every document collection before any edge collection."""
    spec = MigrationSpec(
        document_collections=("users", "orders"), edge_collections=("placed",)
    )

    assert list(spec.specs()) == [
        CollectionSpec("users", CollectionKind.DOCUMENT),
        CollectionSpec("orders", CollectionKind.DOCUMENT),
        CollectionSpec("placed", CollectionKind.EDGE),
    ]


def test_migration_spec_collapses_duplicates() -> None:
    """Duplicate names within a list are collapsed, keeping first occurrence."""
    spec = MigrationSpec(document_collections=["b", "a", "b"], edge_collections=["e", "e"])

    assert spec.document_collections == ("b", "a")
    assert spec.edge_collections == ("e",)


@pytest.mark.parametrize("script", ["", "   ", "\n\t"])
def test_blank_seed_batch_is_empty(script: str) -> None:
    """A script with nothing but whitespace has nothing to execute."""
    assert SeedBatch(script).is_empty


def test_seed_batch_with_statement_is_not_empty() -> None:
    """A script with a statement is executed."""
    batch = SeedBatch("INSERT @user INTO users", {"user": {"_key": "u1"}})
    assert not batch.is_empty
    assert batch.bind_vars == {"user": {"_key": "u1"}}


def test_harness_state_values_read_as_phrases() -> None:
    """State values are used verbatim in error messages."""
    assert HarnessState.AWAITING_READY.value == "awaiting ready"
    assert HarnessState.INSTANCE_STARTING.value == "instance starting"
