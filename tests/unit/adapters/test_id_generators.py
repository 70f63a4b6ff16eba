"""Unit tests for run-unique database names."""

import pytest

from seedbed.adapters.id_generators import (
    SimpleIdGenerator,
    ULIDGenerator,
    unique_database_name,
)

# pylint: disable=magic-value-comparison


def test_name_is_prefix_and_lowercased_id() -> None:
    """Names join the prefix and the generated id with an underscore."""
    assert unique_database_name("shop", SimpleIdGenerator(length=4)) == "shop_0001"


def test_default_generator_is_ulid() -> None:
    """Without a generator, a lowercase ULID suffix is used."""
    name = unique_database_name()
    prefix, suffix = name.split("_", 1)

    assert prefix == "test"
    assert len(suffix) == 26
    assert suffix == suffix.lower()


def test_consecutive_names_differ() -> None:
    """Two runs never share a database name."""
    generator = ULIDGenerator()
    assert unique_database_name(id_generator=generator) != unique_database_name(
        id_generator=generator
    )


@pytest.mark.parametrize("prefix", ["1abc", "_x", "with space", "x" * 80])
def test_invalid_prefix_is_rejected(prefix: str) -> None:
    """Names that the server would refuse are rejected up front."""
    with pytest.raises(ValueError, match="invalid database name"):
        unique_database_name(prefix, SimpleIdGenerator())
