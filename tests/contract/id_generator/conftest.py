"""Fixtures for id_generator contract tests."""

from collections.abc import Iterable

import pytest

from seedbed.adapters.id_generators import SimpleIdGenerator, ULIDGenerator
from seedbed.interfaces.id_generator import IdGenerator

GENERATORS = {"ulid": ULIDGenerator, "simple": SimpleIdGenerator}


@pytest.fixture(params=sorted(GENERATORS))
def id_generator(request: pytest.FixtureRequest) -> Iterable[IdGenerator]:
    """A fresh generator of each kind the harness can name databases with."""
    yield GENERATORS[request.param]()
