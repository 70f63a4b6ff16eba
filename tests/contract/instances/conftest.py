"""Fixtures for InstanceManager contract tests."""

from collections.abc import Iterable

import pytest

from seedbed.adapters.instances import AttachedInstanceManager
from seedbed.interfaces.instances import InstanceManager
from tests.helpers.fakes import FakeInstanceManager


@pytest.fixture(params=["fake", "attached"])
def manager(request: pytest.FixtureRequest) -> Iterable[InstanceManager]:
    """Return a fresh InstanceManager for the requested backend.

    The Testcontainers manager is covered by the integration suite.
    """
    match request.param:
        case "fake":
            yield FakeInstanceManager()
        case "attached":
            yield AttachedInstanceManager("http://localhost:8529")
        case _:
            raise ValueError(f"unknown instance manager type: {request.param}")
