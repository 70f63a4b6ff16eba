"""Fixtures for harness unit tests."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from seedbed.adapters.id_generators import SimpleIdGenerator
from seedbed.adapters.redactor import Redactor
from seedbed.config import HarnessConfig
from seedbed.harness import CredentialIssuer, IntegrationHarness
from tests.helpers.fakes import FakeClientFactory, FakeClock, FakeInstanceManager

## adjust pylint to deal with fixtures
# pylint: disable=redefined-outer-name


@pytest.fixture(scope="module")
def issuer_clock() -> FakeClock:
    """Clock of the shared credential issuer. Only ever moves forward."""
    return FakeClock()


@pytest.fixture(scope="module")
def issuer(issuer_clock: FakeClock) -> CredentialIssuer:
    """A credential issuer shared by the tests of one module."""
    return CredentialIssuer(clock=issuer_clock)


@pytest.fixture
def console_output() -> io.StringIO:
    """Buffer the harness console prints captured logs into."""
    return io.StringIO()


@pytest.fixture
def harness(  # pylint: disable=too-many-arguments
    harness_config: HarnessConfig,
    instance_manager: FakeInstanceManager,
    client_factory: FakeClientFactory,
    fake_clock: FakeClock,
    issuer: CredentialIssuer,
    console_output: io.StringIO,
) -> IntegrationHarness:
    """A harness over fakes, printing to `console_output`."""
    return IntegrationHarness.from_client_factory(
        harness_config,
        instance_manager,
        client_factory,
        clock=fake_clock,
        issuer=issuer,
        redactor=Redactor(),
        id_generator=SimpleIdGenerator(),
        console=Console(file=console_output, width=120),
    )
