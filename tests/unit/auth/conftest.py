"""Fixtures for auth unit tests."""

import pytest

from seedbed.auth import KeyMaterial

KID = "test-key"


@pytest.fixture(scope="session")
def key_material() -> KeyMaterial:
    """One RSA key pair shared by the auth tests."""
    return KeyMaterial.generate(KID)


@pytest.fixture(scope="session")
def other_key_material() -> KeyMaterial:
    """A second key pair, registered under the same kid."""
    return KeyMaterial.generate(KID)
