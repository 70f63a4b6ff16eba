"""Default marks for tests under `tests/unit/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import add_default_marker

# pylint: disable=unused-argument

UNIT_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `unit` marks to items in `tests/unit/`."""
    add_default_marker(items, UNIT_ROOT, "unit")
