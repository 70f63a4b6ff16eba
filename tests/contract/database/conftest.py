"""Fixtures for Database contract tests."""

from __future__ import annotations

import pytest

from seedbed.interfaces.database import Database


@pytest.fixture(params=["fake_db", pytest.param("arango_db", marks=pytest.mark.slow)])
def contract_db(request: pytest.FixtureRequest) -> Database:
    """Return an empty logical database from the requested backend.

    Supported params:
      - `"fake_db"` → in-memory `FakeDatabase`
      - `"arango_db"` → `ArangoDatabase` on the session ArangoDB server
    """
    return request.getfixturevalue(request.param)
