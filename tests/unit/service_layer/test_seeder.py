"""Unit tests for Seeder."""

import threading

import pytest

from seedbed.domain.errors import ClientError, DeadlineExceededError, SeedError
from seedbed.domain.value_objects import CollectionKind, SeedBatch
from seedbed.service_layer import Seeder
from tests.helpers.fakes import FakeDatabase

# pylint: disable=magic-value-comparison

SCRIPT = """
LET u = (INSERT @user INTO users RETURN NEW)
INSERT @order INTO orders
"""


@pytest.fixture
def shop_db(fake_db: FakeDatabase) -> FakeDatabase:
    """Database with ``users`` and ``orders`` collections."""
    fake_db.create_collection("users", CollectionKind.DOCUMENT)
    fake_db.create_collection("orders", CollectionKind.DOCUMENT)
    return fake_db


@pytest.mark.parametrize("script", ["", "  \n ", SeedBatch()])
def test_empty_script_is_noop(shop_db: FakeDatabase, script) -> None:
    """Nothing is sent to the database for an empty script."""
    Seeder().seed(shop_db, script)

    assert not shop_db.queries


def test_seed_applies_every_statement(shop_db: FakeDatabase) -> None:
    """A successful seed leaves all of its records behind."""
    batch = SeedBatch(SCRIPT, {"user": {"_key": "u1"}, "order": {"_key": "o1"}})

    Seeder().seed(shop_db, batch)

    assert shop_db.count("users") == 1
    assert shop_db.count("orders") == 1


def test_failing_seed_applies_nothing(shop_db: FakeDatabase) -> None:
    """When a later statement fails, earlier statements are undone."""
    shop_db.run_query("INSERT @order INTO orders", {"order": {"_key": "o1"}})
    batch = SeedBatch(SCRIPT, {"user": {"_key": "u1"}, "order": {"_key": "o1"}})

    with pytest.raises(SeedError) as excinfo:
        Seeder().seed(shop_db, batch)

    assert excinfo.value.script == SCRIPT
    assert isinstance(excinfo.value.__cause__, ClientError)
    assert shop_db.count("users") == 0
    assert shop_db.count("orders") == 1


def test_bare_script_text_is_accepted(shop_db: FakeDatabase) -> None:
    """A plain string is run as a batch without bind variables."""
    with pytest.raises(SeedError, match="bind parameter 'user'"):
        Seeder().seed(shop_db, "INSERT @user INTO users")


def test_hanging_seed_times_out(shop_db: FakeDatabase, monkeypatch) -> None:
    """A seed query that never returns is abandoned after its timeout."""
    release = threading.Event()
    monkeypatch.setattr(shop_db, "run_query", lambda *args: release.wait())
    try:
        with pytest.raises(SeedError) as excinfo:
            Seeder(timeout=0.05).seed(shop_db, "INSERT @user INTO users")
    finally:
        release.set()

    assert isinstance(excinfo.value.__cause__, DeadlineExceededError)
