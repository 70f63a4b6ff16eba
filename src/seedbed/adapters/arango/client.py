"""python-arango backed implementations of the database ports.

- `ArangoClientFactory.connect()` builds an `ArangoClient` without touching
  the network (no ``verify``).
- `ArangoDatabaseClient` performs server-scope operations through the
  ``_system`` database.
- `ArangoDatabase.run_query()` executes the AQL script inside a stream
  transaction that declares every non-system collection for writing, and
  aborts the transaction on any error, so a failed script leaves nothing
  behind.

All driver and transport failures are translated to `ClientError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from arango import ArangoClient
from arango.exceptions import ArangoError, ArangoServerError
from requests.exceptions import RequestException

from seedbed.domain.errors import (
    ClientError,
    CollectionKindConflictError,
    DatabaseAlreadyExistsError,
    DatabaseConnectionError,
)
from seedbed.domain.value_objects import CollectionKind
from seedbed.interfaces.database import (
    Database,
    DatabaseClient,
    DatabaseClientFactory,
    DatabaseConfig,
    DatabaseUser,
)

if TYPE_CHECKING:
    from arango.database import StandardDatabase

logger = logging.getLogger(__name__)

SYSTEM_DATABASE = "_system"
ERROR_DUPLICATE_NAME = 1207  # ERROR_ARANGO_DUPLICATE_NAME


@contextmanager
def translate_errors(action: str) -> Iterator[None]:
    """Re-raise driver and transport errors as `ClientError`."""
    try:
        yield
    except ArangoServerError as e:
        raise ClientError(f"{action}: {e.error_message}", code=e.error_code) from e
    except (ArangoError, RequestException) as e:
        raise ClientError(f"{action}: {e}") from e


class ArangoDatabase(Database):
    """A handle to one ArangoDB logical database."""

    def __init__(self, db: StandardDatabase, max_runtime: float | None = None) -> None:
        self._db = db
        self._max_runtime = max_runtime

    @property
    def name(self) -> str:
        return self._db.name

    def _collection_kinds(self) -> dict[str, CollectionKind]:
        with translate_errors(f"listing collections of {self.name}"):
            collections = self._db.collections()
        return {
            c["name"]: CollectionKind(c["type"])
            for c in collections
            if not c.get("system", False)
        }

    def collection_kind(self, name: str) -> CollectionKind | None:
        self._ensure_open()
        return self._collection_kinds().get(name)

    def create_collection(self, name: str, kind: CollectionKind) -> None:
        self._ensure_open()
        existing = self.collection_kind(name)
        if existing is not None:
            if existing is not kind:
                raise CollectionKindConflictError(name, existing.value, kind.value)
            return
        try:
            with translate_errors(f"creating {kind.value} collection {name}"):
                self._db.create_collection(name, edge=kind is CollectionKind.EDGE)
        except ClientError as e:
            if e.code != ERROR_DUPLICATE_NAME:
                raise
            # Lost a create race; the winner's kind decides.
            existing = self.collection_kind(name)
            if existing is not kind:
                raise CollectionKindConflictError(
                    name, existing.value if existing else "unknown", kind.value
                ) from e

    def count(self, collection: str) -> int:
        self._ensure_open()
        with translate_errors(f"counting {collection}"):
            return int(self._db.collection(collection).count())

    def run_query(
        self, script: str, bind_vars: Mapping[str, Any] | None = None
    ) -> list[Any]:
        self._ensure_open()
        bind_vars = dict(bind_vars or {})
        write = sorted(self._collection_kinds())
        if not write:
            with translate_errors("running query"):
                cursor = self._db.aql.execute(
                    script, bind_vars=bind_vars, max_runtime=self._max_runtime
                )
                return list(cursor)

        with translate_errors("beginning transaction"):
            txn = self._db.begin_transaction(write=write)
        try:
            with translate_errors("running query"):
                cursor = txn.aql.execute(
                    script, bind_vars=bind_vars, max_runtime=self._max_runtime
                )
                results = list(cursor)
            with translate_errors("committing transaction"):
                txn.commit_transaction()
        except ClientError:
            try:
                txn.abort_transaction()
            except (ArangoError, RequestException):
                logger.warning("Aborting transaction %s failed", txn.transaction_id)
            raise
        return results


class ArangoDatabaseClient(DatabaseClient):
    """Server-scope operations against one ArangoDB endpoint."""

    def __init__(self, client: ArangoClient, config: DatabaseConfig) -> None:
        self._client = client
        self._config = config
        self._sys_db = client.db(
            SYSTEM_DATABASE, username=config.user, password=config.password
        )

    @property
    def endpoint(self) -> str:
        return self._config.endpoint

    def list_databases(self) -> Sequence[str]:
        with translate_errors("listing databases"):
            return list(self._sys_db.databases())

    def database_exists(self, name: str) -> bool:
        with translate_errors(f"checking for database {name}"):
            return bool(self._sys_db.has_database(name))

    def create_database(self, name: str, user: DatabaseUser) -> Database:
        try:
            with translate_errors(f"creating database {name}"):
                self._sys_db.create_database(
                    name,
                    users=[
                        {
                            "username": user.username,
                            "password": user.password,
                            "active": True,
                        }
                    ],
                )
        except ClientError as e:
            if e.code == ERROR_DUPLICATE_NAME:
                raise DatabaseAlreadyExistsError(name, e.code) from e
            raise
        return self.database(name)

    def database(self, name: str) -> Database:
        with translate_errors(f"opening database {name}"):
            db = self._client.db(
                name, username=self._config.user, password=self._config.password
            )
        return ArangoDatabase(db, max_runtime=self._config.request_timeout)

    def close(self) -> None:
        self._client.close()


class ArangoClientFactory(DatabaseClientFactory):  # pylint: disable=too-few-public-methods
    """Open `ArangoDatabaseClient`s."""

    def connect(self, config: DatabaseConfig) -> DatabaseClient:
        try:
            client = ArangoClient(
                hosts=config.endpoint, request_timeout=config.request_timeout
            )
            return ArangoDatabaseClient(client, config)
        except (ArangoError, ValueError, TypeError) as e:
            raise DatabaseConnectionError(config.endpoint, str(e)) from e
