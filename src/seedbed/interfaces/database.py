"""Database client interfaces for SEEDBED.

This module defines:
- The `DatabaseConfig` and `DatabaseUser` DTOs used to open clients.
- The `DatabaseClientFactory`, `DatabaseClient` and `Database` ports.

Layering & dependency rules:
- Lives under `seedbed.interfaces`. Do NOT import from adapters or bootstrap.

Contract overview
-----------------
Factory:
- `connect(config)` performs no network round trip; failures are
  configuration errors (`DatabaseConnectionError`).

Client (server scope):
- `list_databases()` is the readiness check.
- `create_database(name, user)` raises `DatabaseAlreadyExistsError` when the
  name is taken (including when a concurrent caller won a create race).

Database (one logical database):
- `create_collection(name, kind)` is idempotent for a matching kind and
  raises `CollectionKindConflictError` for a different kind.
- `run_query(script, bind_vars)` is transactional over the whole script:
  if any statement fails, none of the script's effects remain.
- Once `close()` has been called every operation raises `HandleClosedError`.
- `adopt_client(client)` hands a client over to the handle; `close()` then
  closes it too.

All request failures surface as `ClientError` (or a subclass).
"""

from __future__ import annotations

import abc
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from seedbed.domain.errors import HandleClosedError
from seedbed.domain.value_objects import CollectionKind


@dataclass(frozen=True)
class DatabaseUser:
    """Credentials of a database user."""

    username: str
    password: str = ""

    def __repr__(self) -> str:
        return f"DatabaseUser(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class DatabaseConfig:  # pylint: disable=too-many-instance-attributes
    """Settings used to open a client against one server.

    Attributes:
        host: Server host name or address.
        port: Server HTTP port.
        user: User the client authenticates as.
        password: Password for `user`.
        name: Logical database the client connects to by default.
        disable_tls: Use plain HTTP instead of HTTPS.
        request_timeout: Socket timeout applied to each HTTP request, in seconds.
    """

    host: str = "localhost"
    port: int = 8529
    user: str = "root"
    password: str = ""
    name: str = "_system"
    disable_tls: bool = True
    request_timeout: float = 10.0

    @property
    def endpoint(self) -> str:
        """Return the server URL, e.g. ``http://localhost:8529``."""
        scheme = "http" if self.disable_tls else "https"
        return f"{scheme}://{self.host}:{self.port}"

    @property
    def admin_user(self) -> DatabaseUser:
        """Return the configured user as a `DatabaseUser`."""
        return DatabaseUser(self.user, self.password)

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(endpoint={self.endpoint!r}, user={self.user!r}, "
            f"password='***', name={self.name!r})"
        )


class Database(abc.ABC):
    """A live handle to one logical database."""

    _closed: bool = False
    _owned_client: DatabaseClient | None = None

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Name of the logical database."""

    @abc.abstractmethod
    def create_collection(self, name: str, kind: CollectionKind) -> None:
        """Create a collection, succeeding silently if it already exists.

        Raises:
            CollectionKindConflictError: If `name` exists with another kind.
            ClientError: If the request failed.
        """

    @abc.abstractmethod
    def collection_kind(self, name: str) -> CollectionKind | None:
        """Return the kind of collection `name`, or None if it does not exist."""

    @abc.abstractmethod
    def count(self, collection: str) -> int:
        """Return the number of records in `collection`."""

    @abc.abstractmethod
    def run_query(
        self, script: str, bind_vars: Mapping[str, Any] | None = None
    ) -> list[Any]:
        """Execute `script` transactionally and return its results.

        Raises:
            ClientError: If any part of the script failed; nothing was applied.
        """

    # --- lifecycle ---

    @property
    def closed(self) -> bool:
        """True once the handle has been closed."""
        return self._closed

    def adopt_client(self, client: DatabaseClient) -> None:
        """Make the handle responsible for closing `client`."""
        self._owned_client = client

    def close(self) -> None:
        """Invalidate the handle. Safe to call more than once.

        A client handed over with `adopt_client` is closed along with it.
        """
        if self._closed:
            return
        self._closed = True
        if self._owned_client is not None:
            self._owned_client.close()

    def _ensure_open(self) -> None:
        if self._closed:
            raise HandleClosedError(self.name)


class DatabaseClient(abc.ABC):
    """A client bound to one database server."""

    @property
    @abc.abstractmethod
    def endpoint(self) -> str:
        """URL of the server this client talks to."""

    @abc.abstractmethod
    def list_databases(self) -> Sequence[str]:
        """Return the names of all logical databases on the server."""

    @abc.abstractmethod
    def database_exists(self, name: str) -> bool:
        """Return True if a logical database called `name` exists."""

    @abc.abstractmethod
    def create_database(self, name: str, user: DatabaseUser) -> Database:
        """Create logical database `name` with `user` granted access.

        Raises:
            DatabaseAlreadyExistsError: If the name is already taken.
            ClientError: If the request failed.
        """

    @abc.abstractmethod
    def database(self, name: str) -> Database:
        """Return a handle to the existing logical database `name`."""

    def close(self) -> None:
        """Release client resources. Safe to call more than once."""


class DatabaseClientFactory(abc.ABC):  # pylint: disable=too-few-public-methods
    """Opens clients from configuration."""

    @abc.abstractmethod
    def connect(self, config: DatabaseConfig) -> DatabaseClient:
        """Open a client for `config` without touching the network.

        Raises:
            DatabaseConnectionError: If the configuration cannot produce a client.
        """
