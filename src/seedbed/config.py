"""Configuration utilities for SEEDBED.

This module centralizes the harness settings (timeouts, instance image,
connection credentials) and reads overrides from the environment.

Environment variables:
- ``SEEDBED_DB_URL``: attach to an existing server instead of starting one.
- ``SEEDBED_IMAGE``: container image to start (default ``arangodb:3.11``).
- ``SEEDBED_ROOT_PASSWORD``: root password for started instances.
- ``SEEDBED_READY_TIMEOUT``: seconds to wait for readiness.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from seedbed.domain.errors import ConfigError, DatabaseUrlNotSetError
from seedbed.interfaces.database import DatabaseConfig, DatabaseUser

DB_URL_ENV = "SEEDBED_DB_URL"  # pragma: no mutate
IMAGE_ENV = "SEEDBED_IMAGE"  # pragma: no mutate
ROOT_PASSWORD_ENV = "SEEDBED_ROOT_PASSWORD"  # pragma: no mutate
READY_TIMEOUT_ENV = "SEEDBED_READY_TIMEOUT"  # pragma: no mutate

DEFAULT_IMAGE = "arangodb:3.11"
DEFAULT_PORT = 8529
DEFAULT_ROOT_PASSWORD = "arangodb"


@dataclass(frozen=True)
class Timeouts:
    """Per-step time limits, in seconds.

    Attributes:
        readiness: Whole readiness polling loop.
        database: Each database existence check / create / open call.
        collection: Each collection creation call.
        seed: The seed query (longer than schema calls; seed data is larger).
        request: Socket timeout for individual HTTP requests.
        base_interval: Linear backoff unit between readiness checks.
    """

    readiness: float = 30.0
    database: float = 5.0
    collection: float = 1.0
    seed: float = 5.0
    request: float = 10.0
    base_interval: float = 0.1

    def __post_init__(self) -> None:
        for name in ("readiness", "database", "collection", "seed", "request"):
            if getattr(self, name) < 0:
                raise ConfigError(f"timeout '{name}' must be >= 0")
        if self.base_interval <= 0:
            raise ConfigError("base_interval must be > 0")


@dataclass(frozen=True)
class InstanceConfig:
    """How to start a disposable database instance."""

    image: str = DEFAULT_IMAGE
    port: int = DEFAULT_PORT
    root_password: str = DEFAULT_ROOT_PASSWORD

    @property
    def env(self) -> dict[str, str]:
        """Container environment for the instance."""
        return {"ARANGO_ROOT_PASSWORD": self.root_password}

    def __repr__(self) -> str:
        return f"InstanceConfig(image={self.image!r}, port={self.port!r})"


@dataclass(frozen=True)
class HarnessConfig:
    """Everything the integration harness needs to know.

    Attributes:
        instance: Container settings, used when an instance is started.
        timeouts: Per-step time limits.
        root_user: User the harness connects as.
        admin_user: User attached to every database the harness creates.
        disable_tls: Talk plain HTTP to the instance.
    """

    instance: InstanceConfig = field(default_factory=InstanceConfig)
    timeouts: Timeouts = field(default_factory=Timeouts)
    root_user: str = "root"
    admin_user: DatabaseUser = field(
        default_factory=lambda: DatabaseUser("arangodb", DEFAULT_ROOT_PASSWORD)
    )
    disable_tls: bool = True

    def database_config(self, host: str, port: int) -> DatabaseConfig:
        """Return connection settings for an instance at `host:port`."""
        return DatabaseConfig(
            host=host,
            port=port,
            user=self.root_user,
            password=self.instance.root_password,
            disable_tls=self.disable_tls,
            request_timeout=self.timeouts.request,
        )


def get_db_url(environ: Mapping[str, str] | None = None) -> str:
    """Get the URL of an existing server from the environment.

    Returns:
        The value of the `SEEDBED_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `SEEDBED_DB_URL` is not set.
    """
    environ = os.environ if environ is None else environ
    if not (url := environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError(f"{DB_URL_ENV} is not set")
    return url


def _float_env(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{key} must be a number, got {raw!r}") from e


def load_harness_config(
    environ: Mapping[str, str] | None = None, base: HarnessConfig | None = None
) -> HarnessConfig:
    """Build a `HarnessConfig`, applying environment overrides to `base`.

    Raises:
        ConfigError: If an override is malformed.
    """
    environ = os.environ if environ is None else environ
    base = base or HarnessConfig()

    instance = replace(
        base.instance,
        image=environ.get(IMAGE_ENV) or base.instance.image,
        root_password=environ.get(ROOT_PASSWORD_ENV) or base.instance.root_password,
    )
    timeouts = replace(
        base.timeouts,
        readiness=_float_env(environ, READY_TIMEOUT_ENV, base.timeouts.readiness),
    )
    return replace(base, instance=instance, timeouts=timeouts)
