"""Build an integration harness from configuration."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from seedbed import config
from seedbed.adapters.arango import ArangoClientFactory
from seedbed.adapters.id_generators import ULIDGenerator
from seedbed.adapters.instances import (
    AttachedInstanceManager,
    TestcontainersInstanceManager,
)
from seedbed.adapters.redactor import Redactor
from seedbed.domain.errors import DatabaseUrlNotSetError
from seedbed.harness import IntegrationHarness

if TYPE_CHECKING:
    from rich.console import Console

    from seedbed.interfaces.clock import Clock
    from seedbed.interfaces.database import DatabaseClientFactory
    from seedbed.interfaces.instances import InstanceManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HarnessContainer:
    """A class to hold harness wiring."""

    harness: IntegrationHarness
    config: config.HarnessConfig
    attached: bool


def build_instance_manager(environ: Mapping[str, str] | None = None) -> InstanceManager:
    """Attach to ``SEEDBED_DB_URL`` when set, otherwise start containers."""
    try:
        url = config.get_db_url(environ)
    except DatabaseUrlNotSetError:
        logger.debug("%s not set; instances run in containers", config.DB_URL_ENV)
        return TestcontainersInstanceManager()
    logger.debug("Attaching to the server named by %s", config.DB_URL_ENV)
    return AttachedInstanceManager(url)


def build_harness(  # pylint: disable=too-many-arguments
    harness_config: config.HarnessConfig | None = None,
    *,
    instance_manager: InstanceManager | None = None,
    client_factory: DatabaseClientFactory | None = None,
    clock: Clock | None = None,
    console: Console | None = None,
    environ: Mapping[str, str] | None = None,
) -> IntegrationHarness:
    """Wire the default adapters into a harness.

    Raises:
        ConfigError: If an environment override is malformed.
    """
    harness_config = harness_config or config.load_harness_config(environ)
    return IntegrationHarness.from_client_factory(
        harness_config,
        instance_manager or build_instance_manager(environ),
        client_factory or ArangoClientFactory(),
        clock=clock,
        redactor=Redactor(),
        id_generator=ULIDGenerator(),
        console=console,
    )


def bootstrap(environ: Mapping[str, str] | None = None) -> HarnessContainer:
    """Bootstrap a harness from the environment."""
    harness_config = config.load_harness_config(environ)
    instance_manager = build_instance_manager(environ)
    harness = build_harness(
        harness_config, instance_manager=instance_manager, environ=environ
    )
    return HarnessContainer(
        harness=harness,
        config=harness_config,
        attached=isinstance(instance_manager, AttachedInstanceManager),
    )
