"""Bootstrap (composition root) for SEEDBED.

Wires concrete adapters (python-arango client factory, testcontainers or
attached instance manager, regex redactor, ULID names) into an
`IntegrationHarness`, reading configuration from the environment.

Import rules:
- Test drivers import *this* package (or `seedbed.harness` with their own
  adapters).
- This package may import: `seedbed.adapters`, `seedbed.service_layer`,
  `seedbed.harness`, `seedbed.interfaces`, `seedbed.domain`, and
  `seedbed.config`.
- Inner layers must not import `seedbed.bootstrap`.
"""

from .bootstrap import (
    HarnessContainer,
    bootstrap,
    build_harness,
    build_instance_manager,
)

__all__ = ["HarnessContainer", "bootstrap", "build_harness", "build_instance_manager"]
