"""Instance manager interface.

An instance manager starts, stops and reads logs from an isolated database
server process (usually a container). The harness drives it; the manager
itself knows nothing about readiness or provisioning.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class InstanceRef:
    """Reference to a running database instance.

    Attributes:
        instance_id: Identifier assigned by the manager (e.g. container id).
        host: Host the instance is reachable on.
        port: Host port mapped to the server's HTTP port.
        owned: True if the harness started the instance and must stop it.
    """

    instance_id: str
    host: str
    port: int
    owned: bool = True

    @property
    def endpoint(self) -> str:
        """Return the instance's HTTP endpoint."""
        return f"http://{self.host}:{self.port}"


class InstanceManager(abc.ABC):
    """Contract for managing isolated database instances."""

    @abc.abstractmethod
    def start_instance(
        self, image: str, port: int, env: Mapping[str, str] | None = None
    ) -> InstanceRef:
        """Start an instance from `image` exposing container `port`.

        Raises:
            InstanceError: If the instance could not be started.
        """

    @abc.abstractmethod
    def stop_instance(self, ref: InstanceRef) -> None:
        """Stop and remove the instance. Stopping an unknown ref is a no-op.

        If stopping fails the instance stays known, so the call can be retried.
        """

    @abc.abstractmethod
    def dump_logs(self, ref: InstanceRef) -> str:
        """Return the instance's captured output, or an empty string."""
