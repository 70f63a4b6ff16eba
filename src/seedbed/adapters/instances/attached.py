"""Instance manager for servers that already run elsewhere.

Used when a test session points SEEDBED at an existing server (for example a
CI service container). Nothing is started or stopped; the returned refs are
marked as not owned.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit

from seedbed.domain.errors import ConfigError
from seedbed.interfaces.instances import InstanceManager, InstanceRef

DEFAULT_PORT = 8529


def parse_endpoint(url: str) -> tuple[str, int]:
    """Split a server URL into host and port.

    Raises:
        ConfigError: If the URL has no host or an invalid port.
    """
    parts = urlsplit(url if "://" in url else f"http://{url}")
    try:
        port = parts.port or DEFAULT_PORT
    except ValueError as e:
        raise ConfigError(f"Invalid port in database URL {url!r}") from e
    if not parts.hostname:
        raise ConfigError(f"Database URL {url!r} has no host")
    return parts.hostname, port


class AttachedInstanceManager(InstanceManager):
    """Hand out a ref to a fixed, externally managed server."""

    def __init__(self, url: str) -> None:
        self.host, self.port = parse_endpoint(url)

    def start_instance(
        self, image: str, port: int, env: Mapping[str, str] | None = None
    ) -> InstanceRef:
        return InstanceRef(
            instance_id=f"external:{self.host}:{self.port}",
            host=self.host,
            port=self.port,
            owned=False,
        )

    def stop_instance(self, ref: InstanceRef) -> None:
        """Externally managed servers are never stopped."""

    def dump_logs(self, ref: InstanceRef) -> str:
        return ""
