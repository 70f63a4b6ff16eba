"""Testcontainers-backed instance manager.

Starts each database instance as a Docker container with its HTTP port mapped
to a random host port. Readiness is not awaited here; the harness polls the
server itself.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping

from docker.errors import DockerException
from requests.exceptions import RequestException
from testcontainers.core.container import DockerContainer

from seedbed.domain.errors import InstanceError
from seedbed.interfaces.instances import InstanceManager, InstanceRef

logger = logging.getLogger(__name__)


class TestcontainersInstanceManager(InstanceManager):
    """Run database instances as Docker containers via testcontainers."""

    __test__ = False  # not a pytest test class

    def __init__(self) -> None:
        self._containers: dict[str, DockerContainer] = {}
        self._lock = threading.Lock()

    def start_instance(
        self, image: str, port: int, env: Mapping[str, str] | None = None
    ) -> InstanceRef:
        container = DockerContainer(image).with_exposed_ports(port)
        for key, value in (env or {}).items():
            container.with_env(key, value)

        try:
            container.start()
        except (DockerException, RequestException) as e:
            # start() may fail after the container was created
            _stop_quietly(container, image)
            raise InstanceError(image, str(e)) from e

        # Once started, the container is stopped unless a ref is handed out.
        try:
            host = container.get_container_host_ip()
            mapped_port = int(container.get_exposed_port(port))
            instance_id = container.get_wrapped_container().id
        except BaseException as e:
            _stop_quietly(container, image)
            if isinstance(e, (DockerException, RequestException, ValueError)):
                raise InstanceError(image, str(e)) from e
            raise

        with self._lock:
            self._containers[instance_id] = container
        logger.info(
            "Started %s as %s on %s:%d", image, instance_id[:12], host, mapped_port
        )
        return InstanceRef(instance_id=instance_id, host=host, port=mapped_port)

    def stop_instance(self, ref: InstanceRef) -> None:
        # The container stays registered until it has stopped, so a failed
        # stop can be retried.
        with self._lock:
            container = self._containers.get(ref.instance_id)
            if container is None:
                return
            container.stop()
            del self._containers[ref.instance_id]
        logger.info("Stopped instance %s", ref.instance_id[:12])

    def dump_logs(self, ref: InstanceRef) -> str:
        with self._lock:
            container = self._containers.get(ref.instance_id)
        if container is None:
            return ""
        try:
            stdout, stderr = container.get_logs()
        except (DockerException, RequestException) as e:
            logger.warning("Cannot read logs of %s: %s", ref.instance_id[:12], e)
            return ""
        return (stdout + stderr).decode("utf-8", errors="replace")


def _stop_quietly(container: DockerContainer, image: str) -> None:
    try:
        container.stop()
    except (DockerException, RequestException) as e:
        logger.warning("Cannot stop unregistered container of %s: %s", image, e)
