"""ID generators and run-unique database names."""

import re
import threading

from ulid import monotonic

from seedbed.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods

DATABASE_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_\-]{0,63}$")


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are unique, lexicographically sortable identifiers made of a
    timestamp and a random component. This generator uses the `ulid-py`
    library.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class SimpleIdGenerator(IdGenerator):
    """A simple ID generator that produces sequential IDs.

    Note:
        Not unique across processes; for deterministic tests only.
    """

    def __init__(self, length: int = 26) -> None:
        self._counter = 0
        self._length = length
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate the next sequential identifier."""
        with self._lock:
            self._counter += 1
            return f"{self._counter:0{self._length}d}"


def unique_database_name(
    prefix: str = "test", id_generator: IdGenerator | None = None
) -> str:
    """Return a logical database name unique to this run.

    Concurrent runs must not share a database name; the provisioner's
    exists-then-create step is not atomic.

    Args:
        prefix: Leading part of the name; must start with a letter.
        id_generator: Source of the unique suffix (ULIDs by default).

    Raises:
        ValueError: If the resulting name is not a valid database name.
    """
    suffix = (id_generator or ULIDGenerator()).new_id().lower()
    name = f"{prefix}_{suffix}"
    if not DATABASE_NAME_PATTERN.match(name):
        raise ValueError(f"invalid database name: {name!r}")
    return name
