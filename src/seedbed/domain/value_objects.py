"""Value objects used across the bootstrap sequence."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CollectionKind(Enum):
    """Enumeration of collection kinds."""

    DOCUMENT = "document"
    EDGE = "edge"


@dataclass(frozen=True)
class CollectionSpec:
    """A named collection of a given kind."""

    name: str
    kind: CollectionKind

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("collection name must not be empty")


def _dedupe(names: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True)
class MigrationSpec:
    """The document and edge collections a logical database must contain.

    Duplicate names within a list are collapsed, keeping first occurrence.
    """

    document_collections: tuple[str, ...] = ()
    edge_collections: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "document_collections", _dedupe(tuple(self.document_collections))
        )
        object.__setattr__(
            self, "edge_collections", _dedupe(tuple(self.edge_collections))
        )

    def specs(self) -> Iterator[CollectionSpec]:
        """Yield collection specs, document collections before edge collections."""
        for name in self.document_collections:
            yield CollectionSpec(name, CollectionKind.DOCUMENT)
        for name in self.edge_collections:
            yield CollectionSpec(name, CollectionKind.EDGE)


@dataclass(frozen=True)
class SeedBatch:
    """A seed script executed as a single transactional unit.

    The script is one AQL query; its statements either all take effect or
    none do.
    """

    script: str = ""
    bind_vars: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """True if the script contains nothing to execute."""
        return not self.script.strip()


class HarnessState(Enum):
    """Lifecycle states of one harness run."""

    UNINITIALIZED = "uninitialized"
    INSTANCE_STARTING = "instance starting"
    AWAITING_READY = "awaiting ready"
    PROVISIONING = "provisioning"
    READY = "ready"
    TORN_DOWN = "torn down"
    FAILED = "failed"
