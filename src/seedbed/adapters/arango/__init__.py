"""ArangoDB adapters."""

from .client import ArangoClientFactory, ArangoDatabase, ArangoDatabaseClient

__all__ = ["ArangoClientFactory", "ArangoDatabase", "ArangoDatabaseClient"]
