"""SEEDBED

A bootstrap and integration-test harness for ArangoDB. It brings a disposable
database instance to a known-ready state, creates document and edge
collections, loads seed data transactionally, and issues signed credentials
for exercising authenticated code paths.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
