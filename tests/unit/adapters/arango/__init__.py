"""Unit tests for the ArangoDB adapters."""
