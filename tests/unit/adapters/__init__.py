"""Unit tests for the adapters."""
