"""Unit tests for signed credentials."""
