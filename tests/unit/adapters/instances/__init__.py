"""Unit tests for the instance managers."""
