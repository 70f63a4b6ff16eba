"""Unit tests for the integration harness."""
