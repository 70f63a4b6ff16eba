"""Unit tests for the composition root."""
