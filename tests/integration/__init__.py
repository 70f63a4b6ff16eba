"""Integration tests.

Purpose
- Run the harness end to end against a real ArangoDB server, either started
  with Testcontainers or named by ``SEEDBED_DB_URL``.

Guidelines
- Share one server per session; give every test its own logical database.
- Skipped automatically when neither Docker nor a server URL is available.
"""
