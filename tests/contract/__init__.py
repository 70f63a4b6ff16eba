"""Contract tests.

Purpose
- State the behavior of a port once and run it against every adapter
  (the in-memory fakes and the real python-arango/Docker backed ones).

Guidelines
- Parametrize adapters through a fixture that requests each backend by name.
- Only assert what the port's docstring promises.
- Real backends are marked `slow` and skipped when no server is available.
"""
