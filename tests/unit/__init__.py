"""Unit tests.

Purpose
- Check one class or function at a time against in-memory fakes.

Guidelines
- No Docker, no sockets; python-arango and testcontainers are mocked.
- Drive time through `FakeClock` unless a test needs a thread to block.
- Keep tests fast enough to run on every save.
"""
