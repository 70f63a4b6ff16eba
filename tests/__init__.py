"""SEEDBED test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Behavior every implementation of a port must share
                  (in-memory fakes and the ArangoDB adapters).
- integration/  : The full bootstrap sequence against a real ArangoDB server.
- fixtures/     : Shared fixtures, registered through `pytest_plugins`.
- helpers/      : Shared utilities and in-memory fakes (no tests here).

General guidance
- Keep unit fast and deterministic (no real I/O); prefer fakes over mocks at boundaries.
- Integration tests start ArangoDB with Testcontainers (or attach to
  ``SEEDBED_DB_URL``) and are skipped when neither is available.
- Contract parametrizes implementations to ensure consistent behavior.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, contract, integration, property, slow
"""
