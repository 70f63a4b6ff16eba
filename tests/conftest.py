"""Global pytest configuration for SEEDBED.

Shared fixtures live in `tests/fixtures/` and are registered here so every
test directory can use them.
"""

pytest_plugins = [
    "tests.fixtures.fakes",
    "tests.fixtures.arangodb",
]
