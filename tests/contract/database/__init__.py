"""Contract tests for the Database port."""
