"""Contract tests for the InstanceManager port."""
