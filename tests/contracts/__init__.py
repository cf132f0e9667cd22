"""Contract type tests."""
