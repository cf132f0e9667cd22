"""Test suite for schemarecord."""
