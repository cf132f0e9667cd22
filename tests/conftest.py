# tests/conftest.py
"""Shared test fixtures.

Two kinds of database fixture:
- gateway / context: RecordingGateway fake, for exact SQL assertions
- db / sqlite_context: in-memory SQLite RecordDB with the test schema
  (see tests/fixtures/schema.py)

Hypothesis Configuration:
- "ci" profile: default (100 examples)
- "nightly" profile: thorough (1000 examples)
- "debug" profile: minimal with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator

import pytest
from hypothesis import Verbosity, settings

from schemarecord.core.context import MapperContext
from schemarecord.core.database import RecordDB
from tests.fixtures.gateway import RecordingGateway
from tests.fixtures.schema import create_schema

settings.register_profile("ci", max_examples=100)
settings.register_profile("nightly", max_examples=1000)
settings.register_profile("debug", max_examples=10, verbosity=Verbosity.verbose)
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "ci"))


@pytest.fixture
def gateway() -> RecordingGateway:
    return RecordingGateway()


@pytest.fixture
def context(gateway: RecordingGateway) -> MapperContext:
    return MapperContext(gateway)


@pytest.fixture
def db() -> Iterator[RecordDB]:
    """Function-scoped in-memory SQLite database with the test schema."""
    with RecordDB.in_memory() as database:
        create_schema(database)
        yield database


@pytest.fixture
def sqlite_context(db: RecordDB) -> MapperContext:
    return MapperContext(db)
