# src/schemarecord/core/__init__.py
"""Core engine: catalog, query builder, validation, relations, records, config, logging."""

from schemarecord.core.catalog import SchemaCatalog
from schemarecord.core.config import DatabaseSettings, LoggingSettings, SchemaRecordSettings, load_settings
from schemarecord.core.context import MapperContext, RecordRegistry
from schemarecord.core.database import RecordDB
from schemarecord.core.finders import FinderCall, FinderKind, parse_finder_name
from schemarecord.core.forms import FormField
from schemarecord.core.lifecycle import HookRegistry, LifecycleHook
from schemarecord.core.logging import configure_logging, get_logger
from schemarecord.core.query_builder import QueryBuilder
from schemarecord.core.record import Record
from schemarecord.core.relations import BelongsTo, ForeignKeyResolver
from schemarecord.core.validation import ValidationEngine

__all__ = [
    "BelongsTo",
    "DatabaseSettings",
    "FinderCall",
    "FinderKind",
    "ForeignKeyResolver",
    "FormField",
    "HookRegistry",
    "LifecycleHook",
    "LoggingSettings",
    "MapperContext",
    "QueryBuilder",
    "Record",
    "RecordDB",
    "RecordRegistry",
    "SchemaCatalog",
    "SchemaRecordSettings",
    "ValidationEngine",
    "configure_logging",
    "get_logger",
    "load_settings",
    "parse_finder_name",
]
