# src/schemarecord/core/catalog.py
"""Schema catalog: column metadata and foreign-key maps per table.

Metadata is loaded through the gateway once per table and shared read-only
by every record of that table. Schemas do not change during a process
lifetime, so entries never expire; invalidate() exists for tooling and tests.
"""

import threading
from collections.abc import Mapping
from types import MappingProxyType

import structlog

from schemarecord.contracts.errors import SchemaError
from schemarecord.contracts.gateway import DatabaseGateway
from schemarecord.contracts.schema import ColumnMetadata, ForeignKeyRef

logger = structlog.get_logger(__name__)


class SchemaCatalog:
    """Load-once cache of table metadata."""

    def __init__(self, gateway: DatabaseGateway) -> None:
        self._gateway = gateway
        self._columns: dict[str, Mapping[str, ColumnMetadata]] = {}
        self._foreign_keys: dict[str, Mapping[str, Mapping[str, str]]] = {}
        self._lock = threading.Lock()

    def load(self, table_name: str) -> Mapping[str, ColumnMetadata]:
        """Return column metadata for a table, with FK targets attached.

        Raises:
            SchemaError: If the table has no discoverable columns
        """
        cached = self._columns.get(table_name)
        if cached is not None:
            return cached

        with self._lock:
            cached = self._columns.get(table_name)
            if cached is not None:
                return cached

            columns = dict(self._gateway.get_columns_and_meta_for_table(table_name))
            if not columns:
                raise SchemaError(f"No columns found for table [{table_name}]")

            foreign_keys = self._load_foreign_keys(table_name)
            for foreign_table, keys_to_table in foreign_keys.items():
                for foreign_column, owning_column in keys_to_table.items():
                    if owning_column not in columns:
                        raise SchemaError(f"Foreign key column [{owning_column}] is not a column of [{table_name}]")
                    # Gateways that report per-column references keep them
                    if columns[owning_column].foreign_key is not None:
                        continue
                    columns[owning_column] = columns[owning_column].with_foreign_key(ForeignKeyRef(table=foreign_table, column=foreign_column))

            frozen = MappingProxyType(columns)
            self._columns[table_name] = frozen
            logger.info(
                "schema_loaded",
                table=table_name,
                column_count=len(columns),
                foreign_key_count=sum(1 for meta in columns.values() if meta.foreign_key is not None),
            )
            return frozen

    def foreign_keys(self, table_name: str) -> Mapping[str, Mapping[str, str]]:
        """Return {referenced_table: {referenced_column: owning_column}}.

        Tables without foreign keys return an empty mapping.
        """
        cached = self._foreign_keys.get(table_name)
        if cached is not None:
            return cached
        with self._lock:
            return self._load_foreign_keys(table_name)

    def _load_foreign_keys(self, table_name: str) -> Mapping[str, Mapping[str, str]]:
        # Caller holds the lock
        cached = self._foreign_keys.get(table_name)
        if cached is not None:
            return cached
        raw = self._gateway.get_foreign_keys(table_name) or {}
        frozen = MappingProxyType({table: MappingProxyType(dict(keys)) for table, keys in raw.items()})
        self._foreign_keys[table_name] = frozen
        return frozen

    def primary_key(self, table_name: str) -> str | None:
        """Return the first primary-key column of a table, or None."""
        for name, column in self.load(table_name).items():
            if column.is_primary_key:
                return name
        return None

    def is_loaded(self, table_name: str) -> bool:
        return table_name in self._columns

    def invalidate(self, table_name: str | None = None) -> None:
        """Drop cached metadata for one table, or for all tables."""
        with self._lock:
            if table_name is None:
                self._columns.clear()
                self._foreign_keys.clear()
            else:
                self._columns.pop(table_name, None)
                self._foreign_keys.pop(table_name, None)
