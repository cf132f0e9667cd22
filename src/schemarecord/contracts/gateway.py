# src/schemarecord/contracts/gateway.py
"""Database gateway protocol consumed by the record-mapping engine.

The engine never talks to a driver directly. Everything it needs from a
database engine goes through this narrow contract, so a gateway can be
swapped per engine (or faked in tests).
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from schemarecord.contracts.schema import ColumnMetadata, RawSQL


@runtime_checkable
class DatabaseGateway(Protocol):
    """Protocol for database gateways.

    SQL handed to a gateway uses qmark (``?``) placeholders with positional
    params. Translating to the driver's paramstyle is the gateway's job.

    Error handling:
        - Introspection MUST raise SchemaError when a table has no columns
        - Statement failures MUST raise QueryError (chained to the driver error)
        - No retries - resiliency belongs above or below this layer
    """

    @property
    def generated_key_sql(self) -> RawSQL:
        """SQL emitted in INSERT VALUES for a database-generated primary key."""
        ...

    def quote_identifier(self, name: str) -> str:
        """Quote a table or column identifier for this dialect."""
        ...

    def get_columns_and_meta_for_table(self, table_name: str) -> Mapping[str, ColumnMetadata]:
        """Return column metadata in table order.

        Foreign-key columns may already carry their reference; the catalog
        fills in the rest from get_foreign_keys().

        Raises:
            SchemaError: If the table has no discoverable columns
        """
        ...

    def get_foreign_keys(self, table_name: str) -> Mapping[str, Mapping[str, str]]:
        """Return {referenced_table: {referenced_column: owning_column}}, empty if none."""
        ...

    def get_first_row(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """Execute and return the first row as a dict, or None."""
        ...

    def get_records_as_array(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Execute and return every row as a dict."""
        ...

    def get_first_cell(self, sql: str, params: Sequence[Any] = ()) -> Any | None:
        """Execute and return the first column of the first row, or None."""
        ...

    def query(self, sql: str, params: Sequence[Any] = ()) -> bool:
        """Execute a statement. Returns True on success."""
        ...

    def get_last_insert_id(self, table: str, primary_key_column: str) -> Any:
        """Return the key generated by the most recent INSERT."""
        ...

    def begin_transaction(self) -> None: ...

    def commit_transaction(self) -> None: ...

    def rollback_transaction(self) -> None: ...
