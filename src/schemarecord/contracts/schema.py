# src/schemarecord/contracts/schema.py
"""Schema contracts shared by the catalog, query builder and records.

ColumnMetadata is loaded once per table and shared read-only by every
record of that table. ColumnState is per-record and holds the value.
"""

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class ForeignKeyRef:
    """Target of a foreign-key column."""

    table: str
    column: str


@dataclass(frozen=True, slots=True)
class ColumnMetadata:
    """Schema-derived description of one column.

    data_type is the lower-cased vendor base type as reported by the driver
    (e.g. "varchar", "int4", "boolean"). default_value is the raw SQL default
    expression, or None when the column has no default.
    """

    name: str
    data_type: str
    max_length: int | None = None
    default_value: str | None = None
    not_null: bool = False
    is_primary_key: bool = False
    foreign_key: ForeignKeyRef | None = None

    def with_foreign_key(self, ref: ForeignKeyRef) -> "ColumnMetadata":
        """Return a copy of this metadata pointing at ref."""
        return replace(self, foreign_key=ref)


@dataclass(slots=True)
class ColumnState:
    """Mutable value slot for one column of one record."""

    metadata: ColumnMetadata
    value: Any = None

    @property
    def is_set(self) -> bool:
        return self.value is not None


@dataclass(frozen=True, slots=True)
class RawSQL:
    """A caller-escaped SQL fragment.

    The text is spliced into statements verbatim - it is NOT escaped or
    parameterized. Only wrap trusted text (literals you wrote yourself) and
    pass untrusted values as bound parameters alongside it.

    Example:
        record.find_all(RawSQL("WHERE age > ? ORDER BY name"), [18])
    """

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Statement:
    """A parameterized statement: qmark placeholders plus positional params."""

    sql: str
    params: tuple[Any, ...] = field(default_factory=tuple)
