# src/schemarecord/core/query_builder.py
"""Parameterized SQL synthesis from schema metadata.

Every statement uses qmark placeholders with positional params, and every
identifier goes through the gateway's quoting. Values are always bound.
The only text spliced in verbatim is:
- the generated-key marker for primary keys on INSERT
- column default literals and NULL on INSERT
- RawSQL fragments supplied by the caller (caller-escaped, never sanitized)
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from schemarecord.contracts.errors import MissingParametersError
from schemarecord.contracts.schema import ColumnState, RawSQL, Statement


def ansi_quote(name: str) -> str:
    """Double-quote an identifier, doubling embedded quotes."""
    return '"' + name.replace('"', '""') + '"'


def _require_raw(fragment: RawSQL | None, argument: str) -> str | None:
    if fragment is None:
        return None
    if not isinstance(fragment, RawSQL):
        raise TypeError(f"{argument} must be a RawSQL fragment (caller-escaped SQL), got {type(fragment).__name__}")
    return fragment.text.strip() or None


class QueryBuilder:
    """Builds SELECT/INSERT/UPDATE/DELETE/COUNT statements.

    Args:
        quote: Identifier quoting function (defaults to ANSI double quotes)
        generated_key_sql: Marker emitted for primary keys on INSERT
    """

    def __init__(
        self,
        quote: Callable[[str], str] = ansi_quote,
        generated_key_sql: RawSQL = RawSQL("DEFAULT"),
    ) -> None:
        self._quote = quote
        self._generated_key_sql = generated_key_sql

    def _where(self, pairs: Mapping[str, Any]) -> tuple[str, list[Any]]:
        if not pairs:
            raise MissingParametersError("At least one column is required to build a WHERE clause")
        clauses = [f"{self._quote(column)} = ?" for column in pairs]
        return " AND ".join(clauses), list(pairs.values())

    def select_by_id(self, table: str, primary_key_column: str, id: Any) -> Statement:
        sql = f"SELECT * FROM {self._quote(table)} WHERE {self._quote(primary_key_column)} = ?"
        return Statement(sql, (id,))

    def select_by_columns(
        self,
        table: str,
        column_value_pairs: Mapping[str, Any],
        limit_one: bool = False,
        trailing_clause: RawSQL | None = None,
    ) -> Statement:
        """Conjunctive equality lookup.

        Values are bound in the iteration order of column_value_pairs.
        trailing_clause (e.g. ORDER BY) is appended verbatim before LIMIT.
        """
        where, params = self._where(column_value_pairs)
        sql = f"SELECT * FROM {self._quote(table)} WHERE {where}"
        trailing = _require_raw(trailing_clause, "trailing_clause")
        if trailing:
            sql += f" {trailing}"
        if limit_one:
            sql += " LIMIT 1"
        return Statement(sql, tuple(params))

    def select_all(self, table: str, conditions: RawSQL | None = None, params: Sequence[Any] = ()) -> Statement:
        """SELECT every column of table, followed by a caller-escaped condition."""
        quoted = self._quote(table)
        sql = f"SELECT {quoted}.* FROM {quoted}"
        condition = _require_raw(conditions, "conditions")
        if condition:
            sql += f" {condition}"
        return Statement(sql, tuple(params))

    def exists_by_columns(
        self,
        table: str,
        column_value_pairs: Mapping[str, Any],
        exclude: tuple[str, Any] | None = None,
    ) -> Statement:
        """Probe whether a row matches, optionally excluding one key value.

        The excluded key value is a bound parameter.
        """
        where, params = self._where(column_value_pairs)
        if exclude is not None:
            column, value = exclude
            where += f" AND {self._quote(column)} <> ?"
            params.append(value)
        return Statement(f"SELECT 1 FROM {self._quote(table)} WHERE {where} LIMIT 1", tuple(params))

    def insert(self, table: str, columns: Mapping[str, ColumnState]) -> Statement:
        """INSERT every column, in metadata order.

        Primary keys get the generated-key marker. Unset columns get their
        default literal, or NULL. Set columns are bound.
        """
        names: list[str] = []
        values: list[str] = []
        params: list[Any] = []
        for name, state in columns.items():
            names.append(self._quote(name))
            meta = state.metadata
            if meta.is_primary_key:
                values.append(self._generated_key_sql.text)
            elif state.value is None:
                values.append(meta.default_value if meta.default_value is not None else "NULL")
            else:
                values.append("?")
                params.append(state.value)
        sql = f"INSERT INTO {self._quote(table)} ({', '.join(names)}) VALUES ({', '.join(values)})"
        return Statement(sql, tuple(params))

    def update(self, table: str, columns: Mapping[str, ColumnState], primary_key_column: str, id: Any) -> Statement:
        """UPDATE every column to its current value (full row, not a diff)."""
        sets = [f"{self._quote(name)} = ?" for name in columns]
        params = [state.value for state in columns.values()]
        params.append(id)
        sql = f"UPDATE {self._quote(table)} SET {', '.join(sets)} WHERE {self._quote(primary_key_column)} = ?"
        return Statement(sql, tuple(params))

    def delete(self, table: str, primary_key_column: str, id: Any) -> Statement:
        return Statement(f"DELETE FROM {self._quote(table)} WHERE {self._quote(primary_key_column)} = ?", (id,))

    def count(self, table: str, condition_clause: RawSQL | None = None, params: Sequence[Any] = ()) -> Statement:
        sql = f"SELECT COUNT(*) FROM {self._quote(table)}"
        condition = _require_raw(condition_clause, "condition_clause")
        if condition:
            sql += f" {condition}"
        return Statement(sql, tuple(params))
