# src/schemarecord/core/record.py
"""Record: the schema-driven entity.

A Record is constructed with a MapperContext and a table name. Its columns,
primary key and foreign keys come from the schema catalog; nothing is
declared per entity unless the entity wants hooks, protected fields or
explicit relations.

Attribute protocol (reads):
    1. record.customer    -> related record, when customer_id is a foreign key
    2. record.name        -> column value
    3. record.find_by_name_and_email(...), record.get_name(), record.set_name(v)
                          -> parsed dynamic names (see core.finders)
Writes (record.name = v) go to the column. Unknown names raise
UnknownPropertyError; both dispatch errors are AttributeErrors too.

Columns whose names collide with Record methods (e.g. "count") are still
reachable through record["count"] and record.get("count").

A bare prefix with no column (record.get_, record.find_by_) raises
MissingParametersError, which is not an AttributeError, so
hasattr(record, "get_") raises instead of returning False.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

import structlog

from schemarecord.contracts.errors import ErrorCode, SchemaError, UnknownMethodError, UnknownPropertyError
from schemarecord.contracts.schema import ColumnMetadata, ColumnState, RawSQL, Statement
from schemarecord.contracts.type_normalization import coerce_boolean, is_boolean_type
from schemarecord.core import forms
from schemarecord.core.finders import FinderCall, FinderKind, parse_finder_name
from schemarecord.core.lifecycle import POST_INSERT, POST_UPDATE, PRE_INSERT, PRE_UPDATE, HookRegistry, LifecycleHook, run_hooks
from schemarecord.core.validation import ValidationEngine

if TYPE_CHECKING:
    from schemarecord.core.context import MapperContext
    from schemarecord.core.forms import FormField

logger = structlog.get_logger(__name__)

# Names that read as method calls; unmatched ones are unknown methods, not properties
_DISPATCH_PREFIXES = ("find_", "get_", "set_")


class Record:
    """Base entity for one table row.

    Subclass to add hooks or protected fields:

        class User(Record):
            table_name = "users"
            protected_fields = frozenset({"password_hash"})

            def before_validate(self) -> None:
                self.validation.presence("name")
                self.validation.uniqueness("email")

    Subclasses must keep the (context, table_name=None) constructor signature;
    finders construct new instances through it.
    """

    table_name: ClassVar[str | None] = None
    protected_fields: ClassVar[frozenset[str]] = frozenset()

    def __init__(self, context: "MapperContext", table_name: str | None = None) -> None:
        name = table_name or type(self).table_name
        if not name:
            raise SchemaError(f"{type(self).__name__} has no table name")
        self._context = context
        self._table = name

        metadata = context.catalog.load(name)
        self._columns: dict[str, ColumnState] = {column: ColumnState(meta) for column, meta in metadata.items()}
        self._primary_key = next((column for column, meta in metadata.items() if meta.is_primary_key), None)

        self._protected: set[str] = set(type(self).protected_fields)
        if self._primary_key is not None:
            self._protected.add(self._primary_key)

        # referenced table -> (owner FK value at resolution time, related record)
        self._related: dict[str, tuple[Any, Record]] = {}
        self._validation = ValidationEngine(self)
        self._hooks = HookRegistry()

    # -- attribute protocol -------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails
        if name.startswith("_"):
            raise AttributeError(name)
        columns = self.__dict__.get("_columns")
        if columns is None:
            raise AttributeError(name)

        fk_column = f"{name}_id"
        if fk_column in columns and columns[fk_column].metadata.foreign_key is not None:
            return self.related(fk_column)
        if name in columns:
            return columns[name].value

        try:
            call = parse_finder_name(name)
        except UnknownMethodError:
            if name.startswith(_DISPATCH_PREFIXES):
                raise
            raise UnknownPropertyError(f"Property {name} does not exist") from None
        return self._bind_dynamic(name, call)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            super().__setattr__(name, value)
            return
        columns = self.__dict__.get("_columns")
        if columns is not None and name in columns:
            self.set(name, value)
        elif hasattr(type(self), name):
            super().__setattr__(name, value)
        else:
            raise UnknownPropertyError(f"Property {name} does not exist")

    def _bind_dynamic(self, name: str, call: FinderCall) -> Callable[..., Any]:
        for column in call.columns:
            self._require_column(column)

        if call.kind is FinderKind.GET:
            column = call.columns[0]

            def getter() -> Any:
                return self.get(column)

            getter.__name__ = name
            return getter

        if call.kind is FinderKind.SET:
            column = call.columns[0]

            def setter(value: Any) -> None:
                self.set(column, value)

            setter.__name__ = name
            return setter

        def finder(*args: Any) -> Any:
            pairs = call.bind(args)
            if call.kind is FinderKind.FIND_BY:
                return self.find_by_columns(pairs)
            if call.kind is FinderKind.FIND_ALL_BY:
                return self.find_all_by_columns(pairs)
            return self.find_all_as_array_by_columns(pairs)

        finder.__name__ = name
        return finder

    def __getitem__(self, column: str) -> Any:
        return self.get(column)

    def __setitem__(self, column: str, value: Any) -> None:
        self.set(column, value)

    def __contains__(self, column: object) -> bool:
        return column in self._columns

    def __repr__(self) -> str:
        if self._primary_key is None:
            return f"<{type(self).__name__} {self._table}>"
        return f"<{type(self).__name__} {self._table} {self._primary_key}={self._columns[self._primary_key].value!r}>"

    # -- columns ------------------------------------------------------------

    @property
    def context(self) -> "MapperContext":
        return self._context

    @property
    def table(self) -> str:
        return self._table

    @property
    def primary_key_column(self) -> str | None:
        return self._primary_key

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(self._columns)

    @property
    def protected(self) -> frozenset[str]:
        return frozenset(self._protected)

    def _require_column(self, column: str) -> ColumnState:
        try:
            return self._columns[column]
        except KeyError:
            raise UnknownPropertyError(f"Property {column} does not exist") from None

    def _require_primary_key(self) -> str:
        if self._primary_key is None:
            raise SchemaError(f"Table [{self._table}] has no primary key defined", code=ErrorCode.NO_PRIMARY_KEY_FOUND)
        return self._primary_key

    def column_metadata(self, column: str) -> ColumnMetadata:
        return self._require_column(column).metadata

    def get(self, column: str) -> Any:
        """Return a column value.

        Raises:
            UnknownPropertyError: If column does not exist
        """
        return self._require_column(column).value

    def set(self, column: str, value: Any) -> None:
        """Set a column value. Protected fields are settable here.

        Reassigning a foreign-key column drops the memoized related record.

        Raises:
            UnknownPropertyError: If column does not exist
        """
        state = self._require_column(column)
        state.value = value
        ref = state.metadata.foreign_key
        if ref is not None:
            self._related.pop(ref.table, None)

    def set_protected_fields(self, fields: Sequence[str]) -> None:
        """Add fields that form assignment must never write."""
        self._protected.update(fields)

    def is_column_empty(self, column: str) -> bool:
        """True when the value is falsy (None, "", 0, False)."""
        return not self.get(column)

    def set_default(self, column: str, value: Any) -> None:
        """Set column to value only when it is currently empty."""
        if self.is_column_empty(column):
            self.set(column, value)

    def to_dict(self) -> dict[str, Any]:
        return {column: state.value for column, state in self._columns.items()}

    def reset(self) -> None:
        """Null every value and forget errors and related records."""
        for state in self._columns.values():
            state.value = None
        self._related.clear()
        self._validation.clear()

    def load_row(self, row: Mapping[str, Any]) -> None:
        """Populate columns from a result row.

        Keys that are not columns are ignored. Boolean columns are coerced
        from their truthy markers. Memoized related records are dropped.
        """
        for column, value in row.items():
            state = self._columns.get(column)
            if state is None:
                continue
            state.value = coerce_boolean(value) if is_boolean_type(state.metadata.data_type) else value
        self._related.clear()

    def set_properties_from_form(self, form: Mapping[str, Any]) -> None:
        """Bulk-assign untrusted form input, skipping protected fields."""
        forms.assign_form_fields(self, form)

    def get_fields_for_form(self) -> dict[str, "FormField"]:
        return forms.describe_form_fields(self)

    # -- relations ----------------------------------------------------------

    def related(self, fk_column: str) -> "Record | None":
        """Resolve a foreign-key column to its related record (memoized)."""
        return self._context.resolver.resolve(self, fk_column)

    def related_exists(self, fk_column: str) -> bool:
        return self._context.resolver.exists(self, fk_column)

    def is_column_a_foreign_key(self, column: str) -> bool:
        return column in self._columns and self._columns[column].metadata.foreign_key is not None

    def cached_related(self, table: str, key: Any) -> "Record | None":
        """Return the memoized record for table if it was resolved from key."""
        entry = self._related.get(table)
        if entry is None or entry[0] != key:
            return None
        return entry[1]

    def cache_related(self, table: str, record: "Record", key: Any) -> None:
        self._related[table] = (key, record)

    # -- finders ------------------------------------------------------------

    def _spawn(self, row: Mapping[str, Any]) -> "Record":
        record = type(self)(self._context, table_name=self._table)
        record.load_row(row)
        return record

    def _first_row(self, statement: Statement) -> bool:
        row = self._context.gateway.get_first_row(statement.sql, statement.params)
        if not row:
            return False
        self.load_row(row)
        return True

    def _rows(self, statement: Statement) -> list[dict[str, Any]]:
        return self._context.gateway.get_records_as_array(statement.sql, statement.params)

    def _check_columns(self, pairs: Mapping[str, Any]) -> None:
        for column in pairs:
            self._require_column(column)

    def find(self, id: Any) -> bool:
        """Load the row with this primary key into this record."""
        statement = self._context.query_builder.select_by_id(self._table, self._require_primary_key(), id)
        return self._first_row(statement)

    def find_by_sql(self, sql: RawSQL, params: Sequence[Any] = ()) -> bool:
        """Load the first row of a caller-written query into this record."""
        if not isinstance(sql, RawSQL):
            raise TypeError(f"sql must be a RawSQL fragment, got {type(sql).__name__}")
        return self._first_row(Statement(sql.text, tuple(params)))

    def find_by_columns(self, column_value_pairs: Mapping[str, Any]) -> bool:
        """Load the first row matching every column = value pair."""
        self._check_columns(column_value_pairs)
        statement = self._context.query_builder.select_by_columns(self._table, column_value_pairs, limit_one=True)
        return self._first_row(statement)

    def find_all_as_array_by_columns(self, column_value_pairs: Mapping[str, Any], append_sql: RawSQL | None = None) -> list[dict[str, Any]]:
        """Raw rows matching every pair. No type coercion."""
        self._check_columns(column_value_pairs)
        statement = self._context.query_builder.select_by_columns(self._table, column_value_pairs, trailing_clause=append_sql)
        return self._rows(statement)

    def find_all_by_columns(self, column_value_pairs: Mapping[str, Any], append_sql: RawSQL | None = None) -> list["Record"]:
        return [self._spawn(row) for row in self.find_all_as_array_by_columns(column_value_pairs, append_sql)]

    def find_all_as_array(self, conditions: RawSQL | None = None, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        return self._rows(self._context.query_builder.select_all(self._table, conditions, params))

    def find_all(self, conditions: RawSQL | None = None, params: Sequence[Any] = ()) -> list["Record"]:
        """New records for every row matching a caller-escaped condition.

        Example:
            users.find_all(RawSQL("WHERE age > ? ORDER BY name"), [18])
        """
        return [self._spawn(row) for row in self.find_all_as_array(conditions, params)]

    def count(self, conditions: RawSQL | None = None, params: Sequence[Any] = ()) -> int:
        statement = self._context.query_builder.count(self._table, conditions, params)
        return int(self._context.gateway.get_first_cell(statement.sql, statement.params) or 0)

    def find_duplicate_exists(self, column_value_pairs: Mapping[str, Any]) -> bool:
        """True when another row matches every pair (own row excluded by key)."""
        self._check_columns(column_value_pairs)
        exclude = None
        if self._primary_key is not None and self._columns[self._primary_key].value is not None:
            exclude = (self._primary_key, self._columns[self._primary_key].value)
        statement = self._context.query_builder.exists_by_columns(self._table, column_value_pairs, exclude=exclude)
        return self._context.gateway.get_first_cell(statement.sql, statement.params) is not None

    # -- persistence --------------------------------------------------------

    def has_primary_key(self) -> bool:
        return self._primary_key is not None

    def is_new(self) -> bool:
        """True when the primary key is unset - the insert-vs-update criterion."""
        return self._columns[self._require_primary_key()].value is None

    def save(self) -> Any:
        """Insert when new, update otherwise."""
        if self.is_new():
            return self.insert()
        return self.update()

    def insert(self) -> Any:
        """Validate and INSERT this record.

        Returns:
            The generated primary key (True for tables without one), or None
            when validation failed. Errors stay on the record.
        """
        run_hooks(self, PRE_INSERT)
        if not self.validate():
            logger.debug("validation_failed", table=self._table, error_count=len(self._validation.errors))
            return None
        run_hooks(self, (LifecycleHook.BEFORE_SAVE_AFTER_VALIDATE,))

        statement = self._context.query_builder.insert(self._table, self._columns)
        self._context.gateway.query(statement.sql, statement.params)

        result: Any = True
        if self._primary_key is not None:
            result = self._context.gateway.get_last_insert_id(self._table, self._primary_key)
            self._columns[self._primary_key].value = result
        logger.debug("record_inserted", table=self._table, id=result)

        run_hooks(self, POST_INSERT)
        return result

    def update(self) -> bool:
        """Validate and UPDATE every column of this record (full row)."""
        primary_key = self._require_primary_key()
        run_hooks(self, PRE_UPDATE)
        if not self.validate():
            logger.debug("validation_failed", table=self._table, error_count=len(self._validation.errors))
            return False
        run_hooks(self, (LifecycleHook.BEFORE_SAVE_AFTER_VALIDATE,))

        id = self._columns[primary_key].value
        statement = self._context.query_builder.update(self._table, self._columns, primary_key, id)
        self._context.gateway.query(statement.sql, statement.params)
        logger.debug("record_updated", table=self._table, id=id)

        run_hooks(self, POST_UPDATE)
        return True

    def delete(self) -> bool:
        """DELETE this record's row. The instance is stale afterwards."""
        primary_key = self._require_primary_key()
        id = self._columns[primary_key].value
        statement = self._context.query_builder.delete(self._table, primary_key, id)
        self._context.gateway.query(statement.sql, statement.params)
        logger.debug("record_deleted", table=self._table, id=id)
        return True

    # -- lifecycle hooks (no-ops, override in entities) ----------------------

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    def before_validate(self) -> None:
        """Called first on insert and update; the usual place to run rules."""

    def before_insert(self) -> None:
        pass

    def before_update(self) -> None:
        pass

    def before_save_after_validate(self) -> None:
        pass

    def after_insert(self) -> None:
        pass

    def after_update(self) -> None:
        pass

    def after_save(self) -> None:
        pass

    # -- validation ---------------------------------------------------------

    @property
    def validation(self) -> ValidationEngine:
        return self._validation

    @property
    def errors(self) -> list[str]:
        return self._validation.errors

    def add_error(self, message: str) -> None:
        self._validation.add_error(message)

    def clear_all_errors(self) -> None:
        self._validation.clear()

    def validate(self) -> bool:
        """True when no errors have been recorded. Runs no rules."""
        return self._validation.is_valid()

    def is_valid(self) -> bool:
        return self._validation.is_valid()

    # -- transactions -------------------------------------------------------

    def begin_transaction(self) -> None:
        self._context.gateway.begin_transaction()

    def commit_transaction(self) -> None:
        self._context.gateway.commit_transaction()

    def rollback_transaction(self) -> None:
        self._context.gateway.rollback_transaction()
