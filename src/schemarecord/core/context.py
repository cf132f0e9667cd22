# src/schemarecord/core/context.py
"""Explicit wiring for records: gateway, catalog, builder and model registry.

A MapperContext is passed to every Record. There is no process-wide
database handle; the caller owns the gateway and its lifetime.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, TypeVar, overload

from schemarecord.contracts.errors import ModelNotFoundError
from schemarecord.contracts.gateway import DatabaseGateway
from schemarecord.core.catalog import SchemaCatalog
from schemarecord.core.query_builder import QueryBuilder
from schemarecord.core.relations import ForeignKeyResolver

if TYPE_CHECKING:
    from schemarecord.core.record import Record

R = TypeVar("R", bound="Record")


class RecordRegistry:
    """Maps table names to Record subclasses.

    Tables with no registered class fall back to the generic Record.
    """

    def __init__(self) -> None:
        self._models: dict[str, type["Record"]] = {}

    @overload
    def register(self, model: type[R], *, table: str | None = None) -> type[R]: ...

    @overload
    def register(self, model: None = None, *, table: str | None = None) -> Callable[[type[R]], type[R]]: ...

    def register(self, model: type[R] | None = None, *, table: str | None = None) -> type[R] | Callable[[type[R]], type[R]]:
        """Register a model class. Usable directly or as a class decorator.

        Raises:
            ValueError: If no table name is given and the class declares none
        """

        def _register(cls: type[R]) -> type[R]:
            name = table or cls.table_name
            if not name:
                raise ValueError(f"{cls.__name__} declares no table_name; pass table=")
            self._models[name] = cls
            return cls

        if model is None:
            return _register
        return _register(model)

    def get(self, table: str) -> type["Record"]:
        from schemarecord.core.record import Record

        return self._models.get(table, Record)

    def require(self, table: str) -> type["Record"]:
        """Strict lookup.

        Raises:
            ModelNotFoundError: If no class is registered for table
        """
        try:
            return self._models[table]
        except KeyError:
            raise ModelNotFoundError(f"Model for table [{table}] not found") from None

    def __contains__(self, table: object) -> bool:
        return table in self._models


class MapperContext:
    """Everything a record needs, threaded through constructors."""

    def __init__(self, gateway: DatabaseGateway, registry: RecordRegistry | None = None) -> None:
        self.gateway = gateway
        self.registry = registry if registry is not None else RecordRegistry()
        self.catalog = SchemaCatalog(gateway)
        self.query_builder = QueryBuilder(gateway.quote_identifier, gateway.generated_key_sql)
        self.resolver = ForeignKeyResolver()

    def load(self, table: str) -> "Record":
        """Construct an empty record of the model registered for table."""
        return self.registry.get(table)(self, table_name=table)

    @contextmanager
    def transaction(self) -> Iterator["MapperContext"]:
        """Flat transaction: commit on success, roll back on any exception."""
        self.gateway.begin_transaction()
        try:
            yield self
        except BaseException:
            self.gateway.rollback_transaction()
            raise
        self.gateway.commit_transaction()
