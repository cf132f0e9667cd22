# src/schemarecord/core/relations.py
"""Lazy foreign-key traversal.

Related records are materialized on first access and memoized on the owning
record, keyed by the referenced table name and checked against the FK value
it was resolved from. Not-found is a normal outcome (None), never an
exception - validation treats it as "relation invalid".
"""

from typing import TYPE_CHECKING, Any, overload

import structlog

from schemarecord.contracts.errors import UnknownPropertyError

if TYPE_CHECKING:
    from schemarecord.core.record import Record

logger = structlog.get_logger(__name__)


class ForeignKeyResolver:
    """Resolves foreign-key columns to related records."""

    def resolve(self, owner: "Record", fk_column: str) -> "Record | None":
        """Return the record referenced by owner[fk_column], or None.

        Raises:
            UnknownPropertyError: If fk_column is not a foreign-key column of owner
        """
        ref = owner.column_metadata(fk_column).foreign_key
        if ref is None:
            raise UnknownPropertyError(f"Column {fk_column} of {owner.table} is not a foreign key")

        value = owner.get(fk_column)
        if value is None:
            return None

        # Keyed by the owner value; two FK columns into one table share a slot
        cached = owner.cached_related(ref.table, value)
        if cached is not None:
            return cached

        related = owner.context.load(ref.table)
        if not related.find_by_columns({ref.column: value}):
            logger.debug("relation_not_found", table=owner.table, column=fk_column, referenced_table=ref.table)
            return None

        owner.cache_related(ref.table, related, value)
        return related

    def exists(self, owner: "Record", fk_column: str) -> bool:
        return self.resolve(owner, fk_column) is not None


class BelongsTo:
    """Declared relation on an entity class.

    Example:
        class Order(Record):
            table_name = "orders"
            customer = BelongsTo(via="customer_id")

        order.customer            # resolved lazily, memoized
        order.customer = alice    # sets customer_id from alice's referenced column
    """

    def __init__(self, via: str) -> None:
        self.via = via
        self.name = via

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> "BelongsTo": ...

    @overload
    def __get__(self, instance: "Record", owner: type) -> "Record | None": ...

    def __get__(self, instance: "Record | None", owner: type) -> Any:
        if instance is None:
            return self
        return instance.related(self.via)

    def __set__(self, instance: "Record", related: "Record | None") -> None:
        if related is None:
            instance.set(self.via, None)
            return
        ref = instance.column_metadata(self.via).foreign_key
        if ref is None:
            raise UnknownPropertyError(f"Column {self.via} of {instance.table} is not a foreign key")
        if related.table != ref.table:
            raise TypeError(f"{self.name} expects a record of table {ref.table}, got {related.table}")
        value = related.get(ref.column)
        instance.set(self.via, value)
        instance.cache_related(ref.table, related, value)
