# tests/core/test_relations.py
"""Tests for lazy foreign-key traversal and declared relations."""

import pytest

from schemarecord.contracts.errors import UnknownPropertyError
from schemarecord.core.context import MapperContext, RecordRegistry
from schemarecord.core.record import Record
from schemarecord.core.relations import BelongsTo
from tests.fixtures.gateway import CUSTOMERS_COLUMNS, RecordingGateway, column

ACME = {"id": 5, "name": "Acme", "status": "active"}


@pytest.fixture
def user(context: MapperContext) -> Record:
    return Record(context, table_name="users")


class TestImplicitRelation:
    def test_relation_name_strips_id_suffix(self, user: Record, gateway: RecordingGateway) -> None:
        gateway.first_rows.append(dict(ACME))
        user.customer_id = 5
        customer = user.customer
        assert customer is not None
        assert customer.table == "customers"
        assert customer.name == "Acme"
        assert gateway.last_statement == ('SELECT * FROM "customers" WHERE "id" = ? LIMIT 1', (5,))

    def test_unset_foreign_key_resolves_to_none(self, user: Record, gateway: RecordingGateway) -> None:
        assert user.customer is None
        assert gateway.statements == []

    def test_not_found_resolves_to_none(self, user: Record) -> None:
        user.customer_id = 404
        assert user.customer is None

    def test_memoized(self, user: Record, gateway: RecordingGateway) -> None:
        gateway.first_rows.append(dict(ACME))
        user.customer_id = 5
        assert user.customer is user.customer
        assert len(gateway.statements) == 1

    def test_memoized_when_row_key_type_differs(self, user: Record, gateway: RecordingGateway) -> None:
        gateway.first_rows.append(dict(ACME))
        user.customer_id = "5"
        first = user.customer
        assert first is not None
        assert user.customer is first
        assert len(gateway.statements) == 1

    def test_reassigning_foreign_key_drops_cache(self, user: Record, gateway: RecordingGateway) -> None:
        gateway.first_rows.extend([dict(ACME), {"id": 6, "name": "Globex", "status": "active"}])
        user.customer_id = 5
        assert user.customer.name == "Acme"
        user.customer_id = 6
        assert user.customer.name == "Globex"

    def test_load_row_drops_cache(self, user: Record, gateway: RecordingGateway) -> None:
        gateway.first_rows.extend([dict(ACME), dict(ACME)])
        user.customer_id = 5
        _ = user.customer
        user.load_row({"id": 1, "customer_id": 5})
        _ = user.customer
        assert len(gateway.statements) == 2

    def test_related_on_non_foreign_key_raises(self, user: Record) -> None:
        with pytest.raises(UnknownPropertyError):
            user.related("name")

    def test_related_uses_registered_model(self, gateway: RecordingGateway) -> None:
        registry = RecordRegistry()

        @registry.register
        class Customer(Record):
            table_name = "customers"

        context = MapperContext(gateway, registry)
        user = context.load("users")
        gateway.first_rows.append(dict(ACME))
        user.customer_id = 5
        assert type(user.customer) is Customer

    def test_is_column_a_foreign_key(self, user: Record) -> None:
        assert user.is_column_a_foreign_key("customer_id")
        assert not user.is_column_a_foreign_key("name")
        assert not user.is_column_a_foreign_key("missing")


class TestSharedTableSlot:
    """Two foreign keys into one table share a memo slot, keyed by the owner value."""

    @pytest.fixture
    def transfer(self) -> Record:
        gateway = RecordingGateway(
            tables={
                "customers": CUSTOMERS_COLUMNS,
                "transfers": {
                    "id": column("id", "integer", pk=True),
                    "payer_id": column("payer_id", "integer"),
                    "payee_id": column("payee_id", "integer"),
                },
            },
            foreign_keys={"transfers": {"customers": {"id": "payer_id"}}},
        )
        context = MapperContext(gateway)
        return Record(context, table_name="transfers")

    def test_mismatched_entry_is_not_reused(self, transfer: Record) -> None:
        gateway = transfer.context.gateway
        gateway.first_rows.append({"id": 6, "name": "Globex", "status": "active"})
        acme = transfer.context.load("customers")
        acme.load_row(ACME)
        transfer.payer_id = 6
        transfer.cache_related("customers", acme, 5)
        assert transfer.payer.name == "Globex"
        assert transfer.cached_related("customers", 6).name == "Globex"
        assert transfer.cached_related("customers", 5) is None

    def test_matching_entry_is_reused(self, transfer: Record) -> None:
        acme = transfer.context.load("customers")
        acme.load_row(ACME)
        transfer.payer_id = 5
        transfer.cache_related("customers", acme, 5)
        assert transfer.payer is acme
        assert transfer.context.gateway.statements == []


class Order(Record):
    table_name = "orders"
    customer = BelongsTo(via="customer_id")


class TestBelongsTo:
    @pytest.fixture
    def acme(self, sqlite_context: MapperContext) -> Record:
        customer = sqlite_context.load("customers")
        customer.name = "Acme"
        customer.insert()
        return customer

    def test_class_access_returns_descriptor(self) -> None:
        assert isinstance(Order.customer, BelongsTo)
        assert Order.customer.name == "customer"

    def test_assigning_record_sets_foreign_key(self, sqlite_context: MapperContext, acme: Record) -> None:
        order = Order(sqlite_context)
        order.customer = acme
        assert order.customer_id == acme.id
        assert order.customer is acme

    def test_resolves_after_reload(self, sqlite_context: MapperContext, acme: Record) -> None:
        order = Order(sqlite_context)
        order.customer = acme
        order.total = 250
        new_id = order.insert()

        reloaded = Order(sqlite_context)
        reloaded.find(new_id)
        assert reloaded.customer is not None
        assert reloaded.customer.name == "Acme"

    def test_assigning_none_clears_foreign_key(self, sqlite_context: MapperContext, acme: Record) -> None:
        order = Order(sqlite_context)
        order.customer = acme
        order.customer = None
        assert order.customer_id is None
        assert order.customer is None

    def test_wrong_table_raises(self, sqlite_context: MapperContext) -> None:
        order = Order(sqlite_context)
        with pytest.raises(TypeError, match="customers"):
            order.customer = sqlite_context.load("users")


def _customer(context: MapperContext, name: str) -> Record:
    customer = context.load("customers")
    customer.name = name
    customer.insert()
    return customer


class TestTwoForeignKeysIntoOneColumn:
    """shipments.billing_id and shipments.shipping_id both reference customers(id)."""

    @pytest.fixture
    def shipment(self, sqlite_context: MapperContext) -> Record:
        return sqlite_context.load("shipments")

    def test_both_columns_are_foreign_keys(self, shipment: Record) -> None:
        assert shipment.is_column_a_foreign_key("billing_id")
        assert shipment.is_column_a_foreign_key("shipping_id")

    def test_both_relations_resolve(self, sqlite_context: MapperContext, shipment: Record) -> None:
        acme = _customer(sqlite_context, "Acme")
        globex = _customer(sqlite_context, "Globex")
        shipment.billing_id = acme.id
        shipment.shipping_id = globex.id
        assert shipment.billing.name == "Acme"
        assert shipment.shipping.name == "Globex"
        assert shipment.billing.name == "Acme"

    def test_foreign_key_exists_checks_each_column(self, sqlite_context: MapperContext, shipment: Record) -> None:
        acme = _customer(sqlite_context, "Acme")
        shipment.billing_id = acme.id
        shipment.shipping_id = 999
        assert shipment.validation.foreign_key_exists("billing_id")
        assert not shipment.validation.foreign_key_exists("shipping_id")
