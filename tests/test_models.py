"""Reglas de negocio de Sale y SaleItem sin base de datos."""

from collections import namedtuple
from decimal import Decimal

import pytest

from app.core.exceptions import BusinessRuleException
from app.shared.database.models import Sale, SaleItem

IncomingItem = namedtuple("IncomingItem", "id product quantity unit_price")


def make_sale() -> Sale:
    return Sale(sale_number="TEST-001", customer="Test Customer", branch="Test Branch")


def items_total(sale: Sale) -> Decimal:
    return sum((item.total_amount for item in sale.items), Decimal("0"))


def test_add_item_updates_total():
    sale = make_sale()

    item = sale.add_item("Test Product", 2, Decimal("10.00"))

    assert sale.total_amount == Decimal("20.00")
    assert item in sale.items
    assert item.discount == Decimal("0.00")


def test_add_item_applies_tier_discount():
    sale = make_sale()

    item = sale.add_item("Test Product", 5, Decimal("10.00"))

    assert item.discount_percentage == Decimal("0.10")
    assert item.discount == Decimal("5.00")
    assert item.total_amount == Decimal("45.00")
    assert sale.total_amount == Decimal("45.00")


def test_add_item_over_twenty_raises_and_leaves_sale_untouched():
    sale = make_sale()
    sale.add_item("Test Product", 1, Decimal("10.00"))

    with pytest.raises(BusinessRuleException):
        sale.add_item("Test Product", 21, Decimal("10.00"))

    assert len(sale.items) == 1
    assert sale.total_amount == Decimal("10.00")


def test_apply_quantity_discount_is_idempotent():
    item = SaleItem(product="Beer", quantity=15, unit_price=Decimal("10.00"))

    item.apply_quantity_discount()
    first = (item.discount_percentage, item.discount, item.total_amount)
    item.apply_quantity_discount()

    assert (item.discount_percentage, item.discount, item.total_amount) == first
    assert item.total_amount == item.quantity * item.unit_price - item.discount


def test_lowering_quantity_removes_discount():
    sale = make_sale()
    item = sale.add_item("Test Product", 10, Decimal("10.00"))
    item.id = 1

    assert sale.update_item_quantity(1, 3)

    assert item.discount_percentage == Decimal("0.00")
    assert item.discount == Decimal("0.00")
    assert sale.total_amount == Decimal("30.00")


def test_update_item_quantity_unknown_item_returns_false():
    sale = make_sale()
    sale.add_item("Test Product", 2, Decimal("10.00")).id = 1

    assert sale.update_item_quantity(99, 5) is False


def test_update_item_quantity_over_twenty_raises():
    sale = make_sale()
    sale.add_item("Test Product", 2, Decimal("10.00")).id = 1

    with pytest.raises(BusinessRuleException):
        sale.update_item_quantity(1, 25)


def test_remove_item_updates_total():
    sale = make_sale()
    first = sale.add_item("Product 1", 2, Decimal("10.00"))
    second = sale.add_item("Product 2", 1, Decimal("20.00"))
    first.id, second.id = 1, 2

    assert sale.remove_item(1)

    assert sale.total_amount == Decimal("20.00")
    assert [item.id for item in sale.items] == [2]


def test_remove_unknown_item_returns_false():
    sale = make_sale()
    sale.add_item("Product 1", 2, Decimal("10.00")).id = 1

    assert sale.remove_item(42) is False
    assert len(sale.items) == 1


def test_reconcile_updates_matching_adds_new_and_removes_missing():
    sale = make_sale()
    item_a = sale.add_item("A", 2, Decimal("10.00"))
    item_b = sale.add_item("B", 1, Decimal("5.00"))
    item_a.id, item_b.id = 1, 2

    sale.reconcile_items([
        IncomingItem(1, "A renamed", 5, Decimal("10.00")),
        IncomingItem(None, "C", 10, Decimal("2.00")),
    ])

    assert item_a in sale.items
    assert item_b not in sale.items
    assert len(sale.items) == 2

    assert item_a.product == "A renamed"
    assert item_a.total_amount == Decimal("45.00")

    item_c = next(item for item in sale.items if item.product == "C")
    assert item_c.discount_percentage == Decimal("0.20")
    assert item_c.total_amount == Decimal("16.00")

    assert sale.total_amount == items_total(sale) == Decimal("61.00")


def test_reconcile_unknown_id_creates_new_item():
    sale = make_sale()
    sale.add_item("A", 2, Decimal("10.00")).id = 1

    sale.reconcile_items([IncomingItem(999, "Z", 1, Decimal("1.00"))])

    assert [item.product for item in sale.items] == ["Z"]
    assert sale.items[0].id is None
    assert sale.total_amount == Decimal("1.00")


def test_reconcile_is_order_independent():
    def build():
        sale = make_sale()
        sale.add_item("A", 2, Decimal("10.00")).id = 1
        sale.add_item("B", 4, Decimal("3.00")).id = 2
        return sale

    incoming = [
        IncomingItem(2, "B", 6, Decimal("3.00")),
        IncomingItem(None, "C", 12, Decimal("1.50")),
        IncomingItem(1, "A", 3, Decimal("10.00")),
    ]
    forward, backward = build(), build()

    forward.reconcile_items(incoming)
    backward.reconcile_items(list(reversed(incoming)))

    assert forward.total_amount == backward.total_amount
    assert sorted(i.product for i in forward.items) == sorted(i.product for i in backward.items)


def test_reconcile_rejects_before_changing_anything():
    sale = make_sale()
    item = sale.add_item("A", 2, Decimal("10.00"))
    item.id = 1

    with pytest.raises(BusinessRuleException):
        sale.reconcile_items([
            IncomingItem(1, "A", 8, Decimal("10.00")),
            IncomingItem(None, "B", 30, Decimal("1.00")),
        ])

    assert item.quantity == 2
    assert len(sale.items) == 1
    assert sale.total_amount == Decimal("20.00")


def test_cancel_marks_sale_as_cancelled():
    sale = make_sale()

    sale.cancel()

    assert sale.is_cancelled is True
    assert sale.updated_at is not None


def test_largest_price_at_twenty_units_fits_total_columns():
    sale = make_sale()

    item = sale.add_item("Servidor", 20, Decimal("99999999.99"))

    assert item.discount == Decimal("399999999.96")
    assert item.total_amount == Decimal("1599999999.84")
    for column in (SaleItem.__table__.c.discount, SaleItem.__table__.c.total_amount, Sale.__table__.c.total_amount):
        assert column.type.precision >= 14
