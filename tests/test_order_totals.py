"""
Tests for `services/order_totals_service.py`.

Covers contract rules:
- subtotal = sum(quantity * unit_price).
- Shipping is free only strictly above 200.00; otherwise the flat rate.
- Tax is 20% of the subtotal.
- Discount is 5% of the subtotal only strictly above 300.00.
- total = subtotal + shipping + tax - discount, every field rounded to cents.
- Empty orders and invalid line items are rejected.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from domain.errors import InvalidInputError
from domain.order import LineItem, Order, OrderPricingPolicy, OrderStatus
from services.order_totals_service import build_order, compute_order_totals


def _single(amount: str) -> list:
    return [LineItem("p1", "Item", 1, Decimal(amount))]


def test_small_order_pays_shipping_and_tax() -> None:
    items = [
        LineItem("p1", "Bougie Angel", 2, Decimal("4.50")),
        LineItem("p3", "Box Noel", 1, Decimal("25.00")),
    ]

    totals = compute_order_totals(items)

    assert totals.subtotal == Decimal("34.00")
    assert totals.shipping_cost == Decimal("9.90")
    assert totals.tax_amount == Decimal("6.80")
    assert totals.discount_amount == Decimal("0.00")
    assert totals.total_amount == Decimal("50.70")


@pytest.mark.parametrize(
    "subtotal, shipping, tax, discount, total",
    [
        ("200.00", "9.90", "40.00", "0.00", "249.90"),
        ("200.01", "0.00", "40.00", "0.00", "240.01"),
        ("300.00", "0.00", "60.00", "0.00", "360.00"),
        ("300.01", "0.00", "60.00", "15.00", "345.01"),
    ],
)
def test_threshold_boundaries_are_strict(subtotal, shipping, tax, discount, total) -> None:
    totals = compute_order_totals(_single(subtotal))

    assert totals.shipping_cost == Decimal(shipping)
    assert totals.tax_amount == Decimal(tax)
    assert totals.discount_amount == Decimal(discount)
    assert totals.total_amount == Decimal(total)


@pytest.mark.parametrize("amount", ["0.01", "19.99", "123.45", "250.00", "999.99"])
def test_total_reconciles_with_components(amount) -> None:
    totals = compute_order_totals(_single(amount))

    assert totals.total_amount == (
        totals.subtotal + totals.shipping_cost + totals.tax_amount - totals.discount_amount
    )


def test_flat_rate_comes_from_policy() -> None:
    policy = OrderPricingPolicy(shipping_flat_rate=Decimal("4.95"))

    totals = compute_order_totals(_single("10.00"), policy)

    assert totals.shipping_cost == Decimal("4.95")
    assert totals.total_amount == Decimal("16.95")


def test_empty_order_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        compute_order_totals([])


def test_zero_quantity_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        LineItem("p1", "Item", 0, Decimal("5.00"))


def test_negative_price_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        LineItem("p1", "Item", 1, Decimal("-1.00"))


def test_build_order_stores_computed_totals() -> None:
    created = datetime(2025, 1, 10, 9, 0, 0, tzinfo=timezone.utc)

    order = build_order(
        contact_id="c1",
        order_number="ORD-1",
        items=_single("34.00"),
        created_at=created,
        status=OrderStatus.PAID,
        order_id="o1",
    )

    assert order.id == "o1"
    assert order.total_amount == Decimal("50.70")
    assert order.is_counted is True
    assert len(order.items) == 1


def test_order_rejects_totals_that_do_not_reconcile() -> None:
    with pytest.raises(InvalidInputError):
        Order(
            id="o1",
            order_number="ORD-1",
            contact_id="c1",
            status=OrderStatus.PAID,
            subtotal=Decimal("34.00"),
            shipping_cost=Decimal("9.90"),
            tax_amount=Decimal("6.80"),
            discount_amount=Decimal("0.00"),
            total_amount=Decimal("50.00"),
            created_at=datetime(2025, 1, 10, tzinfo=timezone.utc),
        )


def test_float_prices_give_the_same_totals_as_decimals() -> None:
    items = [
        LineItem("p1", "Bougie Angel", 2, 4.50),
        LineItem("p3", "Box Noel", 1, 25.00),
    ]

    totals = compute_order_totals(items)

    assert items[0].unit_price == Decimal("4.5")
    assert totals.subtotal == Decimal("34.00")
    assert totals.total_amount == Decimal("50.70")


@pytest.mark.parametrize("unit_price", [None, "abc", float("nan")])
def test_missing_or_non_numeric_unit_price_is_rejected(unit_price) -> None:
    with pytest.raises(InvalidInputError):
        LineItem("p1", "Bougie", 1, unit_price)


def test_order_amounts_are_normalised_to_decimal() -> None:
    order = Order(
        id="o1",
        order_number="CMD-1",
        contact_id="c1",
        status=OrderStatus.PAID,
        subtotal=34.0,
        shipping_cost=9.9,
        tax_amount=6.8,
        discount_amount=0,
        total_amount=50.7,
        created_at=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
    )

    assert order.total_amount == Decimal("50.7")
    assert isinstance(order.discount_amount, Decimal)


def test_order_without_total_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        Order(
            id="o1",
            order_number="CMD-1",
            contact_id="c1",
            status=OrderStatus.PAID,
            subtotal=Decimal("34.00"),
            shipping_cost=Decimal("9.90"),
            tax_amount=Decimal("6.80"),
            discount_amount=Decimal("0.00"),
            total_amount=None,
            created_at=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        )
