"""
Order totals service.

Computes the monetary breakdown of an order from its line items under the
shop's fixed pricing policy:

- subtotal: sum of quantity x unit_price over all items
- shipping_cost: free when subtotal > 200, otherwise the flat rate
- tax_amount: 20% of subtotal
- discount_amount: 5% of subtotal when subtotal > 300, otherwise 0
- total_amount: subtotal + shipping_cost + tax_amount - discount_amount

Thresholds are strict (a subtotal of exactly 200.00 still pays shipping).
Every amount is rounded with domain.money.round_money (ROUND_HALF_UP).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence
from uuid import uuid4

from domain.errors import InvalidInputError
from domain.money import ZERO, round_money
from domain.order import LineItem, Order, OrderPricingPolicy, OrderStatus, OrderTotals

DEFAULT_POLICY = OrderPricingPolicy()


def compute_order_totals(
    items: Sequence[LineItem],
    policy: OrderPricingPolicy = DEFAULT_POLICY,
) -> OrderTotals:
    """
    Compute subtotal, shipping, tax, discount and total for a set of line items.

    Args:
        items: Line items of the order (at least one)
        policy: Pricing policy (shipping flat rate comes from configuration)

    Returns:
        OrderTotals with every field rounded to cents

    Raises:
        InvalidInputError: If items is empty

    Example:
        items = [
            LineItem("p1", "Bougie Angel", 2, Decimal("4.50")),
            LineItem("p3", "Box Noel", 1, Decimal("25.00")),
        ]
        totals = compute_order_totals(items)
        # subtotal=34.00 shipping=9.90 tax=6.80 discount=0.00 total=50.70
    """
    if not items:
        raise InvalidInputError("An order needs at least one line item")

    subtotal = round_money(sum((item.subtotal for item in items), Decimal("0")))

    shipping_cost = ZERO if subtotal > policy.free_shipping_threshold else round_money(policy.shipping_flat_rate)
    tax_amount = round_money(subtotal * policy.tax_rate)

    discount_amount = ZERO
    if subtotal > policy.discount_threshold:
        discount_amount = round_money(subtotal * policy.discount_rate)

    total_amount = round_money(subtotal + shipping_cost + tax_amount - discount_amount)

    return OrderTotals(
        subtotal=subtotal,
        shipping_cost=shipping_cost,
        tax_amount=tax_amount,
        discount_amount=discount_amount,
        total_amount=total_amount,
    )


def build_order(
    *,
    contact_id: str,
    order_number: str,
    items: Sequence[LineItem],
    created_at: datetime,
    status: OrderStatus = OrderStatus.DRAFT,
    policy: OrderPricingPolicy = DEFAULT_POLICY,
    order_id: Optional[str] = None,
    paid_at: Optional[datetime] = None,
    currency: str = "EUR",
) -> Order:
    """Build an Order whose monetary fields come from compute_order_totals."""

    totals = compute_order_totals(items, policy)
    return Order(
        id=order_id or str(uuid4()),
        order_number=order_number,
        contact_id=contact_id,
        status=status,
        subtotal=totals.subtotal,
        shipping_cost=totals.shipping_cost,
        tax_amount=totals.tax_amount,
        discount_amount=totals.discount_amount,
        total_amount=totals.total_amount,
        created_at=created_at,
        currency=currency,
        items=tuple(items),
        paid_at=paid_at,
    )


__all__ = [
    "DEFAULT_POLICY",
    "compute_order_totals",
    "build_order",
]
