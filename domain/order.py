"""
Domain: Orders, line items and the order status set.

Business rules implemented here:
- Order statuses: draft, pending, pending_payment, paid, processing, shipped,
  delivered, cancelled, refunded. Transitions are performed by the surrounding
  application through direct updates; the domain does not enforce a
  transition table.
- A status is "counted" (contributes to revenue and order-count rollups) iff it
  is one of: paid, processing, shipped, delivered.
- A line item has quantity >= 1 and unit_price >= 0; its subtotal is
  quantity x unit_price.
- total_amount == round(subtotal + shipping_cost + tax_amount - discount_amount).

This module contains only pure domain entities/value objects: no I/O, no database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .errors import InvalidInputError
from .money import round_money, to_decimal
from .time import require_utc_timestamp


class OrderStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PENDING_PAYMENT = "pending_payment"
    PAID = "paid"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @property
    def is_counted(self) -> bool:
        return self in COUNTED_STATUSES


COUNTED_STATUSES: FrozenSet[OrderStatus] = frozenset(
    {
        OrderStatus.PAID,
        OrderStatus.PROCESSING,
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
    }
)


def is_counted(status: OrderStatus | str) -> bool:
    """
    Classify an order status for rollups.

    Raises:
        InvalidInputError: If the status is not a known order status.
    """

    try:
        return OrderStatus(status).is_counted
    except ValueError:
        raise InvalidInputError(f"Unknown order status: {status!r}") from None


@dataclass(frozen=True, slots=True)
class LineItem:
    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal

    def __post_init__(self) -> None:
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidInputError("quantity must be an integer")
        if self.quantity < 1:
            raise InvalidInputError("quantity must be >= 1")
        object.__setattr__(self, "unit_price", to_decimal(self.unit_price, name="unit_price"))
        if self.unit_price < 0:
            raise InvalidInputError("unit_price must be >= 0")

    @property
    def subtotal(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True, slots=True)
class OrderTotals:
    """Monetary breakdown of an order, every field rounded to cents."""

    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal


@dataclass(frozen=True, slots=True)
class OrderPricingPolicy:
    """
    Fixed business policy for order totals.

    Only the shipping flat rate is expected to vary between deployments; it is
    loaded from configuration (see config.settings).
    """

    shipping_flat_rate: Decimal = Decimal("9.90")
    free_shipping_threshold: Decimal = Decimal("200")
    tax_rate: Decimal = Decimal("0.20")
    discount_threshold: Decimal = Decimal("300")
    discount_rate: Decimal = Decimal("0.05")

    def __post_init__(self) -> None:
        if self.shipping_flat_rate < 0:
            raise InvalidInputError("shipping_flat_rate must be >= 0")


@dataclass(frozen=True, slots=True)
class Order:
    """
    Immutable order record.

    The monetary fields are those stored with the order; they are validated to
    reconcile but never recomputed here.
    """

    id: str
    order_number: str
    contact_id: str
    status: OrderStatus
    subtotal: Decimal
    shipping_cost: Decimal
    tax_amount: Decimal
    discount_amount: Decimal
    total_amount: Decimal
    created_at: datetime
    currency: str = "EUR"
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    paid_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.paid_at is not None:
            require_utc_timestamp("paid_at", self.paid_at)
        for name in ("subtotal", "shipping_cost", "tax_amount", "discount_amount", "total_amount"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name=name))

        expected = round_money(
            self.subtotal + self.shipping_cost + self.tax_amount - self.discount_amount
        )
        if round_money(self.total_amount) != expected:
            raise InvalidInputError(
                f"Order {self.order_number}: total_amount {self.total_amount} does not equal "
                f"subtotal + shipping_cost + tax_amount - discount_amount ({expected})"
            )

    @property
    def is_counted(self) -> bool:
        return self.status.is_counted
