"""
Order repository (persistence).

Maps `orders` rows (with their JSON `items` column) to Order domain entities.
Orders are built by services.order_totals_service.build_order, so stored
monetary fields reconcile by construction.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from domain.errors import InvalidInputError
from domain.money import to_decimal
from domain.order import LineItem, Order, OrderStatus
from domain.time import parse_utc_datetime, require_utc_timestamp, to_iso_utc
from repositories.query import Filter, Operator, Query
from repositories.store import EntityStore

logger = logging.getLogger(__name__)

_ORDERS_TABLE: str = "orders"


def _parse_status(value: Any) -> OrderStatus:
    try:
        return OrderStatus(str(value))
    except ValueError:
        raise InvalidInputError(f"Unknown order status: {value!r}") from None


def _row_to_line_item(row: Mapping[str, Any]) -> LineItem:
    # Older rows store the unit price under `price`.
    unit_price = row["unit_price"] if row.get("unit_price") is not None else row.get("price")
    return LineItem(
        product_id=str(row.get("product_id") or ""),
        product_name=str(row["product_name"]),
        quantity=int(row["quantity"]),
        unit_price=to_decimal(unit_price, name="unit_price"),
    )


def _line_item_to_row(item: LineItem) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": str(item.unit_price),
        "subtotal": str(item.subtotal),
    }


def _row_to_order(row: Mapping[str, Any]) -> Order:
    """Convert an orders row into an Order."""

    return Order(
        id=str(row["id"]),
        order_number=str(row["order_number"]),
        contact_id=str(row["contact_id"]),
        status=_parse_status(row["status"]),
        subtotal=to_decimal(row.get("subtotal"), name="subtotal"),
        shipping_cost=to_decimal(row.get("shipping_cost"), name="shipping_cost"),
        tax_amount=to_decimal(row.get("tax_amount"), name="tax_amount"),
        discount_amount=to_decimal(row.get("discount_amount"), name="discount_amount"),
        total_amount=to_decimal(row.get("total_amount"), name="total_amount"),
        created_at=parse_utc_datetime(row["created_at"]),
        currency=str(row.get("currency") or "EUR"),
        items=tuple(_row_to_line_item(item) for item in row.get("items") or []),
        paid_at=parse_utc_datetime(row["paid_at"]) if row.get("paid_at") else None,
    )


def order_to_row(order: Order) -> Dict[str, Any]:
    """Serialize an Order into an orders row."""

    return {
        "id": order.id,
        "order_number": order.order_number,
        "contact_id": order.contact_id,
        "status": order.status.value,
        "items": [_line_item_to_row(item) for item in order.items],
        "subtotal": str(order.subtotal),
        "shipping_cost": str(order.shipping_cost),
        "tax_amount": str(order.tax_amount),
        "discount_amount": str(order.discount_amount),
        "total_amount": str(order.total_amount),
        "currency": order.currency,
        "paid_at": to_iso_utc(order.paid_at, name="paid_at") if order.paid_at else None,
        "created_at": to_iso_utc(order.created_at, name="created_at"),
    }


def list_orders(
    store: EntityStore,
    statuses: Optional[Iterable[OrderStatus]] = None,
    since: Optional[datetime] = None,
) -> List[Order]:
    """
    Retrieve orders, oldest first.

    Args:
        store: Entity store
        statuses: Only orders in these statuses (all statuses if None)
        since: Only orders created at or after this UTC timestamp

    Returns:
        List[Order] (possibly empty)
    """

    query = Query(table=_ORDERS_TABLE, order_by="created_at", ascending=True)

    if statuses is not None:
        query = query.where("status", Operator.IN, [s.value for s in statuses])

    if since is not None:
        query = query.where("created_at", Operator.GTE, to_iso_utc(since, name="since"))

    return [_row_to_order(row) for row in store.fetch(query)]


def list_counted_orders(store: EntityStore, since: Optional[datetime] = None) -> List[Order]:
    """Orders that contribute to revenue (paid, processing, shipped, delivered)."""

    return list_orders(store, statuses=[s for s in OrderStatus if s.is_counted], since=since)


def list_orders_by_contact(store: EntityStore, contact_id: str, counted_only: bool = False) -> List[Order]:
    """Retrieve the order history of one contact, oldest first."""

    query = Query(table=_ORDERS_TABLE, order_by="created_at").where("contact_id", Operator.EQ, contact_id)
    if counted_only:
        query = query.where("status", Operator.IN, [s.value for s in OrderStatus if s.is_counted])

    return [_row_to_order(row) for row in store.fetch(query)]


def insert_orders(store: EntityStore, orders: Sequence[Order]) -> None:
    store.insert(_ORDERS_TABLE, [order_to_row(order) for order in orders])


def update_order_status(
    store: EntityStore,
    order_id: str,
    status: OrderStatus,
    paid_at: Optional[datetime] = None,
) -> None:
    """
    Move an order to a new status.

    Raises:
        LookupError: If no order has this ID
    """

    payload: Dict[str, Any] = {"status": status.value}
    if paid_at is not None:
        require_utc_timestamp("paid_at", paid_at)
        payload["paid_at"] = to_iso_utc(paid_at, name="paid_at")

    updated = store.update(_ORDERS_TABLE, Filter("id", Operator.EQ, order_id), payload)
    if not updated:
        raise LookupError(f"Order not found: {order_id}")

    logger.info(
        f"Order {order_id} moved to '{status.value}'",
        extra={"order_id": order_id, "status": status.value},
    )


__all__ = [
    "order_to_row",
    "list_orders",
    "list_counted_orders",
    "list_orders_by_contact",
    "insert_orders",
    "update_order_status",
]
