"""
Payment repository (persistence).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.errors import InvalidInputError
from domain.money import to_decimal
from domain.payment import Payment, PaymentStatus
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.query import Operator, Query
from repositories.store import EntityStore

_PAYMENTS_TABLE: str = "payments"


def _row_to_payment(row: Mapping[str, Any]) -> Payment:
    """Convert a payments row into a Payment."""

    try:
        status = PaymentStatus(str(row["payment_status"]))
    except ValueError:
        raise InvalidInputError(f"Unknown payment_status: {row['payment_status']!r}") from None

    return Payment(
        id=str(row["id"]),
        order_id=str(row["order_id"]),
        provider=str(row["provider"]),
        payment_status=status,
        amount=to_decimal(row.get("amount"), name="amount"),
        fee=to_decimal(row.get("fee"), name="fee"),
        net_amount=to_decimal(row.get("net_amount"), name="net_amount"),
        created_at=parse_utc_datetime(row["created_at"]),
        currency=str(row.get("currency") or "EUR"),
        transaction_id=row.get("transaction_id"),
        completed_at=parse_utc_datetime(row["completed_at"]) if row.get("completed_at") else None,
    )


def payment_to_row(payment: Payment) -> Dict[str, Any]:
    return {
        "id": payment.id,
        "order_id": payment.order_id,
        "provider": payment.provider,
        "payment_status": payment.payment_status.value,
        "amount": str(payment.amount),
        "fee": str(payment.fee),
        "net_amount": str(payment.net_amount),
        "currency": payment.currency,
        "transaction_id": payment.transaction_id,
        "completed_at": to_iso_utc(payment.completed_at, name="completed_at") if payment.completed_at else None,
        "created_at": to_iso_utc(payment.created_at, name="created_at"),
    }


def list_payments(store: EntityStore, order_ids: Optional[Sequence[str]] = None) -> List[Payment]:
    """
    Retrieve payments, oldest first, optionally restricted to some orders.

    Returns:
        List[Payment] (possibly empty)
    """

    query = Query(table=_PAYMENTS_TABLE, order_by="created_at")
    if order_ids is not None:
        query = query.where("order_id", Operator.IN, list(order_ids))

    return [_row_to_payment(row) for row in store.fetch(query)]


def insert_payments(store: EntityStore, payments: Sequence[Payment]) -> None:
    store.insert(_PAYMENTS_TABLE, [payment_to_row(payment) for payment in payments])


__all__ = [
    "payment_to_row",
    "list_payments",
    "insert_payments",
]
