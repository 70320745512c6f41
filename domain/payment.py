"""
Domain: Payments captured for orders.

Business rules implemented here:
- net_amount == amount - fee.
- Processor fee follows the card-processing schedule used by the shop:
  fee = round(amount x 2.9% + 0.25).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from .errors import InvalidInputError
from .money import round_money, to_decimal
from .time import require_utc_timestamp

PROCESSING_FEE_RATE = Decimal("0.029")
PROCESSING_FEE_FIXED = Decimal("0.25")


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


def compute_processing_fee(amount: Decimal) -> Decimal:
    """Processor fee for a captured amount, rounded to cents."""

    amount = to_decimal(amount, name="amount")
    if amount < 0:
        raise InvalidInputError("amount must be >= 0")
    return round_money(amount * PROCESSING_FEE_RATE + PROCESSING_FEE_FIXED)


@dataclass(frozen=True, slots=True)
class Payment:
    """Immutable payment record for an order."""

    id: str
    order_id: str
    provider: str
    payment_status: PaymentStatus
    amount: Decimal
    fee: Decimal
    net_amount: Decimal
    created_at: datetime
    currency: str = "EUR"
    transaction_id: Optional[str] = None
    completed_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if self.completed_at is not None:
            require_utc_timestamp("completed_at", self.completed_at)
        for name in ("amount", "fee", "net_amount"):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name=name))
        if self.amount < 0:
            raise InvalidInputError("amount must be >= 0")
        if self.fee < 0:
            raise InvalidInputError("fee must be >= 0")
        if round_money(self.amount - self.fee) != round_money(self.net_amount):
            raise InvalidInputError(
                f"net_amount {self.net_amount} does not equal amount - fee "
                f"({round_money(self.amount - self.fee)})"
            )

    @staticmethod
    def for_order(
        *,
        payment_id: str,
        order_id: str,
        provider: str,
        payment_status: PaymentStatus,
        amount: Decimal,
        created_at: datetime,
        currency: str = "EUR",
        transaction_id: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> "Payment":
        """Build a payment with fee and net amount derived from the amount."""

        amount = round_money(amount)
        fee = compute_processing_fee(amount)
        return Payment(
            id=payment_id,
            order_id=order_id,
            provider=provider,
            payment_status=payment_status,
            amount=amount,
            fee=fee,
            net_amount=amount - fee,
            created_at=created_at,
            currency=currency,
            transaction_id=transaction_id,
            completed_at=completed_at,
        )
