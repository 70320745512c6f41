"""
Domain: Promotions (time-boxed product discounts).

Business rules implemented here:
- A promotion is active for product P at time T iff:
  is_active is set, P is one of product_ids, and start_date <= T <= end_date.
- The date window is inclusive on both ends and compared on UTC calendar
  dates, so a promotion ending on 2025-01-31 still applies at 23:59 UTC that day.
- discount_value >= 0; a percentage discount cannot exceed 100.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional

from .errors import InvalidInputError
from .money import to_decimal
from .time import require_utc_timestamp


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True, slots=True)
class Promotion:
    id: str
    name: str
    discount_type: DiscountType
    discount_value: Decimal
    start_date: date
    end_date: date
    is_active: bool = True
    product_ids: FrozenSet[str] = field(default_factory=frozenset)
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)
        object.__setattr__(self, "discount_value", to_decimal(self.discount_value, name="discount_value"))
        if self.discount_value < 0:
            raise InvalidInputError("discount_value must be >= 0")
        if self.discount_type is DiscountType.PERCENTAGE and self.discount_value > 100:
            raise InvalidInputError("percentage discount_value must be <= 100")
        if self.end_date < self.start_date:
            raise InvalidInputError("end_date must be >= start_date")

    def covers(self, at: datetime) -> bool:
        """True if `at` falls inside the inclusive [start_date, end_date] window."""

        require_utc_timestamp("at", at)
        return self.start_date <= at.date() <= self.end_date

    def is_active_for(self, product_id: str, at: datetime) -> bool:
        return self.is_active and product_id in self.product_ids and self.covers(at)
