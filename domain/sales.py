"""
Domain: Daily sales series and chart buckets.

A DailySalesPoint summarizes one calendar day of counted orders. Revenue
series are built from these points for day / week / month / year views.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from .errors import InvalidInputError


class Granularity(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True, slots=True)
class DailySalesPoint:
    sale_date: date
    total_orders: int
    revenue: Decimal
    avg_order_value: Decimal
    unique_customers: int

    def __post_init__(self) -> None:
        if self.total_orders < 0:
            raise InvalidInputError("total_orders must be >= 0")
        if self.unique_customers < 0:
            raise InvalidInputError("unique_customers must be >= 0")
        if self.revenue < 0:
            raise InvalidInputError("revenue must be >= 0")


@dataclass(frozen=True, slots=True)
class RevenuePoint:
    """One chart bucket: a display label and the revenue it holds."""

    label: str
    revenue: Decimal
