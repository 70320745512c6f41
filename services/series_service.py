"""
Revenue series service.

Groups a chronological daily sales history into chart buckets:

- day:   the last 7 points, labeled J1..J7
- week:  7-day windows anchored on the most recent date, the last 4 windows,
         revenue summed per window, labeled S1..S4 (oldest first)
- month: one point per date, labeled with the ISO date
- year:  the last 12 points, labeled M1..M12

Shorter histories produce fewer buckets; missing buckets are never padded
with zeros.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Set

from domain.errors import InvalidInputError
from domain.money import round_money, sum_money
from domain.order import Order
from domain.sales import DailySalesPoint, Granularity, RevenuePoint

DAY_WINDOW = 7
WEEK_WINDOW = 4
WEEK_LENGTH_DAYS = 7
YEAR_WINDOW = 12


def _sequential(points: Sequence[DailySalesPoint], prefix: str) -> List[RevenuePoint]:
    return [
        RevenuePoint(label=f"{prefix}{index}", revenue=round_money(point.revenue))
        for index, point in enumerate(points, start=1)
    ]


def _weekly(points: Sequence[DailySalesPoint]) -> List[RevenuePoint]:
    latest = points[-1].sale_date
    totals: Dict[int, Decimal] = defaultdict(Decimal)

    for point in points:
        weeks_back = (latest - point.sale_date).days // WEEK_LENGTH_DAYS
        if weeks_back < WEEK_WINDOW:
            totals[weeks_back] += point.revenue

    # S4 is the window ending on the latest date; empty windows are skipped
    return [
        RevenuePoint(label=f"S{WEEK_WINDOW - weeks_back}", revenue=round_money(totals[weeks_back]))
        for weeks_back in sorted(totals, reverse=True)
    ]


def build_revenue_series(
    daily_sales: Iterable[DailySalesPoint],
    granularity: Granularity | str,
) -> List[RevenuePoint]:
    """
    Build chart buckets from daily sales points.

    Args:
        daily_sales: Daily points in any order (sorted by sale_date here)
        granularity: day, week, month or year

    Returns:
        Chronological list of RevenuePoint (possibly empty)

    Raises:
        InvalidInputError: If granularity is unknown or two points share a date
    """
    try:
        granularity = Granularity(granularity)
    except ValueError:
        raise InvalidInputError(f"Unknown granularity: {granularity!r}") from None

    points = sorted(daily_sales, key=lambda point: point.sale_date)
    if not points:
        return []

    dates = [point.sale_date for point in points]
    if len(set(dates)) != len(dates):
        raise InvalidInputError("daily_sales must hold at most one point per calendar date")

    if granularity is Granularity.DAY:
        return _sequential(points[-DAY_WINDOW:], "J")
    if granularity is Granularity.WEEK:
        return _weekly(points)
    if granularity is Granularity.YEAR:
        return _sequential(points[-YEAR_WINDOW:], "M")
    return [
        RevenuePoint(label=point.sale_date.isoformat(), revenue=round_money(point.revenue))
        for point in points
    ]


def build_daily_sales(orders: Iterable[Order]) -> List[DailySalesPoint]:
    """
    Derive the daily sales series from counted orders.

    Orders are grouped by the UTC calendar date of created_at.
    """
    by_day: Dict[date, List[Order]] = defaultdict(list)
    for order in orders:
        if order.is_counted:
            by_day[order.created_at.date()].append(order)

    series: List[DailySalesPoint] = []
    for sale_date in sorted(by_day):
        day_orders = by_day[sale_date]
        revenue = sum_money(order.total_amount for order in day_orders)
        customers: Set[str] = {order.contact_id for order in day_orders}
        series.append(
            DailySalesPoint(
                sale_date=sale_date,
                total_orders=len(day_orders),
                revenue=revenue,
                avg_order_value=round_money(revenue / len(day_orders)),
                unique_customers=len(customers),
            )
        )

    return series


__all__ = [
    "build_revenue_series",
    "build_daily_sales",
]
