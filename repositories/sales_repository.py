"""
Daily sales repository (persistence).

Reads the `daily_sales` view: one row per calendar day with order count,
revenue, average order value and distinct customers.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.money import to_decimal
from domain.sales import DailySalesPoint
from domain.time import parse_date
from repositories.query import Operator, Query
from repositories.store import EntityStore

_DAILY_SALES_TABLE: str = "daily_sales"


def _row_to_point(row: Mapping[str, Any]) -> DailySalesPoint:
    return DailySalesPoint(
        sale_date=parse_date(row["sale_date"]),
        total_orders=int(row.get("total_orders") or 0),
        revenue=to_decimal(row.get("revenue"), name="revenue"),
        avg_order_value=to_decimal(row.get("avg_order_value"), name="avg_order_value"),
        unique_customers=int(row.get("unique_customers") or 0),
    )


def point_to_row(point: DailySalesPoint) -> Dict[str, Any]:
    return {
        "sale_date": point.sale_date.isoformat(),
        "total_orders": point.total_orders,
        "revenue": str(point.revenue),
        "avg_order_value": str(point.avg_order_value),
        "unique_customers": point.unique_customers,
    }


def list_daily_sales(store: EntityStore, since: Optional[date] = None) -> List[DailySalesPoint]:
    """
    Retrieve daily sales points in chronological order.

    Args:
        store: Entity store
        since: Only days on or after this date
    """

    query = Query(table=_DAILY_SALES_TABLE, order_by="sale_date", ascending=True)
    if since is not None:
        query = query.where("sale_date", Operator.GTE, since.isoformat())

    return [_row_to_point(row) for row in store.fetch(query)]


def insert_daily_sales(store: EntityStore, points: Sequence[DailySalesPoint]) -> None:
    store.insert(_DAILY_SALES_TABLE, [point_to_row(point) for point in points])


__all__ = [
    "point_to_row",
    "list_daily_sales",
    "insert_daily_sales",
]
