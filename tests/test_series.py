"""
Tests for `services/series_service.py`.

Covers contract rules:
- day: last 7 points labeled J1..J7.
- week: 7-day windows anchored on the latest date, last 4, labeled by window
  position (S4 is the latest window).
- month: one point per date labeled with the ISO date.
- year: last 12 points labeled M1..M12.
- Short histories give fewer buckets, never padding.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.errors import InvalidInputError
from domain.order import OrderStatus
from domain.sales import DailySalesPoint, Granularity
from services.series_service import build_daily_sales, build_revenue_series


def _points(days: int, start: date = date(2025, 1, 1)) -> list:
    """One point per day; revenue on day i is i + 1."""
    return [
        DailySalesPoint(
            sale_date=start + timedelta(days=i),
            total_orders=1,
            revenue=Decimal(i + 1),
            avg_order_value=Decimal(i + 1),
            unique_customers=1,
        )
        for i in range(days)
    ]


def test_day_series_takes_last_seven_points() -> None:
    series = build_revenue_series(_points(10), Granularity.DAY)

    assert [p.label for p in series] == [f"J{i}" for i in range(1, 8)]
    assert series[0].revenue == Decimal("4.00")
    assert series[-1].revenue == Decimal("10.00")


def test_day_series_with_short_history_is_not_padded() -> None:
    series = build_revenue_series(_points(3), "day")

    assert [p.label for p in series] == ["J1", "J2", "J3"]


def test_week_series_sums_seven_day_windows() -> None:
    series = build_revenue_series(_points(28), Granularity.WEEK)

    assert [p.label for p in series] == ["S1", "S2", "S3", "S4"]
    # oldest window holds days 1..7 (revenue 1..7), newest 22..28
    assert series[0].revenue == Decimal(sum(range(1, 8)))
    assert series[-1].revenue == Decimal(sum(range(22, 29)))


def test_week_series_keeps_only_last_four_windows() -> None:
    series = build_revenue_series(_points(40), Granularity.WEEK)

    assert len(series) == 4
    assert series[-1].revenue == Decimal(sum(range(34, 41)))


def test_week_series_with_ten_days() -> None:
    series = build_revenue_series(_points(10), Granularity.WEEK)

    assert [p.label for p in series] == ["S3", "S4"]
    assert series[0].revenue == Decimal(1 + 2 + 3)
    assert series[1].revenue == Decimal(sum(range(4, 11)))


def test_week_labels_keep_their_position_across_empty_windows() -> None:
    points = [
        DailySalesPoint(date(2025, 1, 1), 1, Decimal("10.00"), Decimal("10.00"), 1),
        DailySalesPoint(date(2025, 1, 15), 1, Decimal("20.00"), Decimal("20.00"), 1),
    ]

    series = build_revenue_series(points, Granularity.WEEK)

    assert [(p.label, p.revenue) for p in series] == [("S2", Decimal("10.00")), ("S4", Decimal("20.00"))]


def test_month_series_labels_each_date() -> None:
    series = build_revenue_series(_points(3), Granularity.MONTH)

    assert [p.label for p in series] == ["2025-01-01", "2025-01-02", "2025-01-03"]


def test_year_series_takes_last_twelve_points() -> None:
    series = build_revenue_series(_points(15), Granularity.YEAR)

    assert [p.label for p in series] == [f"M{i}" for i in range(1, 13)]
    assert series[0].revenue == Decimal("4.00")


def test_input_order_does_not_matter() -> None:
    points = _points(5)

    assert build_revenue_series(list(reversed(points)), "day") == build_revenue_series(points, "day")


def test_empty_history_gives_empty_series() -> None:
    for granularity in Granularity:
        assert build_revenue_series([], granularity) == []


def test_unknown_granularity_is_rejected() -> None:
    with pytest.raises(InvalidInputError):
        build_revenue_series(_points(3), "quarter")


def test_duplicate_dates_are_rejected() -> None:
    points = _points(2)

    with pytest.raises(InvalidInputError):
        build_revenue_series(points + points[:1], "day")


def test_build_daily_sales_groups_counted_orders_by_day(make_order) -> None:
    day1 = datetime(2025, 1, 10, 9, 0, tzinfo=timezone.utc)
    day2 = datetime(2025, 1, 11, 18, 30, tzinfo=timezone.utc)
    orders = [
        make_order("o1", "c1", OrderStatus.PAID, "10.00", created_at=day1),
        make_order("o2", "c2", OrderStatus.DELIVERED, "30.00", created_at=day1),
        make_order("o3", "c1", OrderStatus.DRAFT, "99.00", created_at=day1),
        make_order("o4", "c1", OrderStatus.SHIPPED, "5.00", created_at=day2),
    ]

    series = build_daily_sales(orders)

    assert [p.sale_date for p in series] == [date(2025, 1, 10), date(2025, 1, 11)]
    assert series[0].revenue == Decimal("40.00")
    assert series[0].total_orders == 2
    assert series[0].avg_order_value == Decimal("20.00")
    assert series[0].unique_customers == 2
