"""
Tests for `services/analytics_service.py`.

The service wires repositories to the pure rollups; these tests build a small
fixture store and check the assembled view-models.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from domain.contact import CustomerType
from domain.order import LineItem, OrderStatus
from domain.product import Product
from domain.promotion import DiscountType, Promotion
from domain.review import Review
from domain.sales import DailySalesPoint, Granularity
from repositories.contact_repository import insert_contacts
from repositories.order_repository import insert_orders
from repositories.product_repository import create_product
from repositories.promotion_repository import create_promotion
from repositories.review_repository import insert_reviews
from repositories.sales_repository import insert_daily_sales
from services.analytics_service import load_catalog, load_contact_detail, load_contacts, load_dashboard

NOW = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def crm_store(store, make_contact, make_order):
    candle = LineItem("1", "Bougie", 2, Decimal("8.70"))
    insert_contacts(
        store,
        [
            make_contact("c1", CustomerType.CUSTOMER, total_messages=10, created_at=NOW - timedelta(days=30)),
            make_contact("c2", CustomerType.LEAD, total_messages=4, created_at=NOW - timedelta(days=1)),
        ],
    )
    insert_orders(
        store,
        [
            make_order("o1", "c1", OrderStatus.PAID, "17.40", NOW - timedelta(days=3), items=[candle]),
            make_order("o2", "c1", OrderStatus.SHIPPED, "25.00", NOW - timedelta(days=2)),
            make_order("o3", "c1", OrderStatus.DRAFT, "8.40", NOW - timedelta(days=1)),
            make_order("o4", "c2", OrderStatus.CANCELLED, "12.90", NOW),
        ],
    )
    insert_reviews(store, [Review(id="r1", rating=5, created_at=NOW, contact_id="c1")])
    return store


def test_load_contacts(crm_store) -> None:
    view = load_contacts(crm_store)

    assert [c.contact.id for c in view.contacts] == ["c2", "c1"]
    assert view.contacts[1].total_spent == Decimal("42.40")
    assert view.overview.conversion_rate == pytest.approx(50.0)


def test_load_contact_detail(crm_store) -> None:
    detail = load_contact_detail(crm_store, "c1", NOW)

    assert detail.contact.total_orders == 2
    assert [o.id for o in detail.orders] == ["o1", "o2", "o3"]
    assert detail.insights.days_since_first_contact == 30


def test_load_contact_detail_missing(crm_store) -> None:
    assert load_contact_detail(crm_store, "nobody", NOW) is None


def test_dashboard_derives_series_from_orders_without_daily_sales(crm_store) -> None:
    view = load_dashboard(crm_store, Granularity.DAY, Decimal("100"))

    assert view.stats.revenue == Decimal("42.40")
    assert view.stats.total_orders == 2
    assert view.stats.total_messages == 14
    assert view.stats.avg_rating == 5.0
    assert [p.revenue for p in view.revenue_series] == [Decimal("17.40"), Decimal("25.00")]
    assert view.goal.remaining == Decimal("57.60")
    assert view.top_products[0].product_name == "Bougie"
    assert view.orders_by_status[OrderStatus.CANCELLED] == 1


def test_dashboard_prefers_daily_sales_view(crm_store) -> None:
    insert_daily_sales(
        crm_store,
        [DailySalesPoint(date(2025, 1, 14), 3, Decimal("99.00"), Decimal("33.00"), 2)],
    )

    view = load_dashboard(crm_store, Granularity.WEEK, Decimal("100"))

    assert [(p.label, p.revenue) for p in view.revenue_series] == [("S4", Decimal("99.00"))]


def test_empty_store_dashboard(store) -> None:
    view = load_dashboard(store, Granularity.MONTH, Decimal("1000"))

    assert view.stats.revenue == Decimal("0")
    assert view.stats.conversion_rate == 0.0
    assert view.revenue_series == []
    assert view.top_products == []
    assert view.payments.completed_count == 0


def test_load_catalog(store) -> None:
    create_product(store, Product(id="1", name="Bougie", price=Decimal("20.00")))
    create_product(store, Product(id="2", name="Diffuseur", price=Decimal("30.00")))
    create_promotion(
        store,
        Promotion(
            id="promo_1",
            name="Soldes",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("5"),
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
            product_ids=frozenset({"2"}),
        ),
    )

    catalog = load_catalog(store, NOW)

    prices = {p.product.id: p.final_price for p in catalog.products}
    assert prices == {"1": Decimal("20.00"), "2": Decimal("25.00")}
    assert [p.id for p in catalog.active_promotions] == ["promo_1"]
