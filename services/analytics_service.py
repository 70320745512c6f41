"""
Analytics service.

Fetches entity collections through the repositories and hands them to the
pure rollup, promotion and series services. This is the seam the API layer
calls; it owns no business rule of its own.

Handles:
- Contacts list with derived stats and segment overview
- Contact detail (stats, insights, order history)
- Dashboard view-model (KPIs, goal progress, revenue series, best sellers,
  order status breakdown, payment summary)
- Catalog view-model (products with their active promotion and price)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional

from domain.contact import ContactWithStats
from domain.order import Order, OrderStatus
from domain.promotion import Promotion
from domain.sales import Granularity, RevenuePoint
from domain.time import require_utc_timestamp
from repositories.contact_repository import get_contact_by_id, list_contacts
from repositories.order_repository import list_orders, list_orders_by_contact
from repositories.payment_repository import list_payments
from repositories.product_repository import list_products
from repositories.promotion_repository import list_promotions
from repositories.review_repository import list_reviews
from repositories.sales_repository import list_daily_sales
from repositories.store import EntityStore
from services.promotion_service import PricedProduct, price_products
from services.rollup_service import (
    ContactInsights,
    ContactOverview,
    DashboardStats,
    GoalProgress,
    PaymentSummary,
    ProductRanking,
    compute_contact_insights,
    compute_contact_overview,
    compute_contact_stats,
    compute_dashboard_stats,
    compute_goal_progress,
    count_orders_by_status,
    rank_top_products,
    summarize_payments,
    with_contact_stats,
)
from services.series_service import build_daily_sales, build_revenue_series


@dataclass(frozen=True, slots=True)
class ContactsView:
    contacts: List[ContactWithStats]
    overview: ContactOverview


@dataclass(frozen=True, slots=True)
class ContactDetail:
    contact: ContactWithStats
    insights: ContactInsights
    orders: List[Order]


@dataclass(frozen=True, slots=True)
class DashboardView:
    stats: DashboardStats
    goal: GoalProgress
    granularity: Granularity
    revenue_series: List[RevenuePoint]
    top_products: List[ProductRanking]
    orders_by_status: Dict[OrderStatus, int]
    payments: PaymentSummary


@dataclass(frozen=True, slots=True)
class CatalogView:
    products: List[PricedProduct]
    active_promotions: List[Promotion]


def load_contacts(store: EntityStore) -> ContactsView:
    """
    Contacts with lifetime stats, newest first, plus the segment overview.

    Orders are fetched once for all contacts rather than once per contact.
    """
    contacts = with_contact_stats(list_contacts(store), list_orders(store))
    return ContactsView(contacts=contacts, overview=compute_contact_overview(contacts))


def load_contact_detail(store: EntityStore, contact_id: str, now: datetime) -> Optional[ContactDetail]:
    """
    One contact with stats, insights and full order history.

    Returns:
        ContactDetail or None if the contact does not exist
    """
    contact = get_contact_by_id(store, contact_id)
    if contact is None:
        return None

    orders = list_orders_by_contact(store, contact_id)
    enriched = ContactWithStats(contact=contact, stats=compute_contact_stats(contact, orders))

    return ContactDetail(
        contact=enriched,
        insights=compute_contact_insights(enriched, now),
        orders=orders,
    )


def load_dashboard(
    store: EntityStore,
    granularity: Granularity,
    objective: Decimal,
    top_products_limit: int = 3,
) -> DashboardView:
    """
    Build the dashboard view-model.

    The revenue series reads the daily_sales view; when that view is empty
    (fresh database, demo store) it is derived from the orders instead.
    """
    orders = list_orders(store)
    contacts = list_contacts(store)
    reviews = list_reviews(store)

    stats = compute_dashboard_stats(orders, contacts, reviews)

    daily_sales = list_daily_sales(store) or build_daily_sales(orders)

    return DashboardView(
        stats=stats,
        goal=compute_goal_progress(stats.revenue, objective),
        granularity=granularity,
        revenue_series=build_revenue_series(daily_sales, granularity),
        top_products=rank_top_products(orders, limit=top_products_limit),
        orders_by_status=count_orders_by_status(orders),
        payments=summarize_payments(list_payments(store)),
    )


def load_catalog(store: EntityStore, now: datetime) -> CatalogView:
    """Products with the promotion that applies at `now` and the resulting price."""

    require_utc_timestamp("now", now)

    promotions = list_promotions(store)
    return CatalogView(
        products=price_products(list_products(store), promotions, now),
        active_promotions=[promo for promo in promotions if promo.is_active],
    )


__all__ = [
    "ContactsView",
    "ContactDetail",
    "DashboardView",
    "CatalogView",
    "load_contacts",
    "load_contact_detail",
    "load_dashboard",
    "load_catalog",
]
