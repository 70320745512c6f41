"""
Rollup service: derived statistics over contacts, orders, payments and reviews.

Every function here is a pure transform of its inputs. Only orders in a
counted status (paid, processing, shipped, delivered) contribute to revenue
and order counts. Empty inputs produce zero results, never a division error.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Dict, Iterable, List, Sequence

from domain.contact import Contact, ContactStats, ContactWithStats, CustomerType
from domain.errors import InvalidInputError
from domain.money import ZERO, round_money, sum_money
from domain.order import Order, OrderStatus
from domain.payment import Payment, PaymentStatus
from domain.review import Review
from domain.time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """
    Headline KPIs for the dashboard.

    conversion_rate is a percentage (0-100); avg_rating is on the 1-5 scale,
    or 0.0 when there are no reviews.
    """
    revenue: Decimal
    total_orders: int
    total_messages: int
    avg_rating: float
    conversion_rate: float

    @property
    def avg_order_value(self) -> Decimal:
        return round_money(self.revenue / max(self.total_orders, 1))


@dataclass(frozen=True, slots=True)
class ContactOverview:
    total: int
    leads: int
    customers: int
    vip: int
    total_revenue: Decimal
    avg_spent: Decimal
    conversion_rate: float


@dataclass(frozen=True, slots=True)
class ContactInsights:
    avg_order_value: Decimal
    days_since_first_contact: int
    days_per_order: int
    loyalty_score: float


@dataclass(frozen=True, slots=True)
class ProductRanking:
    product_name: str
    quantity_sold: int
    revenue: Decimal


@dataclass(frozen=True, slots=True)
class PaymentSummary:
    completed_count: int
    gross_amount: Decimal
    total_fees: Decimal
    net_amount: Decimal


class GoalMilestone(str, Enum):
    NOT_STARTED = "not_started"
    STARTED = "started"
    HALFWAY = "halfway"
    FINAL_STRETCH = "final_stretch"
    REACHED = "reached"


@dataclass(frozen=True, slots=True)
class GoalProgress:
    objective: Decimal
    progress_pct: float
    remaining: Decimal
    milestone: GoalMilestone


def _counted(orders: Iterable[Order]) -> List[Order]:
    return [order for order in orders if order.is_counted]


def _conversion_rate(contacts: Sequence[Contact]) -> float:
    if not contacts:
        return 0.0
    converted = sum(1 for contact in contacts if contact.is_converted)
    return converted / len(contacts) * 100


def compute_contact_stats(contact: Contact, orders: Iterable[Order]) -> ContactStats:
    """
    Lifetime order count and spend for one contact.

    Orders belonging to other contacts, or in a non-counted status, are ignored.

    Example:
        stats = compute_contact_stats(contact, orders)
        # paid 17.40 + shipped 25.00 (+ draft, cancelled ignored)
        # -> ContactStats(total_orders=2, total_spent=Decimal('42.40'))
    """
    counted = [order for order in _counted(orders) if order.contact_id == contact.id]
    return ContactStats(
        total_orders=len(counted),
        total_spent=sum_money(order.total_amount for order in counted),
    )


def with_contact_stats(contacts: Sequence[Contact], orders: Sequence[Order]) -> List[ContactWithStats]:
    """Attach derived stats to every contact, preserving contact order."""

    by_contact: Dict[str, List[Order]] = defaultdict(list)
    for order in orders:
        by_contact[order.contact_id].append(order)

    return [
        ContactWithStats(contact=contact, stats=compute_contact_stats(contact, by_contact.get(contact.id, [])))
        for contact in contacts
    ]


def compute_dashboard_stats(
    orders: Sequence[Order],
    contacts: Sequence[Contact],
    reviews: Sequence[Review],
) -> DashboardStats:
    """
    Headline dashboard KPIs.

    - revenue: sum of total_amount over counted orders
    - total_orders: number of counted orders
    - total_messages: sum of the message counters kept on contacts
    - avg_rating: mean review rating (0.0 without reviews)
    - conversion_rate: share of contacts that are customers or VIPs, in percent
    """
    counted = _counted(orders)
    avg_rating = sum(review.rating for review in reviews) / len(reviews) if reviews else 0.0

    return DashboardStats(
        revenue=sum_money(order.total_amount for order in counted),
        total_orders=len(counted),
        total_messages=sum(contact.total_messages for contact in contacts),
        avg_rating=float(avg_rating),
        conversion_rate=_conversion_rate(contacts),
    )


def compute_contact_overview(contacts: Sequence[ContactWithStats]) -> ContactOverview:
    """Segment counts and spend totals for the contacts list header."""

    def count(customer_type: CustomerType) -> int:
        return sum(1 for c in contacts if c.contact.customer_type is customer_type)

    total_revenue = sum_money(c.total_spent for c in contacts)
    avg_spent = round_money(total_revenue / len(contacts)) if contacts else ZERO

    return ContactOverview(
        total=len(contacts),
        leads=count(CustomerType.LEAD),
        customers=count(CustomerType.CUSTOMER),
        vip=count(CustomerType.VIP),
        total_revenue=total_revenue,
        avg_spent=avg_spent,
        conversion_rate=_conversion_rate([c.contact for c in contacts]),
    )


def compute_contact_insights(contact: ContactWithStats, now: datetime) -> ContactInsights:
    """
    Per-contact engagement figures for the contact detail view.

    The loyalty score grows by 15 points per counted order and 1 point per 10
    days of relationship, capped at 100.
    Days are counted from the contact's created_at; days_per_order rounds
    half up to whole days.
    """
    require_utc_timestamp("now", now)

    days = max(0, (now - contact.contact.created_at).days)
    orders = contact.total_orders

    avg_order_value = round_money(contact.total_spent / orders) if orders else ZERO
    days_per_order = int((Decimal(days) / orders).quantize(Decimal("1"), rounding=ROUND_HALF_UP)) if orders else 0
    loyalty_score = min(100.0, orders * 15 + days / 10)

    return ContactInsights(
        avg_order_value=avg_order_value,
        days_since_first_contact=days,
        days_per_order=days_per_order,
        loyalty_score=loyalty_score,
    )


def rank_top_products(orders: Sequence[Order], limit: int = 3) -> List[ProductRanking]:
    """
    Best sellers by quantity over counted orders.

    Ties on quantity are broken by product name so the ranking is stable.
    """
    if limit < 0:
        raise InvalidInputError("limit must be >= 0")

    quantities: Dict[str, int] = defaultdict(int)
    revenue: Dict[str, Decimal] = defaultdict(Decimal)

    for order in _counted(orders):
        for item in order.items:
            quantities[item.product_name] += item.quantity
            revenue[item.product_name] += item.subtotal

    ranked = sorted(quantities, key=lambda name: (-quantities[name], name))
    return [
        ProductRanking(product_name=name, quantity_sold=quantities[name], revenue=round_money(revenue[name]))
        for name in ranked[:limit]
    ]


def count_orders_by_status(orders: Iterable[Order]) -> Dict[OrderStatus, int]:
    """Order count per status; every status is present, in lifecycle order."""

    counts: Dict[OrderStatus, int] = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1
    return counts


def summarize_payments(payments: Iterable[Payment]) -> PaymentSummary:
    """Gross, fees and net over completed payments."""

    completed = [p for p in payments if p.payment_status is PaymentStatus.COMPLETED]
    return PaymentSummary(
        completed_count=len(completed),
        gross_amount=sum_money(p.amount for p in completed),
        total_fees=sum_money(p.fee for p in completed),
        net_amount=sum_money(p.net_amount for p in completed),
    )


def compute_goal_progress(revenue: Decimal, objective: Decimal) -> GoalProgress:
    """
    Progress of revenue against a monthly objective.

    Raises:
        InvalidInputError: If objective is not positive
    """
    if objective <= 0:
        raise InvalidInputError("objective must be > 0")

    raw_pct = float(revenue / objective * 100)
    if raw_pct >= 100:
        milestone = GoalMilestone.REACHED
    elif raw_pct >= 75:
        milestone = GoalMilestone.FINAL_STRETCH
    elif raw_pct >= 50:
        milestone = GoalMilestone.HALFWAY
    elif raw_pct >= 25:
        milestone = GoalMilestone.STARTED
    else:
        milestone = GoalMilestone.NOT_STARTED

    return GoalProgress(
        objective=round_money(objective),
        progress_pct=min(raw_pct, 100.0),
        remaining=max(ZERO, round_money(objective - revenue)),
        milestone=milestone,
    )


__all__ = [
    "DashboardStats",
    "ContactOverview",
    "ContactInsights",
    "ProductRanking",
    "PaymentSummary",
    "GoalMilestone",
    "GoalProgress",
    "compute_contact_stats",
    "with_contact_stats",
    "compute_dashboard_stats",
    "compute_contact_overview",
    "compute_contact_insights",
    "rank_top_products",
    "count_orders_by_status",
    "summarize_payments",
    "compute_goal_progress",
]
