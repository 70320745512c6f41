#!/usr/bin/env python3
"""
Demo Data Seeding Script

Generates demo contacts, orders (with line items), payments, reviews,
products and promotions, then writes them to the configured store.

Generation is driven by an explicit random seed: the same seed and the same
reference time always produce the same data.

Usage:
    python scripts/seed_demo_data.py
    python scripts/seed_demo_data.py --contacts 250 --seed 7
    python scripts/seed_demo_data.py --backend supabase
    python scripts/seed_demo_data.py --dry-run
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import BACKEND_MEMORY, BACKEND_SUPABASE, configure_logging, get_settings
from domain.contact import Contact, CustomerType
from domain.money import round_money
from domain.order import LineItem, Order, OrderPricingPolicy, OrderStatus
from domain.payment import Payment, PaymentStatus
from domain.product import Product
from domain.promotion import DiscountType, Promotion
from domain.review import Review
from repositories.contact_repository import insert_contacts
from repositories.memory_store import InMemoryStore
from repositories.order_repository import insert_orders
from repositories.payment_repository import insert_payments
from repositories.product_repository import product_to_row
from repositories.promotion_repository import promotion_to_row
from repositories.query import Filter, Operator, Query
from repositories.review_repository import insert_reviews
from repositories.store import EntityStore
from services.order_totals_service import DEFAULT_POLICY, build_order

logger = logging.getLogger(__name__)

DEMO_ORDER_PREFIX = "DEMO-"
DEMO_USERNAME_PREFIX = "demo_user_"
DEMO_TRANSACTION_PREFIX = "demo-"

# (order status, payment status or None when no payment exists yet)
ORDER_STATUS_BLUEPRINT: Tuple[Tuple[OrderStatus, Optional[PaymentStatus]], ...] = (
    (OrderStatus.PAID, PaymentStatus.COMPLETED),
    (OrderStatus.PROCESSING, PaymentStatus.COMPLETED),
    (OrderStatus.SHIPPED, PaymentStatus.COMPLETED),
    (OrderStatus.DELIVERED, PaymentStatus.COMPLETED),
    (OrderStatus.PENDING_PAYMENT, PaymentStatus.PENDING),
    (OrderStatus.DRAFT, None),
    (OrderStatus.CANCELLED, PaymentStatus.FAILED),
    (OrderStatus.PENDING, PaymentStatus.PENDING),
    (OrderStatus.REFUNDED, PaymentStatus.REFUNDED),
)

PAYMENT_PROVIDERS = ("stripe", "paypal")

# (id, sku, name, category, price, stock)
CATALOG: Tuple[Tuple[str, str, str, str, str, int], ...] = (
    ("1", "PK-RS-001", "Pack Reseaux Sociaux", "packs", "129.00", 40),
    ("2", "CO-RL-001", "Coaching Reels", "coaching", "89.00", 25),
    ("3", "BD-BR-001", "Bundle Branding", "packs", "249.00", 12),
    ("4", "TP-CV-001", "Template Canva Premium", "templates", "49.00", 4),
    ("5", "AU-IG-001", "Audit Instagram", "coaching", "159.00", 18),
)


@dataclass
class DemoData:
    products: List[Product] = field(default_factory=list)
    promotions: List[Promotion] = field(default_factory=list)
    contacts: List[Contact] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)
    payments: List[Payment] = field(default_factory=list)
    reviews: List[Review] = field(default_factory=list)


def _uuid(rng: random.Random) -> str:
    return str(UUID(int=rng.getrandbits(128), version=4))


def _moment_within(rng: random.Random, now: datetime, days: int) -> datetime:
    return now - timedelta(seconds=rng.randint(0, days * 24 * 60 * 60))


def build_products(now: datetime) -> List[Product]:
    created = now - timedelta(days=365)
    return [
        Product(
            id=product_id,
            sku=sku,
            name=name,
            category=category,
            price=Decimal(price),
            cost=round_money(Decimal(price) * Decimal("0.35")),
            stock_quantity=stock,
            low_stock_threshold=5,
            is_active=True,
            is_featured=product_id in ("1", "3"),
            created_at=created,
            updated_at=created,
        )
        for product_id, sku, name, category, price, stock in CATALOG
    ]


def build_promotions(now: datetime) -> List[Promotion]:
    today = now.date()
    created = now - timedelta(days=60)
    return [
        Promotion(
            id="promo_1",
            name="Soldes Hiver",
            description="-15% sur les packs",
            discount_type=DiscountType.PERCENTAGE,
            discount_value=Decimal("15"),
            start_date=today - timedelta(days=10),
            end_date=today + timedelta(days=20),
            is_active=True,
            product_ids=frozenset({"1", "3"}),
            created_at=created,
        ),
        Promotion(
            id="promo_2",
            name="Coaching Promo",
            description="-20 EUR sur le coaching",
            discount_type=DiscountType.FIXED,
            discount_value=Decimal("20"),
            start_date=today - timedelta(days=60),
            end_date=today + timedelta(days=300),
            is_active=True,
            product_ids=frozenset({"2"}),
            created_at=created + timedelta(seconds=1),
        ),
    ]


def build_contacts(rng: random.Random, count: int, now: datetime) -> List[Contact]:
    contacts: List[Contact] = []
    for i in range(1, count + 1):
        created_at = _moment_within(rng, now, 365)
        last_contact_at = min(now, created_at + timedelta(days=rng.randint(1, 15)))
        contacts.append(
            Contact(
                id=_uuid(rng),
                username=f"{DEMO_USERNAME_PREFIX}{i}",
                full_name=f"Client Demo {i}",
                email=f"{DEMO_USERNAME_PREFIX}{i}@example.com",
                phone=f"+336{rng.randint(10000000, 99999999)}",
                customer_type=rng.choice(list(CustomerType)),
                total_messages=rng.randint(5, 120),
                first_contact_at=created_at,
                last_contact_at=last_contact_at,
                created_at=created_at,
            )
        )
    return contacts


def build_line_items(rng: random.Random, products: Sequence[Product]) -> List[LineItem]:
    items: List[LineItem] = []
    for _ in range(rng.randint(1, 4)):
        product = rng.choice(list(products))
        items.append(
            LineItem(
                product_id=product.id,
                product_name=product.name,
                quantity=rng.randint(1, 3),
                unit_price=product.price,
            )
        )
    return items


def build_orders_and_payments(
    rng: random.Random,
    contacts: Sequence[Contact],
    products: Sequence[Product],
    now: datetime,
    policy: OrderPricingPolicy = DEFAULT_POLICY,
) -> Tuple[List[Order], List[Payment]]:
    orders: List[Order] = []
    payments: List[Payment] = []

    for index, contact in enumerate(contacts, start=1):
        for i in range(1, rng.randint(0, 3) + 1):
            status, payment_status = rng.choice(ORDER_STATUS_BLUEPRINT)
            created_at = _moment_within(rng, now, 180)
            paid_at = (
                min(now, created_at + timedelta(days=rng.randint(1, 7)))
                if status.is_counted
                else None
            )

            order = build_order(
                order_id=_uuid(rng),
                order_number=f"{DEMO_ORDER_PREFIX}{index:03d}-{i:02d}",
                contact_id=contact.id,
                items=build_line_items(rng, products),
                created_at=created_at,
                status=status,
                policy=policy,
                paid_at=paid_at,
            )
            orders.append(order)

            if payment_status is not None:
                payment_date = paid_at or min(now, created_at + timedelta(days=rng.randint(1, 10)))
                payments.append(
                    Payment.for_order(
                        payment_id=_uuid(rng),
                        order_id=order.id,
                        provider=rng.choice(PAYMENT_PROVIDERS),
                        payment_status=payment_status,
                        amount=order.total_amount,
                        created_at=created_at,
                        transaction_id=f"{DEMO_TRANSACTION_PREFIX}{order.id[:8]}-{i}",
                        completed_at=payment_date if payment_status is PaymentStatus.COMPLETED else None,
                    )
                )

    return orders, payments


def build_reviews(rng: random.Random, orders: Sequence[Order], now: datetime) -> List[Review]:
    reviews: List[Review] = []
    for order in orders:
        if order.status is not OrderStatus.DELIVERED or rng.random() < 0.5:
            continue
        reviews.append(
            Review(
                id=_uuid(rng),
                contact_id=order.contact_id,
                order_id=order.id,
                rating=rng.randint(3, 5),
                created_at=min(now, order.created_at + timedelta(days=rng.randint(3, 14))),
            )
        )
    return reviews


def generate_demo_data(
    seed: int,
    contact_count: int = 100,
    now: Optional[datetime] = None,
    policy: OrderPricingPolicy = DEFAULT_POLICY,
) -> DemoData:
    """
    Generate a complete, reproducible demo dataset.

    Args:
        seed: Random seed; the same seed and `now` give identical data
        contact_count: Number of contacts to generate
        now: Reference UTC time (defaults to the current time)
        policy: Order pricing policy used for order totals
    """
    if contact_count < 0:
        raise ValueError("contact_count must be >= 0")

    now = now or datetime.now(timezone.utc)
    rng = random.Random(seed)

    products = build_products(now)
    contacts = build_contacts(rng, contact_count, now)
    orders, payments = build_orders_and_payments(rng, contacts, products, now, policy)

    return DemoData(
        products=products,
        promotions=build_promotions(now),
        contacts=contacts,
        orders=orders,
        payments=payments,
        reviews=build_reviews(rng, orders, now),
    )


def purge_previous_demo_data(store: EntityStore) -> Dict[str, int]:
    """Remove rows written by an earlier seeding run."""

    def ids_with_prefix(table: str, column: str, prefix: str) -> List[Any]:
        rows = store.fetch(Query(table=table))
        return [row["id"] for row in rows if str(row.get(column) or "").startswith(prefix)]

    demo_orders = ids_with_prefix("orders", "order_number", DEMO_ORDER_PREFIX)
    demo_reviews: List[Any] = []
    if demo_orders:
        review_query = Query(table="reviews").where("order_id", Operator.IN, demo_orders)
        demo_reviews = [row["id"] for row in store.fetch(review_query)]

    removed: Dict[str, int] = {}
    for table, ids in (
        ("payments", ids_with_prefix("payments", "transaction_id", DEMO_TRANSACTION_PREFIX)),
        ("reviews", demo_reviews),
        ("orders", demo_orders),
        ("contacts", ids_with_prefix("contacts", "username", DEMO_USERNAME_PREFIX)),
    ):
        removed[table] = store.delete(table, Filter("id", Operator.IN, ids)) if ids else 0

    return removed


def write_demo_data(store: EntityStore, data: DemoData, include_catalog: bool = True) -> None:
    """Insert a generated dataset into a store."""

    if include_catalog:
        store.insert("products", [product_to_row(product) for product in data.products])
        store.insert("promotions", [promotion_to_row(promotion) for promotion in data.promotions])

    insert_contacts(store, data.contacts)
    insert_orders(store, data.orders)
    insert_payments(store, data.payments)
    insert_reviews(store, data.reviews)


def build_demo_store(
    seed: int = 42,
    contact_count: int = 100,
    now: Optional[datetime] = None,
    policy: OrderPricingPolicy = DEFAULT_POLICY,
) -> InMemoryStore:
    """Return an in-memory store populated with a reproducible demo dataset."""

    store = InMemoryStore()
    write_demo_data(store, generate_demo_data(seed, contact_count, now, policy))
    return store


def print_summary(data: DemoData, dry_run: bool) -> None:
    """Print seeding summary."""
    print()
    print("=" * 60)
    print("DEMO DATA SUMMARY")
    print("=" * 60)
    print(f"Products:                 {len(data.products)}")
    print(f"Promotions:               {len(data.promotions)}")
    print(f"Contacts:                 {len(data.contacts)}")
    print(f"Orders:                   {len(data.orders)}")
    print(f"Payments:                 {len(data.payments)}")
    print(f"Reviews:                  {len(data.reviews)}")
    print()

    if dry_run:
        print("** DRY RUN - No records were inserted **")
    else:
        print("SUCCESS: Demo data written")

    print("=" * 60)


def main() -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Seed demo CRM data")
    parser.add_argument("--contacts", type=int, default=100, help="Number of contacts to generate (default: 100)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: DEMO_SEED setting)")
    parser.add_argument(
        "--backend",
        choices=[BACKEND_MEMORY, BACKEND_SUPABASE],
        default=None,
        help="Target store (default: DATA_BACKEND setting)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Generate and summarize without writing")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)

    seed = settings.demo_seed if args.seed is None else args.seed
    backend = args.backend or settings.data_backend

    print(f"Seeding demo data (seed={seed}, contacts={args.contacts}, backend={backend})")
    data = generate_demo_data(seed, args.contacts, policy=settings.order_policy)

    if not args.dry_run:
        if backend == BACKEND_SUPABASE:
            from repositories.supabase_store import SupabaseStore

            store: EntityStore = SupabaseStore()
            removed = purge_previous_demo_data(store)
            logger.info("Purged previous demo data", extra={"removed": removed})
            # The catalog is managed from the products page on a real database.
            write_demo_data(store, data, include_catalog=False)
        else:
            store = InMemoryStore()
            write_demo_data(store, data)
            print("Memory backend: the API builds its own demo store from DEMO_SEED at startup")

    print_summary(data, args.dry_run)
    return 0


if __name__ == "__main__":
    sys.exit(main())
