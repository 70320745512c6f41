"""
Pytest configuration.

This file adds the project root to the Python path so that tests can import
the domain, repositories, services and api packages, and provides small
factories for building valid entities.
"""

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

# Add the project root to the Python path
# so tests can import domain, repositories, etc.
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from domain.contact import Contact, CustomerType  # noqa: E402
from domain.order import Order, OrderStatus  # noqa: E402
from repositories.memory_store import InMemoryStore  # noqa: E402

T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return T0


@pytest.fixture
def make_contact():
    """Factory for contacts; only id and customer_type usually matter."""

    def _make(contact_id="c1", customer_type=CustomerType.LEAD, total_messages=0, created_at=T0, **kwargs):
        return Contact(
            id=contact_id,
            username=f"user_{contact_id}",
            created_at=created_at,
            customer_type=customer_type,
            total_messages=total_messages,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_order():
    """
    Factory for orders whose total is carried entirely by the subtotal.

    Example:
        make_order("o1", "c1", OrderStatus.PAID, "17.40")
    """

    def _make(order_id, contact_id, status, total, created_at=T0, items=()):
        amount = Decimal(str(total))
        return Order(
            id=order_id,
            order_number=f"ORD-{order_id}",
            contact_id=contact_id,
            status=OrderStatus(status),
            subtotal=amount,
            shipping_cost=Decimal("0.00"),
            tax_amount=Decimal("0.00"),
            discount_amount=Decimal("0.00"),
            total_amount=amount,
            created_at=created_at,
            items=tuple(items),
        )

    return _make


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()
