"""
Domain: Contact (CRM) records.

Represents a person the shop talks to: a prospect, a paying customer or a VIP.

Business rules implemented here:
- customer_type is exactly one of: lead, customer, vip (or unset).
- total_orders / total_spent are NOT stored on the contact. They are derived
  from orders by the rollup service and attached through ContactWithStats.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from .errors import InvalidInputError
from .money import ZERO
from .time import require_utc_timestamp


class CustomerType(str, Enum):
    LEAD = "lead"
    CUSTOMER = "customer"
    VIP = "vip"

    @property
    def is_converted(self) -> bool:
        """A contact is converted once it has become a customer or a VIP."""
        return self in (CustomerType.CUSTOMER, CustomerType.VIP)


@dataclass(frozen=True, slots=True)
class Contact:
    """
    Contact record as stored by the repository.

    All timestamps must be passed explicitly and be UTC-aware.
    """

    id: str
    username: str
    created_at: datetime

    # Optional profile information
    full_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    customer_type: Optional[CustomerType] = None

    # Engagement
    total_messages: int = 0
    first_contact_at: Optional[datetime] = None
    last_contact_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate timestamps are UTC-aware and counters are non-negative."""
        require_utc_timestamp("created_at", self.created_at)
        if self.first_contact_at is not None:
            require_utc_timestamp("first_contact_at", self.first_contact_at)
        if self.last_contact_at is not None:
            require_utc_timestamp("last_contact_at", self.last_contact_at)
        if self.total_messages < 0:
            raise InvalidInputError("total_messages must be >= 0")

    @property
    def is_converted(self) -> bool:
        return self.customer_type is not None and self.customer_type.is_converted


@dataclass(frozen=True, slots=True)
class ContactStats:
    """Derived per-contact rollup: counted orders and lifetime spend."""

    total_orders: int = 0
    total_spent: Decimal = ZERO


@dataclass(frozen=True, slots=True)
class ContactWithStats:
    """Read model pairing a contact with its derived stats."""

    contact: Contact
    stats: ContactStats

    @property
    def total_orders(self) -> int:
        return self.stats.total_orders

    @property
    def total_spent(self) -> Decimal:
        return self.stats.total_spent
