"""
Contact repository (persistence).

Maps `contacts` rows to Contact domain entities. Derived stats (orders,
spend) are never read from or written to the row; see services.rollup_service.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from domain.contact import Contact, CustomerType
from domain.errors import InvalidInputError
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.query import Operator, Query
from repositories.store import EntityStore

# Supabase table name for contacts.
# Keep this aligned with your database schema.
_CONTACTS_TABLE: str = "contacts"


def _parse_customer_type(value: Any) -> Optional[CustomerType]:
    if value in (None, ""):
        return None
    try:
        return CustomerType(str(value))
    except ValueError:
        raise InvalidInputError(f"Unknown customer_type: {value!r}") from None


def _row_to_contact(row: Mapping[str, Any]) -> Contact:
    """Convert a contacts row into a Contact."""

    return Contact(
        id=str(row["id"]),
        username=str(row["username"]),
        created_at=parse_utc_datetime(row["created_at"]),
        full_name=row.get("full_name"),
        email=row.get("email"),
        phone=row.get("phone"),
        customer_type=_parse_customer_type(row.get("customer_type")),
        total_messages=int(row.get("total_messages") or 0),
        first_contact_at=parse_utc_datetime(row["first_contact_at"]) if row.get("first_contact_at") else None,
        last_contact_at=parse_utc_datetime(row["last_contact_at"]) if row.get("last_contact_at") else None,
    )


def contact_to_row(contact: Contact) -> Dict[str, Any]:
    """Serialize a Contact into a contacts row."""

    return {
        "id": contact.id,
        "username": contact.username,
        "full_name": contact.full_name,
        "email": contact.email,
        "phone": contact.phone,
        "customer_type": contact.customer_type.value if contact.customer_type else None,
        "total_messages": contact.total_messages,
        "first_contact_at": to_iso_utc(contact.first_contact_at, name="first_contact_at") if contact.first_contact_at else None,
        "last_contact_at": to_iso_utc(contact.last_contact_at, name="last_contact_at") if contact.last_contact_at else None,
        "created_at": to_iso_utc(contact.created_at, name="created_at"),
    }


def list_contacts(store: EntityStore) -> List[Contact]:
    """
    Retrieve all contacts, newest first.

    Returns:
        List[Contact] (possibly empty)
    """

    rows = store.fetch(Query(table=_CONTACTS_TABLE, order_by="created_at", ascending=False))
    return [_row_to_contact(row) for row in rows]


def list_contacts_by_type(store: EntityStore, customer_types: Sequence[CustomerType]) -> List[Contact]:
    """Retrieve contacts in any of the given segments, newest first."""

    query = Query(
        table=_CONTACTS_TABLE,
        order_by="created_at",
        ascending=False,
    ).where("customer_type", Operator.IN, [t.value for t in customer_types])

    return [_row_to_contact(row) for row in store.fetch(query)]


def get_contact_by_id(store: EntityStore, contact_id: str) -> Optional[Contact]:
    """
    Retrieve a single contact by its ID.

    Returns:
        Contact or None if not found
    """

    query = Query(table=_CONTACTS_TABLE, limit=1).where("id", Operator.EQ, contact_id)
    rows = store.fetch(query)

    if not rows:
        return None

    return _row_to_contact(rows[0])


def insert_contacts(store: EntityStore, contacts: Sequence[Contact]) -> None:
    store.insert(_CONTACTS_TABLE, [contact_to_row(contact) for contact in contacts])


__all__ = [
    "contact_to_row",
    "list_contacts",
    "list_contacts_by_type",
    "get_contact_by_id",
    "insert_contacts",
]
