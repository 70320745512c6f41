"""
Product repository (persistence).

Provides catalog CRUD. Validation of field values happens in the Product
entity; this module only moves rows in and out of the store.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from domain.money import to_decimal
from domain.product import Product
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.query import Filter, Operator, Query
from repositories.store import EntityStore

logger = logging.getLogger(__name__)

_PRODUCTS_TABLE: str = "products"

# Columns a caller may change through update_product.
_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "sku",
        "description",
        "category",
        "price",
        "cost",
        "stock_quantity",
        "low_stock_threshold",
        "is_active",
        "is_featured",
    }
)


def _row_to_product(row: Mapping[str, Any]) -> Product:
    """Convert a products row into a Product."""

    return Product(
        id=str(row["id"]),
        name=str(row["name"]),
        price=to_decimal(row.get("price"), name="price"),
        stock_quantity=int(row.get("stock_quantity") or 0),
        low_stock_threshold=int(row["low_stock_threshold"]) if row.get("low_stock_threshold") is not None else 5,
        is_active=bool(row.get("is_active", True)),
        is_featured=bool(row.get("is_featured", False)),
        category=row.get("category"),
        sku=row.get("sku"),
        description=row.get("description"),
        cost=to_decimal(row["cost"], name="cost") if row.get("cost") is not None else None,
        currency=str(row.get("currency") or "EUR"),
        created_at=parse_utc_datetime(row["created_at"]) if row.get("created_at") else None,
        updated_at=parse_utc_datetime(row["updated_at"]) if row.get("updated_at") else None,
    )


def product_to_row(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "sku": product.sku,
        "description": product.description,
        "category": product.category,
        "price": str(product.price),
        "cost": str(product.cost) if product.cost is not None else None,
        "currency": product.currency,
        "stock_quantity": product.stock_quantity,
        "low_stock_threshold": product.low_stock_threshold,
        "is_active": product.is_active,
        "is_featured": product.is_featured,
        "created_at": to_iso_utc(product.created_at, name="created_at") if product.created_at else None,
        "updated_at": to_iso_utc(product.updated_at, name="updated_at") if product.updated_at else None,
    }


def list_products(store: EntityStore, active_only: bool = False) -> List[Product]:
    """
    Retrieve catalog products sorted by name.

    Args:
        store: Entity store
        active_only: Only products currently on sale
    """

    query = Query(table=_PRODUCTS_TABLE, order_by="name")
    if active_only:
        query = query.where("is_active", Operator.EQ, True)

    return [_row_to_product(row) for row in store.fetch(query)]


def get_product_by_id(store: EntityStore, product_id: str) -> Optional[Product]:
    rows = store.fetch(Query(table=_PRODUCTS_TABLE, limit=1).where("id", Operator.EQ, product_id))
    if not rows:
        return None
    return _row_to_product(rows[0])


def create_product(store: EntityStore, product: Product) -> Product:
    """
    Insert a new product.

    A product without an ID gets a generated one; timestamps default to now.
    """

    now = datetime.now(timezone.utc)
    row = product_to_row(product)
    row["id"] = product.id or str(uuid4())
    row["created_at"] = row["created_at"] or now.isoformat()
    row["updated_at"] = now.isoformat()

    store.insert(_PRODUCTS_TABLE, [row])
    logger.info(f"Created product '{row['name']}'", extra={"product_id": row["id"]})
    return _row_to_product(row)


def update_product(store: EntityStore, product_id: str, changes: Mapping[str, Any]) -> Product:
    """
    Apply field changes to a product.

    Raises:
        ValueError: If a change targets a column that cannot be updated
        LookupError: If no product has this ID
    """

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update product fields: {sorted(unknown)}")

    existing = get_product_by_id(store, product_id)
    if existing is None:
        raise LookupError(f"Product not found: {product_id}")

    # Validate the merged result before writing it.
    merged = {**product_to_row(existing), **changes}
    _row_to_product(merged)

    payload: Dict[str, Any] = {
        key: str(value) if key in ("price", "cost") and value is not None else value
        for key, value in changes.items()
    }
    payload["updated_at"] = datetime.now(timezone.utc).isoformat()

    updated = store.update(_PRODUCTS_TABLE, Filter("id", Operator.EQ, product_id), payload)
    return _row_to_product(updated[0]) if updated else _row_to_product({**merged, **payload})


def delete_product(store: EntityStore, product_id: str) -> bool:
    """Delete a product. Returns True if a row was removed."""

    removed = store.delete(_PRODUCTS_TABLE, Filter("id", Operator.EQ, product_id))
    if removed:
        logger.info(f"Deleted product {product_id}", extra={"product_id": product_id})
    return removed > 0


__all__ = [
    "product_to_row",
    "list_products",
    "get_product_by_id",
    "create_product",
    "update_product",
    "delete_product",
]
