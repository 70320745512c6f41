"""
Promotion repository (persistence).

Promotions are returned in creation order. That order is the priority used
when several promotions cover the same product (see services.promotion_service).
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from uuid import uuid4

from domain.errors import InvalidInputError
from domain.money import to_decimal
from domain.promotion import DiscountType, Promotion
from domain.time import parse_date, parse_utc_datetime, to_iso_utc
from repositories.query import Filter, Operator, Query
from repositories.store import EntityStore

logger = logging.getLogger(__name__)

_PROMOTIONS_TABLE: str = "promotions"

_UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "description",
        "discount_type",
        "discount_value",
        "start_date",
        "end_date",
        "is_active",
        "product_ids",
    }
)


def _row_to_promotion(row: Mapping[str, Any]) -> Promotion:
    """Convert a promotions row into a Promotion."""

    try:
        discount_type = DiscountType(str(row["discount_type"]))
    except ValueError:
        raise InvalidInputError(f"Unknown discount_type: {row['discount_type']!r}") from None

    return Promotion(
        id=str(row["id"]),
        name=str(row["name"]),
        discount_type=discount_type,
        discount_value=to_decimal(row.get("discount_value"), name="discount_value"),
        start_date=parse_date(row["start_date"]),
        end_date=parse_date(row["end_date"]),
        is_active=bool(row.get("is_active", True)),
        product_ids=frozenset(str(pid) for pid in row.get("product_ids") or []),
        description=row.get("description"),
        created_at=parse_utc_datetime(row["created_at"]) if row.get("created_at") else None,
    )


def promotion_to_row(promotion: Promotion) -> Dict[str, Any]:
    return {
        "id": promotion.id,
        "name": promotion.name,
        "description": promotion.description,
        "discount_type": promotion.discount_type.value,
        "discount_value": str(promotion.discount_value),
        "start_date": promotion.start_date.isoformat(),
        "end_date": promotion.end_date.isoformat(),
        "is_active": promotion.is_active,
        "product_ids": sorted(promotion.product_ids),
        "created_at": to_iso_utc(promotion.created_at, name="created_at") if promotion.created_at else None,
    }


def list_promotions(store: EntityStore, active_only: bool = False) -> List[Promotion]:
    """
    Retrieve promotions in creation order.

    Args:
        store: Entity store
        active_only: Only promotions whose active flag is set (dates not checked)
    """

    query = Query(table=_PROMOTIONS_TABLE, order_by="created_at")
    if active_only:
        query = query.where("is_active", Operator.EQ, True)

    return [_row_to_promotion(row) for row in store.fetch(query)]


def get_promotion_by_id(store: EntityStore, promotion_id: str) -> Optional[Promotion]:
    rows = store.fetch(Query(table=_PROMOTIONS_TABLE, limit=1).where("id", Operator.EQ, promotion_id))
    if not rows:
        return None
    return _row_to_promotion(rows[0])


def create_promotion(store: EntityStore, promotion: Promotion) -> Promotion:
    now = datetime.now(timezone.utc).isoformat()
    row = promotion_to_row(promotion)
    row["id"] = promotion.id or f"promo_{uuid4().hex[:12]}"
    row["created_at"] = row["created_at"] or now
    row["updated_at"] = now

    store.insert(_PROMOTIONS_TABLE, [row])
    logger.info(f"Created promotion '{row['name']}'", extra={"promotion_id": row["id"]})
    return _row_to_promotion(row)


def update_promotion(store: EntityStore, promotion_id: str, changes: Mapping[str, Any]) -> Promotion:
    """
    Apply field changes to a promotion.

    Raises:
        ValueError: If a change targets a column that cannot be updated
        LookupError: If no promotion has this ID
    """

    unknown = set(changes) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update promotion fields: {sorted(unknown)}")

    existing = get_promotion_by_id(store, promotion_id)
    if existing is None:
        raise LookupError(f"Promotion not found: {promotion_id}")

    merged = _row_to_promotion({**promotion_to_row(existing), **changes})
    payload = {key: value for key, value in promotion_to_row(merged).items() if key in changes}
    payload["updated_at"] = datetime.now(timezone.utc).isoformat()

    store.update(_PROMOTIONS_TABLE, Filter("id", Operator.EQ, promotion_id), payload)
    return merged


def delete_promotion(store: EntityStore, promotion_id: str) -> bool:
    removed = store.delete(_PROMOTIONS_TABLE, Filter("id", Operator.EQ, promotion_id))
    return removed > 0


__all__ = [
    "promotion_to_row",
    "list_promotions",
    "get_promotion_by_id",
    "create_promotion",
    "update_promotion",
    "delete_promotion",
]
