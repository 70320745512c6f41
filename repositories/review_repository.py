"""
Review repository (persistence).
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Sequence

from domain.review import Review
from domain.time import parse_utc_datetime, to_iso_utc
from repositories.query import Query
from repositories.store import EntityStore

_REVIEWS_TABLE: str = "reviews"


def _row_to_review(row: Mapping[str, Any]) -> Review:
    return Review(
        id=str(row["id"]),
        rating=int(row["rating"]),
        created_at=parse_utc_datetime(row["created_at"]),
        contact_id=row.get("contact_id"),
        order_id=row.get("order_id"),
        comment=row.get("comment"),
    )


def review_to_row(review: Review) -> Dict[str, Any]:
    return {
        "id": review.id,
        "rating": review.rating,
        "contact_id": review.contact_id,
        "order_id": review.order_id,
        "comment": review.comment,
        "created_at": to_iso_utc(review.created_at, name="created_at"),
    }


def list_reviews(store: EntityStore) -> List[Review]:
    """Retrieve all reviews, newest first."""

    rows = store.fetch(Query(table=_REVIEWS_TABLE, order_by="created_at", ascending=False))
    return [_row_to_review(row) for row in rows]


def insert_reviews(store: EntityStore, reviews: Sequence[Review]) -> None:
    store.insert(_REVIEWS_TABLE, [review_to_row(review) for review in reviews])


__all__ = [
    "review_to_row",
    "list_reviews",
    "insert_reviews",
]
