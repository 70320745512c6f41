"""
Domain: Customer reviews.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .errors import InvalidInputError
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Review:
    id: str
    rating: int
    created_at: datetime
    contact_id: Optional[str] = None
    order_id: Optional[str] = None
    comment: Optional[str] = None

    def __post_init__(self) -> None:
        require_utc_timestamp("created_at", self.created_at)
        if isinstance(self.rating, bool) or not 1 <= self.rating <= 5:
            raise InvalidInputError("rating must be between 1 and 5")
