"""
Domain: Catalog products.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from .errors import InvalidInputError
from .money import to_decimal
from .time import require_utc_timestamp


@dataclass(frozen=True, slots=True)
class Product:
    id: str
    name: str
    price: Decimal
    stock_quantity: int = 0
    low_stock_threshold: int = 5
    is_active: bool = True
    is_featured: bool = False
    category: Optional[str] = None
    sku: Optional[str] = None
    description: Optional[str] = None
    cost: Optional[Decimal] = None
    currency: str = "EUR"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "price", to_decimal(self.price, name="price"))
        if self.cost is not None:
            object.__setattr__(self, "cost", to_decimal(self.cost, name="cost"))
        if self.price < 0:
            raise InvalidInputError("price must be >= 0")
        if self.stock_quantity < 0:
            raise InvalidInputError("stock_quantity must be >= 0")
        if self.low_stock_threshold < 0:
            raise InvalidInputError("low_stock_threshold must be >= 0")
        if self.created_at is not None:
            require_utc_timestamp("created_at", self.created_at)
        if self.updated_at is not None:
            require_utc_timestamp("updated_at", self.updated_at)

    @property
    def is_low_stock(self) -> bool:
        """Stock is low once it reaches the threshold (inclusive)."""
        return self.stock_quantity <= self.low_stock_threshold
