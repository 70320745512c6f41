"""
Promotion service for resolving discounts on catalog products.

Resolution rule:
- The active promotion for a product is the FIRST promotion, in input order,
  that is active for that product at the given time.
- When several promotions qualify the same product, the first one still wins
  and a warning is logged listing every candidate so the overlap can be fixed
  in the catalog.

Discount rule:
- percentage: price x (1 - value / 100)
- fixed: price - value, never below 0
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from domain.money import ZERO, round_money, to_decimal
from domain.product import Product
from domain.promotion import DiscountType, Promotion
from domain.time import require_utc_timestamp

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PricedProduct:
    """
    Catalog read model: a product with its current promotion and price.
    """
    product: Product
    promotion: Optional[Promotion]
    final_price: Decimal

    @property
    def has_discount(self) -> bool:
        return self.promotion is not None and self.final_price < self.product.price

    @property
    def is_low_stock(self) -> bool:
        return self.product.is_low_stock


def resolve_active_promotion(
    product_id: str,
    promotions: Sequence[Promotion],
    now: datetime,
) -> Optional[Promotion]:
    """
    Return the promotion that applies to a product at `now`, if any.

    Args:
        product_id: Catalog product identifier
        promotions: Candidate promotions, in priority (input) order
        now: UTC timestamp to evaluate the date windows against

    Returns:
        The first qualifying Promotion, or None

    Example:
        promo = resolve_active_promotion("1", promotions, datetime.now(timezone.utc))
    """
    require_utc_timestamp("now", now)

    matches = [promo for promo in promotions if promo.is_active_for(product_id, now)]
    if not matches:
        return None

    if len(matches) > 1:
        logger.warning(
            f"Multiple active promotions for product '{product_id}', using '{matches[0].id}'",
            extra={
                "product_id": product_id,
                "selected_promotion_id": matches[0].id,
                "candidate_promotion_ids": [promo.id for promo in matches],
                "resolution": "first_in_input_order",
            },
        )

    return matches[0]


def apply_discount(price: Decimal, promotion: Promotion) -> Decimal:
    """
    Apply a promotion's discount to a price.

    Fixed discounts larger than the price clamp the result at 0.

    Example:
        apply_discount(Decimal("50"), fixed_100)   # Decimal('0.00')
        apply_discount(Decimal("4.50"), pct_15)    # Decimal('3.83')
    """
    price = to_decimal(price, name="price")
    if promotion.discount_type is DiscountType.PERCENTAGE:
        discounted = price * (Decimal("1") - promotion.discount_value / Decimal("100"))
    else:
        discounted = price - promotion.discount_value

    return max(ZERO, round_money(discounted))


def price_products(
    products: Sequence[Product],
    promotions: Sequence[Promotion],
    now: datetime,
) -> List[PricedProduct]:
    """
    Build the catalog view-model: each product with its active promotion and
    the price a customer pays right now.
    """
    priced: List[PricedProduct] = []

    for product in products:
        promotion = resolve_active_promotion(product.id, promotions, now)
        final_price = apply_discount(product.price, promotion) if promotion else round_money(product.price)
        priced.append(PricedProduct(product=product, promotion=promotion, final_price=final_price))

    return priced


__all__ = [
    "PricedProduct",
    "resolve_active_promotion",
    "apply_discount",
    "price_products",
]
