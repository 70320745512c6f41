"""
Domain: Monetary amounts.

Every monetary rounding in the platform goes through `round_money`:
- Amounts are quantized to 2 decimal places (cents).
- Rounding mode is ROUND_HALF_UP (0.005 -> 0.01), applied uniformly so totals,
  fees and discounts reconcile exactly.

Datastore rows carry floats; `to_decimal` converts through `str()` so binary
float noise never enters a sum.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

from .errors import InvalidInputError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Any, *, name: str = "amount") -> Decimal:
    """
    Convert a numeric value (int, float, str, Decimal) into a Decimal.

    Raises:
        InvalidInputError: If the value is missing or not numeric.
    """

    if value is None or isinstance(value, bool):
        raise InvalidInputError(f"{name} is required and must be numeric")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation:
            raise InvalidInputError(f"{name} must be numeric, got {value!r}") from None

    if not result.is_finite():
        raise InvalidInputError(f"{name} must be a finite number")
    return result


def round_money(value: Any) -> Decimal:
    """
    Round an amount to cents using ROUND_HALF_UP.

    Example:
        round_money(Decimal("6.805"))  # Decimal('6.81')
        round_money(42.4)              # Decimal('42.40')
    """

    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum_money(values: Iterable[Any]) -> Decimal:
    """Sum amounts exactly, then round once."""

    total = Decimal("0")
    for value in values:
        total += to_decimal(value)
    return round_money(total)
