"""
Tests for `domain/money.py`.

Covers contract rules:
- Amounts round to cents with ROUND_HALF_UP.
- Missing or non-numeric amounts are rejected, never coerced to zero.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from domain.errors import InvalidInputError
from domain.money import ZERO, round_money, sum_money, to_decimal


@pytest.mark.parametrize(
    "raw, expected",
    [
        (Decimal("6.805"), Decimal("6.81")),
        (Decimal("6.804"), Decimal("6.80")),
        ("0.005", Decimal("0.01")),
        (42.4, Decimal("42.40")),
        (10, Decimal("10.00")),
    ],
)
def test_round_money_half_up(raw, expected) -> None:
    assert round_money(raw) == expected


def test_round_money_keeps_two_decimal_places() -> None:
    assert str(round_money(Decimal("5"))) == "5.00"


def test_sum_money_rounds_once_at_the_end() -> None:
    # 3 x 0.005 = 0.015 -> 0.02 (rounding each term first would give 0.03)
    assert sum_money([Decimal("0.005")] * 3) == Decimal("0.02")


def test_sum_money_of_nothing_is_zero() -> None:
    assert sum_money([]) == ZERO


@pytest.mark.parametrize("bad", [None, True, "abc", "NaN", float("inf")])
def test_to_decimal_rejects_missing_or_non_numeric(bad) -> None:
    with pytest.raises(InvalidInputError):
        to_decimal(bad)


def test_invalid_input_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_decimal("twelve", name="price")
