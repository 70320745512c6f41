"""
Structured entity queries.

A Query describes "rows from table T matching these filters, optionally
ordered and limited" as plain data. Each store interprets it in exactly one
place: SupabaseStore turns it into a supabase-py builder chain,
InMemoryStore evaluates it with `evaluate_query` below.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


class Operator(str, Enum):
    EQ = "eq"
    IN = "in"
    GTE = "gte"
    LTE = "lte"


@dataclass(frozen=True, slots=True)
class Filter:
    field: str
    operator: Operator
    value: Any

    def __post_init__(self) -> None:
        if self.operator is Operator.IN and isinstance(self.value, (str, bytes)):
            raise ValueError("IN filter needs a collection of values, not a string")


@dataclass(frozen=True, slots=True)
class Query:
    """
    Filter criteria for entity queries.

    Example:
        Query(
            table="orders",
            filters=(
                Filter("contact_id", Operator.EQ, "1"),
                Filter("status", Operator.IN, ("paid", "shipped")),
            ),
            order_by="created_at",
            ascending=False,
            limit=50,
        )
    """
    table: str
    filters: Tuple[Filter, ...] = ()
    order_by: Optional[str] = None
    ascending: bool = True
    limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise ValueError("limit must be >= 0")

    def where(self, field: str, operator: Operator, value: Any) -> "Query":
        """Return a copy of this query with one more filter."""

        return Query(
            table=self.table,
            filters=self.filters + (Filter(field, operator, value),),
            order_by=self.order_by,
            ascending=self.ascending,
            limit=self.limit,
        )


def _comparable(value: Any) -> Any:
    """Normalize timestamps and dates so ISO strings and datetime objects compare."""

    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _matches(row: Mapping[str, Any], condition: Filter) -> bool:
    actual = row.get(condition.field)

    if condition.operator is Operator.EQ:
        return actual == condition.value
    if condition.operator is Operator.IN:
        return actual in condition.value
    if actual is None:
        return False
    if condition.operator is Operator.GTE:
        return _comparable(actual) >= _comparable(condition.value)
    return _comparable(actual) <= _comparable(condition.value)


def row_matches(row: Mapping[str, Any], filters: Sequence[Filter]) -> bool:
    """True if the row satisfies every filter."""

    return all(_matches(row, f) for f in filters)


def evaluate_query(query: Query, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """
    Apply a Query to an in-memory row set.

    Rows whose order_by column is missing sort last regardless of direction.
    Returned rows are copies; callers cannot mutate the source rows.
    """
    selected = [dict(row) for row in rows if row_matches(row, query.filters)]

    if query.order_by is not None:
        column = query.order_by
        present = [row for row in selected if row.get(column) is not None]
        missing = [row for row in selected if row.get(column) is None]
        present.sort(key=lambda row: _comparable(row[column]), reverse=not query.ascending)
        selected = present + missing

    if query.limit is not None:
        selected = selected[: query.limit]

    return selected


__all__ = [
    "Operator",
    "Filter",
    "Query",
    "row_matches",
    "evaluate_query",
]
