"""
Supabase-backed entity store.

Translates structured queries into supabase-py (postgrest) builder chains.
This is the only place in the platform that knows the builder API.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from postgrest.exceptions import APIError
from supabase import Client  # type: ignore[import-not-found]

from repositories.query import Filter, Operator, Query
from repositories.store import RepositoryError

logger = logging.getLogger(__name__)


def _wire_value(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _apply_filter(builder: Any, condition: Filter) -> Any:
    value = _wire_value(condition.value)

    if condition.operator is Operator.EQ:
        return builder.eq(condition.field, value)
    if condition.operator is Operator.IN:
        return builder.in_(condition.field, [_wire_value(v) for v in condition.value])
    if condition.operator is Operator.GTE:
        return builder.gte(condition.field, value)
    return builder.lte(condition.field, value)


def _execute(builder: Any, action: str) -> List[Dict[str, Any]]:
    """Run a builder and unwrap its rows, surfacing datastore errors as RepositoryError."""

    try:
        response = builder.execute()
    except APIError as e:
        raise RepositoryError(f"Failed to {action}: {e}") from e

    error = getattr(response, "error", None)
    if error:
        raise RepositoryError(f"Failed to {action}: {error}")

    return list(getattr(response, "data", None) or [])


class SupabaseStore:
    """EntityStore over a Supabase project."""

    def __init__(self, client: Optional[Client] = None) -> None:
        if client is None:
            from repositories.client import get_supabase

            client = get_supabase()
        self._client = client

    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        builder = self._client.table(query.table).select("*")

        for condition in query.filters:
            builder = _apply_filter(builder, condition)

        if query.order_by is not None:
            builder = builder.order(query.order_by, desc=not query.ascending)

        if query.limit is not None:
            builder = builder.limit(query.limit)

        return _execute(builder, f"query {query.table}")

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        if not rows:
            return []

        payload = [{key: _wire_value(value) for key, value in row.items()} for row in rows]
        stored = _execute(self._client.table(table).insert(payload), f"insert into {table}")
        logger.info(f"Inserted {len(payload)} row(s) into '{table}'", extra={"table": table, "row_count": len(payload)})
        return stored

    def update(self, table: str, match: Filter, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        payload = {key: _wire_value(value) for key, value in values.items()}
        builder = _apply_filter(self._client.table(table).update(payload), match)
        return _execute(builder, f"update {table}")

    def delete(self, table: str, match: Filter) -> int:
        builder = _apply_filter(self._client.table(table).delete(), match)
        deleted = _execute(builder, f"delete from {table}")
        logger.info(f"Deleted {len(deleted)} row(s) from '{table}'", extra={"table": table, "row_count": len(deleted)})
        return len(deleted)


__all__ = ["SupabaseStore"]
