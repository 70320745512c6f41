"""
In-memory entity store.

Holds its state explicitly (table name -> list of rows) on the instance, so
each demo session or test owns an isolated store. Rows are copied on the way
in and out; callers never share mutable rows with the store.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from repositories.query import Filter, Query, evaluate_query, row_matches

logger = logging.getLogger(__name__)


class InMemoryStore:
    """EntityStore backed by plain dictionaries."""

    def __init__(self, tables: Optional[Mapping[str, Sequence[Mapping[str, Any]]]] = None) -> None:
        self._tables: Dict[str, List[Dict[str, Any]]] = {
            name: [dict(row) for row in rows] for name, rows in (tables or {}).items()
        }

    def tables(self) -> List[str]:
        return sorted(self._tables)

    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        return evaluate_query(query, self._tables.get(query.table, []))

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        stored = [dict(row) for row in rows]
        self._tables.setdefault(table, []).extend(stored)
        logger.debug(f"Inserted {len(stored)} row(s) into '{table}'", extra={"table": table, "row_count": len(stored)})
        return [dict(row) for row in stored]

    def update(self, table: str, match: Filter, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        rows = self._tables.get(table, [])

        updated: List[Dict[str, Any]] = []
        for index, row in enumerate(rows):
            if row_matches(row, (match,)):
                rows[index] = {**row, **values}
                updated.append(dict(rows[index]))
        return updated

    def delete(self, table: str, match: Filter) -> int:
        rows = self._tables.get(table, [])
        kept = [row for row in rows if not row_matches(row, (match,))]
        removed = len(rows) - len(kept)
        self._tables[table] = kept
        return removed


__all__ = ["InMemoryStore"]
