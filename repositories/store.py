"""
Entity store contract.

Repositories talk to persistence only through this narrow interface, so any
backend that can answer a structured Query (see repositories.query) can serve
the platform. Two implementations exist:

- repositories.supabase_store.SupabaseStore: the hosted Supabase database
- repositories.memory_store.InMemoryStore: explicit in-process state for demos and tests
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol, Sequence

from repositories.query import Filter, Query


class RepositoryError(RuntimeError):
    """Raised when the underlying datastore rejects or fails a call."""
    pass


class EntityStore(Protocol):
    def fetch(self, query: Query) -> List[Dict[str, Any]]:
        """Return copies of the rows matching the query."""
        ...

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows and return them as stored."""
        ...

    def update(self, table: str, match: Filter, values: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Apply `values` to every row matching `match` and return the updated rows."""
        ...

    def delete(self, table: str, match: Filter) -> int:
        """Delete every row matching `match` and return how many were removed."""
        ...


__all__ = [
    "EntityStore",
    "RepositoryError",
]
