"""
Tests for `repositories/query.py`, `repositories/memory_store.py` and
`repositories/supabase_store.py`.

Covers contract rules:
- One structured Query (filters, order, limit) is interpreted by each store.
- The in-memory store owns its state and never shares mutable rows.
- The Supabase store maps a Query onto the builder chain and reports
  datastore failures as RepositoryError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from postgrest.exceptions import APIError

from repositories.memory_store import InMemoryStore
from repositories.query import Filter, Operator, Query, evaluate_query
from repositories.store import RepositoryError
from repositories.supabase_store import SupabaseStore

ROWS = [
    {"id": "o1", "status": "paid", "created_at": "2025-01-03T10:00:00+00:00", "total": 10},
    {"id": "o2", "status": "draft", "created_at": "2025-01-01T10:00:00+00:00", "total": 20},
    {"id": "o3", "status": "shipped", "created_at": "2025-01-02T10:00:00+00:00", "total": 30},
    {"id": "o4", "status": "paid", "created_at": None, "total": 40},
]


class TestEvaluateQuery:
    def test_eq_filter(self) -> None:
        rows = evaluate_query(Query("orders").where("status", Operator.EQ, "paid"), ROWS)

        assert [r["id"] for r in rows] == ["o1", "o4"]

    def test_in_filter(self) -> None:
        rows = evaluate_query(Query("orders").where("status", Operator.IN, ("paid", "shipped")), ROWS)

        assert {r["id"] for r in rows} == {"o1", "o3", "o4"}

    def test_date_range_accepts_datetime_values(self) -> None:
        since = datetime(2025, 1, 2, tzinfo=timezone.utc)

        rows = evaluate_query(Query("orders").where("created_at", Operator.GTE, since), ROWS)

        assert {r["id"] for r in rows} == {"o1", "o3"}

    def test_order_descending_puts_missing_values_last(self) -> None:
        rows = evaluate_query(Query("orders", order_by="created_at", ascending=False), ROWS)

        assert [r["id"] for r in rows] == ["o1", "o3", "o2", "o4"]

    def test_limit(self) -> None:
        rows = evaluate_query(Query("orders", order_by="total", limit=2), ROWS)

        assert [r["id"] for r in rows] == ["o1", "o2"]

    def test_in_filter_needs_a_collection(self) -> None:
        with pytest.raises(ValueError):
            Filter("status", Operator.IN, "paid")

    def test_where_does_not_mutate_original(self) -> None:
        base = Query("orders")
        base.where("status", Operator.EQ, "paid")

        assert base.filters == ()


class TestInMemoryStore:
    def test_fetch_returns_copies(self) -> None:
        store = InMemoryStore({"orders": ROWS})

        fetched = store.fetch(Query("orders"))
        fetched[0]["status"] = "tampered"

        assert store.fetch(Query("orders"))[0]["status"] == "paid"

    def test_unknown_table_is_empty(self) -> None:
        assert InMemoryStore().fetch(Query("orders")) == []

    def test_stores_are_isolated(self) -> None:
        first, second = InMemoryStore(), InMemoryStore()

        first.insert("orders", [{"id": "o1"}])

        assert second.fetch(Query("orders")) == []
        assert first.tables() == ["orders"]

    def test_update_and_delete(self) -> None:
        store = InMemoryStore({"orders": ROWS})

        updated = store.update("orders", Filter("id", Operator.EQ, "o2"), {"status": "paid"})
        removed = store.delete("orders", Filter("status", Operator.EQ, "paid"))

        assert updated[0]["status"] == "paid"
        assert removed == 3
        assert [r["id"] for r in store.fetch(Query("orders"))] == ["o3"]


class _FakeBuilder:
    """Records the supabase builder calls made by SupabaseStore."""

    def __init__(self, calls, response=None, error=None):
        self.calls = calls
        self.response = response if response is not None else SimpleNamespace(data=[], error=None)
        self.error = error

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self

        return record

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.response


class _FakeClient:
    def __init__(self, builder):
        self.builder = builder

    def table(self, name):
        self.builder.calls.append(("table", (name,), {}))
        return self.builder


class TestSupabaseStore:
    def test_fetch_translates_query(self) -> None:
        calls = []
        builder = _FakeBuilder(calls, SimpleNamespace(data=[{"id": "o1"}], error=None))
        store = SupabaseStore(_FakeClient(builder))
        query = Query(
            table="orders",
            filters=(
                Filter("contact_id", Operator.EQ, "c1"),
                Filter("status", Operator.IN, ("paid", "shipped")),
                Filter("created_at", Operator.GTE, datetime(2025, 1, 1, tzinfo=timezone.utc)),
            ),
            order_by="created_at",
            ascending=False,
            limit=5,
        )

        rows = store.fetch(query)

        assert rows == [{"id": "o1"}]
        assert [name for name, _, _ in calls] == ["table", "select", "eq", "in_", "gte", "order", "limit"]
        assert calls[3][1] == ("status", ["paid", "shipped"])
        assert calls[4][1] == ("created_at", "2025-01-01T00:00:00+00:00")
        assert calls[5][2] == {"desc": True}

    def test_api_error_becomes_repository_error(self) -> None:
        error = APIError({"message": "relation does not exist", "code": "42P01", "hint": None, "details": None})
        store = SupabaseStore(_FakeClient(_FakeBuilder([], error=error)))

        with pytest.raises(RepositoryError, match="Failed to query orders"):
            store.fetch(Query("orders"))

    def test_response_error_becomes_repository_error(self) -> None:
        response = SimpleNamespace(data=None, error="permission denied")
        store = SupabaseStore(_FakeClient(_FakeBuilder([], response)))

        with pytest.raises(RepositoryError):
            store.fetch(Query("orders"))

    def test_delete_counts_returned_rows(self) -> None:
        response = SimpleNamespace(data=[{"id": "o1"}, {"id": "o2"}], error=None)
        store = SupabaseStore(_FakeClient(_FakeBuilder([], response)))

        assert store.delete("orders", Filter("status", Operator.EQ, "draft")) == 2
