"""
Tests for the HTTP API.

The store and clock dependencies are overridden so every request reads a
deterministic demo dataset.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_clock, get_store
from api.main import app
from repositories.query import Query
from repositories.store import RepositoryError
from scripts.seed_demo_data import build_demo_store

NOW = datetime(2025, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def demo_store():
    return build_demo_store(seed=42, contact_count=25, now=NOW)


@pytest.fixture
def client(demo_store):
    app.dependency_overrides[get_store] = lambda: demo_store
    app.dependency_overrides[get_clock] = lambda: NOW
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.parametrize("granularity, prefix", [("day", "J"), ("week", "S"), ("year", "M")])
def test_dashboard_series_labels(client, granularity, prefix) -> None:
    response = client.get("/api/v1/dashboard", params={"granularity": granularity})

    assert response.status_code == 200
    body = response.json()
    assert body["granularity"] == granularity
    assert all(point["label"].startswith(prefix) for point in body["revenue_series"])
    assert len(body["top_products"]) <= 3


def test_dashboard_rejects_unknown_granularity(client) -> None:
    response = client.get("/api/v1/dashboard", params={"granularity": "quarter"})

    assert response.status_code == 400


def test_contacts_list_and_detail(client) -> None:
    response = client.get("/api/v1/contacts")

    assert response.status_code == 200
    body = response.json()
    assert body["overview"]["total"] == 25
    assert body["total_count"] == 25

    contact_id = body["contacts"][0]["id"]
    detail = client.get(f"/api/v1/contacts/{contact_id}")

    assert detail.status_code == 200
    assert detail.json()["contact"]["id"] == contact_id


def test_contacts_filter_by_type(client) -> None:
    body = client.get("/api/v1/contacts", params={"customer_type": "vip"}).json()

    assert all(c["customer_type"] == "vip" for c in body["contacts"])
    assert body["overview"]["total"] == 25


def test_unknown_contact_is_404(client) -> None:
    assert client.get("/api/v1/contacts/nobody").status_code == 404


def test_products_show_active_promotions(client) -> None:
    body = client.get("/api/v1/products").json()

    by_id = {p["id"]: p for p in body["products"]}
    assert by_id["1"]["promotion_id"] == "promo_1"
    assert by_id["2"]["promotion_id"] == "promo_2"
    assert by_id["4"]["has_discount"] is False
    assert by_id["4"]["is_low_stock"] is True


def test_order_quote(client) -> None:
    response = client.post(
        "/api/v1/orders/quote",
        json={
            "items": [
                {"product_id": "1", "product_name": "Bougie Angel", "quantity": 2, "unit_price": "4.50"},
                {"product_id": "3", "product_name": "Box Noel", "quantity": 1, "unit_price": "25.00"},
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["subtotal"] == "34.00"
    assert body["total_amount"] == "50.70"


def test_order_quote_rejects_empty_basket(client) -> None:
    assert client.post("/api/v1/orders/quote", json={"items": []}).status_code == 422


def test_datastore_failure_is_502(client) -> None:
    class BrokenStore:
        def fetch(self, query: Query):
            raise RepositoryError("Failed to query contacts: connection refused")

    app.dependency_overrides[get_store] = lambda: BrokenStore()

    response = client.get("/api/v1/contacts")

    assert response.status_code == 502
    assert response.json()["status_code"] == 502
