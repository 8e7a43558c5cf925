# backend/tests/routers/test_dashboard_api.py
"""Integration tests for the dashboard (chart data) API."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

JAN_1 = 1704067200000
JAN_2 = JAN_1 + 86_400_000
JAN_3 = JAN_2 + 86_400_000


@pytest.fixture
def portfolio(client: TestClient) -> TestClient:
    """AAA 10 → 20, BBB 100; 5 AAA on Jan 1, 1 BBB on Jan 2."""
    client.post("/instruments/", json={"symbol": "AAA", "name": "Triple A"})
    client.post("/instruments/", json={"symbol": "BBB", "name": "Double B"})
    client.post("/instruments/AAA/prices", json={"timestamp": JAN_1, "price": "10"})
    client.post("/instruments/AAA/prices", json={"timestamp": JAN_3, "price": "20"})
    client.post("/instruments/BBB/prices", json={"timestamp": JAN_2, "price": "100"})
    client.post("/purchases/", json={"symbol": "AAA", "timestamp": JAN_1, "quantity": "5"})
    client.post("/purchases/", json={"symbol": "BBB", "timestamp": JAN_2, "quantity": "1"})
    return client


class TestSummary:
    def test_empty(self, client):
        body = client.get("/dashboard/summary").json()

        assert Decimal(body["invested"]) == 0
        assert Decimal(body["profit_loss_pct"]) == 0
        assert body["currency"] == "EUR"
        assert body["has_complete_data"] is True

    def test_totals(self, portfolio):
        body = portfolio.get("/dashboard/summary").json()

        assert Decimal(body["invested"]) == Decimal("150")
        assert Decimal(body["current"]) == Decimal("200")
        assert Decimal(body["profit_loss"]) == Decimal("50")
        assert Decimal(body["profit_loss_pct"]) == Decimal("33.33")
        assert body["purchase_count"] == 2

    def test_deleted_instrument_reported(self, portfolio):
        portfolio.delete("/instruments/BBB")

        body = portfolio.get("/dashboard/summary").json()

        assert Decimal(body["invested"]) == Decimal("50")
        assert body["skipped_cost_count"] == 1
        assert body["has_complete_data"] is False
        assert "BBB" in body["warnings"][0]


class TestHistory:
    def test_series(self, portfolio):
        body = portfolio.get("/dashboard/history").json()

        assert body["total_points"] == 3
        assert [p["timestamp"] for p in body["value_series"]] == [JAN_1, JAN_2, JAN_3]
        assert [Decimal(p["value"]) for p in body["value_series"]] == [
            Decimal("50"), Decimal("150"), Decimal("200"),
        ]
        assert [Decimal(p["value"]) for p in body["invested_series"]] == [
            Decimal("50"), Decimal("150"), Decimal("150"),
        ]

    def test_date_window(self, portfolio):
        body = portfolio.get(
            "/dashboard/history",
            params={"from_date": "2024-01-02", "to_date": "2024-01-02"},
        ).json()

        assert body["start"] == JAN_2
        assert body["end"] == JAN_3 - 1
        assert [p["timestamp"] for p in body["value_series"]] == [JAN_2]


class TestPriceSeries:
    def test_selected_symbols(self, portfolio):
        body = portfolio.get("/dashboard/prices", params={"symbol": ["aaa"]}).json()

        assert [s["symbol"] for s in body["series"]] == ["AAA"]
        assert [p["timestamp"] for p in body["series"][0]["points"]] == [JAN_1, JAN_3]

    def test_all_symbols(self, portfolio):
        body = portfolio.get("/dashboard/prices").json()

        assert [s["symbol"] for s in body["series"]] == ["AAA", "BBB"]


class TestDailyPurchases:
    def test_amounts_per_day(self, portfolio):
        body = portfolio.get("/dashboard/purchases").json()

        assert body["timezone"] == "UTC"
        series = {s["symbol"]: s["points"] for s in body["series"]}
        assert [(p["timestamp"], Decimal(p["value"])) for p in series["AAA"]] == [(JAN_1, Decimal("50"))]
        assert [(p["timestamp"], Decimal(p["value"])) for p in series["BBB"]] == [(JAN_2, Decimal("100"))]

    def test_reversed_range(self, portfolio):
        response = portfolio.get(
            "/dashboard/purchases",
            params={"from_date": "2024-01-03", "to_date": "2024-01-01"},
        )

        assert response.status_code == 400
