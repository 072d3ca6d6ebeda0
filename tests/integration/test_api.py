"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient
from prometheus_client import REGISTRY
from payoff_planner.api.dependencies import get_advisory_enricher
from payoff_planner.api.main import create_app
from payoff_planner.domain.advisory import AdvisoryEnricher
from payoff_planner.domain.exceptions import AdvisoryUnavailable


@pytest.fixture
def debts_payload():
    """Credit card at 24% next to an interest-free family loan"""
    return {
        "monthly_budget": "800",
        "debts": [
            {
                "id": "family",
                "creditor_name": "Family Loan",
                "remaining_balance": "2000",
                "minimum_monthly_payment": "50",
            },
            {
                "id": "card",
                "creditor_name": "Credit Card",
                "remaining_balance": "12000",
                "annual_interest_rate_percent": "24",
                "minimum_monthly_payment": "300",
            },
        ],
    }


def _client_with_generator(generator) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_advisory_enricher] = lambda: AdvisoryEnricher(generator)
    return TestClient(app)


def test_health_endpoint(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "payoff_simulation_total" in response.text


def test_request_id_header_is_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


@pytest.mark.parametrize("unsafe", ["x" * 65, "id with spaces", "id;drop"])
def test_unsafe_request_id_is_replaced(client: TestClient, unsafe):
    response = client.get("/health", headers={"X-Request-ID": unsafe})
    assert response.headers["X-Request-ID"] != unsafe
    assert len(response.headers["X-Request-ID"]) == 36


def test_request_duration_labels_unmatched_paths(client: TestClient):
    client.get("/no/such/path/12345")
    metrics = client.get("/metrics").text

    assert 'endpoint="unmatched"' in metrics
    assert "/no/such/path/12345" not in metrics


def test_simulate_endpoint(client: TestClient):
    response = client.post(
        "/v1/simulate",
        json={
            "monthly_budget": "100",
            "strategy": "snowball",
            "debts": [{"id": "loan", "remaining_balance": "1200", "minimum_monthly_payment": "100"}],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "resolved"
    assert data["total_months"] == 12
    assert Decimal(data["total_interest_accrued"]) == 0
    assert data["payoff_schedule"] == [{"debt_id": "loan", "payoff_month": 12}]
    assert data["statements"] is None


def test_simulate_endpoint_with_statements(client: TestClient, debts_payload):
    response = client.post(
        "/v1/simulate",
        json={**debts_payload, "strategy": "avalanche", "include_statements": True},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["payment_order"] == ["card", "family"]
    assert len(data["statements"]) == data["total_months"]
    first_card = data["statements"][0]["payments"][1]
    assert first_card["debt_id"] == "card"
    assert Decimal(first_card["interest"]) == Decimal("240.00")


def test_simulate_endpoint_unresolved(client: TestClient):
    response = client.post(
        "/v1/simulate",
        json={
            "monthly_budget": "100",
            "strategy": "proportional",
            "debts": [
                {
                    "id": "big",
                    "remaining_balance": "10000",
                    "annual_interest_rate_percent": "24",
                    "minimum_monthly_payment": "150",
                }
            ],
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "unresolved"
    assert data["total_months"] is None
    assert data["months_simulated"] == 360
    assert Decimal(data["budget_shortfall"]) == Decimal("50")


def test_simulate_endpoint_rejects_negative_amounts(client: TestClient):
    response = client.post(
        "/v1/simulate",
        json={
            "monthly_budget": "100",
            "strategy": "snowball",
            "debts": [{"id": "a", "remaining_balance": "100", "minimum_monthly_payment": "-5"}],
        },
    )

    assert response.status_code == 422
    assert "minimum_monthly_payment" in response.json()["detail"]


def test_simulate_endpoint_rejects_unknown_strategy(client: TestClient):
    response = client.post(
        "/v1/simulate",
        json={"monthly_budget": "100", "strategy": "lottery", "debts": []},
    )
    assert response.status_code == 422


def test_compare_endpoint(client: TestClient, debts_payload):
    response = client.post("/v1/compare", json=debts_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["recommended"] == "avalanche"
    assert Decimal(data["interest_delta"]) > 100
    assert f"{Decimal(data['interest_delta']):.2f}" in data["reasoning"]
    assert data["proportional"]["strategy"] == "proportional"
    assert [e["debt_id"] for e in data["snowball"]["payoff_schedule"]] == ["family", "card"]
    assert isinstance(data["months_delta"], int)


def test_compare_endpoint_rejects_negative_budget(client: TestClient, debts_payload):
    response = client.post("/v1/compare", json={**debts_payload, "monthly_budget": "-1"})
    assert response.status_code == 422


def test_advice_endpoint(debts_payload):
    generator = AsyncMock()
    generator.generate.return_value = {
        "tips": ["Throw every spare euro at the credit card.", "Keep paying the family loan minimum."],
        "warning": "Do not take on new card debt.",
    }
    client = _client_with_generator(generator)

    response = client.post("/v1/advice", json=debts_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["recommended"] == "avalanche"
    assert len(data["advice"]["tips"]) == 2
    assert data["advice"]["warning"] == "Do not take on new card debt."
    generator.generate.assert_awaited_once()


def test_advice_endpoint_degrades_when_service_fails(debts_payload):
    generator = AsyncMock()
    generator.generate.side_effect = AdvisoryUnavailable("model overloaded")
    client = _client_with_generator(generator)

    response = client.post("/v1/advice", json=debts_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["recommended"] == "avalanche"
    assert data["advice"] is None


def test_advice_endpoint_degrades_on_unexpected_generator_error(debts_payload):
    generator = AsyncMock()
    generator.generate.side_effect = ConnectionError("socket closed")
    client = _client_with_generator(generator)

    response = client.post("/v1/advice", json=debts_payload)

    assert response.status_code == 200
    data = response.json()
    assert data["recommended"] == "avalanche"
    assert data["advice"] is None


def test_advice_endpoint_records_comparison_metrics(debts_payload):
    generator = AsyncMock()
    generator.generate.side_effect = AdvisoryUnavailable("model overloaded")
    client = _client_with_generator(generator)

    def recommended_count():
        return REGISTRY.get_sample_value("payoff_recommendation_total", {"strategy": "avalanche"}) or 0

    before = recommended_count()
    client.post("/v1/advice", json=debts_payload)

    assert recommended_count() == before + 1


def test_advice_endpoint_skips_generator_without_debts():
    generator = AsyncMock()
    client = _client_with_generator(generator)

    response = client.post("/v1/advice", json={"monthly_budget": "100", "debts": []})

    assert response.status_code == 200
    assert response.json()["advice"] is None
    generator.generate.assert_not_called()
