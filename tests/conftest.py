"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Callable
from fastapi.testclient import TestClient
from payoff_planner.api.main import create_app
from payoff_planner.domain.debt_set import build_debt_set
from payoff_planner.domain.models import DebtRecord, DebtSet


def make_debt(debt_id: str, balance: str, rate: str = "0", minimum: str = "0", name: str = "") -> DebtRecord:
    return DebtRecord(
        id=debt_id,
        creditor_name=name or debt_id.title(),
        remaining_balance=Decimal(balance),
        annual_interest_rate_percent=Decimal(rate),
        minimum_monthly_payment=Decimal(minimum),
    )


@pytest.fixture
def debt() -> Callable[..., DebtRecord]:
    """Factory for DebtRecords with string amounts"""
    return make_debt


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def three_small_debts() -> DebtSet:
    """Interest-free debts used for rollover and budget sweep checks"""
    return build_debt_set(
        [
            make_debt("a", "300", minimum="20"),
            make_debt("b", "600", minimum="30"),
            make_debt("c", "900", minimum="50"),
        ],
        "200",
    )


@pytest.fixture
def divergent_debts() -> DebtSet:
    """Smallest balance (x) is not the highest rate (y)"""
    return build_debt_set(
        [
            make_debt("x", "500", rate="5", minimum="25", name="Store Card"),
            make_debt("y", "2000", rate="20", minimum="50", name="Credit Card"),
        ],
        "200",
    )


@pytest.fixture
def high_interest_debts() -> DebtSet:
    """Avalanche saves well over 100 in interest here"""
    return build_debt_set(
        [
            make_debt("family", "2000", rate="0", minimum="50", name="Family Loan"),
            make_debt("card", "12000", rate="24", minimum="300", name="Credit Card"),
        ],
        "800",
    )
