"""Unit tests for debt set construction and validation"""

import pytest
from decimal import Decimal
from payoff_planner.domain.debt_set import build_debt_set
from payoff_planner.domain.exceptions import InvalidInputError


def test_build_debt_set_filters_paid_off_debts(debt):
    """Debts with zero balance are dropped, order of the rest is kept"""
    debt_set = build_debt_set(
        [debt("b", "500"), debt("paid", "0"), debt("a", "100")],
        "150",
    )

    assert [d.id for d in debt_set.debts] == ["b", "a"]
    assert debt_set.monthly_budget == Decimal("150.00")


def test_build_debt_set_accepts_mappings():
    """Raw dicts are normalized to Decimal amounts"""
    debt_set = build_debt_set(
        [{"id": 7, "creditor_name": "Bank", "remaining_balance": 99.9, "annual_interest_rate_percent": 19.9}],
        100,
    )

    record = debt_set.debts[0]
    assert record.id == "7"
    assert record.remaining_balance == Decimal("99.90")
    assert record.annual_interest_rate_percent == Decimal("19.9")
    assert record.minimum_monthly_payment == Decimal("0")


@pytest.mark.parametrize(
    "field",
    ["remaining_balance", "annual_interest_rate_percent", "minimum_monthly_payment"],
)
def test_build_debt_set_rejects_negative_amounts(field):
    raw = {"id": "a", "remaining_balance": "100", field: "-1"}
    with pytest.raises(InvalidInputError, match=field):
        build_debt_set([raw], "100")


def test_build_debt_set_rejects_negative_budget(debt):
    with pytest.raises(InvalidInputError):
        build_debt_set([debt("a", "100")], "-0.01")


def test_build_debt_set_rejects_non_numeric():
    with pytest.raises(InvalidInputError):
        build_debt_set([{"id": "a", "remaining_balance": "lots"}], "100")
    with pytest.raises(InvalidInputError):
        build_debt_set([], "NaN")


@pytest.mark.parametrize("balance", ["1250,50", "12,5", "1,2,3", ",100"])
def test_build_debt_set_rejects_decimal_comma(balance):
    with pytest.raises(InvalidInputError, match="remaining_balance"):
        build_debt_set([{"id": "a", "remaining_balance": balance}], "100")


def test_build_debt_set_accepts_thousands_separators():
    debt_set = build_debt_set(
        [{"id": "a", "remaining_balance": "12,500.75", "minimum_monthly_payment": "250"}],
        "1,000",
    )

    assert debt_set.debts[0].remaining_balance == Decimal("12500.75")
    assert debt_set.monthly_budget == Decimal("1000.00")


def test_build_debt_set_rejects_duplicate_ids(debt):
    with pytest.raises(InvalidInputError, match="Duplicate"):
        build_debt_set([debt("a", "100"), debt("a", "200")], "100")


def test_build_debt_set_allows_budget_below_minimums(debt):
    """Insufficient budget is a valid input; the shortfall is reported"""
    debt_set = build_debt_set(
        [debt("a", "1000", minimum="80"), debt("b", "500", minimum="40")],
        "100",
    )

    assert debt_set.total_minimum_payments == Decimal("120.00")
    assert debt_set.budget_shortfall == Decimal("20.00")
    assert debt_set.extra_capacity == Decimal("0.00")


def test_debt_set_is_hashable_and_rebudgetable(debt):
    debt_set = build_debt_set([debt("a", "100", rate="12")], "50")

    assert hash(debt_set) == hash(build_debt_set([debt("a", "100", rate="12")], "50"))
    assert debt_set.with_budget(Decimal("75")).monthly_budget == Decimal("75")
    assert debt_set.has_high_interest()
    assert not debt_set.has_high_interest(threshold=Decimal("12"))
