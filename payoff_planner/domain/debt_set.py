"""Debt set construction - validation and normalization of caller input"""

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Union

from payoff_planner.domain.exceptions import InvalidInputError
from payoff_planner.domain.models import DebtRecord, DebtSet
from payoff_planner.utils.money import ZERO, round_cents, to_money

logger = logging.getLogger(__name__)

RawDebt = Union[DebtRecord, Mapping[str, Any]]

_MONEY_FIELDS = ("remaining_balance", "minimum_monthly_payment")
_AMOUNT_FIELDS = _MONEY_FIELDS + ("annual_interest_rate_percent",)


def _amount(raw: RawDebt, field: str, debt_id: str) -> Decimal:
    value = raw.get(field, 0) if isinstance(raw, Mapping) else getattr(raw, field)
    try:
        amount = to_money(value)
    except ValueError as e:
        raise InvalidInputError(f"Debt {debt_id}: {field} is not a number") from e
    if amount < 0:
        raise InvalidInputError(f"Debt {debt_id}: {field} must not be negative")
    return round_cents(amount) if field in _MONEY_FIELDS else amount


def normalize_debt(raw: RawDebt) -> DebtRecord:
    """Coerce one raw debt (record or mapping) into a DebtRecord with Decimal amounts"""
    if isinstance(raw, Mapping):
        if "id" not in raw:
            raise InvalidInputError("Debt is missing an id")
        debt_id = str(raw["id"])
        creditor_name = str(raw.get("creditor_name") or "")
    else:
        debt_id = str(raw.id)
        creditor_name = raw.creditor_name or ""

    amounts = {field: _amount(raw, field, debt_id) for field in _AMOUNT_FIELDS}
    return DebtRecord(id=debt_id, creditor_name=creditor_name, **amounts)


def build_debt_set(records: Iterable[RawDebt], monthly_budget: object) -> DebtSet:
    """
    Build the immutable DebtSet for one simulation run.

    Rules:
    - Records with remaining_balance <= 0 are dropped (already paid off)
    - Negative budget, balance, rate or minimum raises InvalidInputError
    - Duplicate ids among the kept records raise InvalidInputError
    - A budget below the sum of minimums is accepted; the simulator reports it

    Returns:
        DebtSet preserving the input order of the kept records
    """
    try:
        budget = to_money(monthly_budget)
    except ValueError as e:
        raise InvalidInputError("Monthly budget is not a number") from e
    if budget < 0:
        raise InvalidInputError("Monthly budget must not be negative")
    budget = round_cents(budget)

    debts = []
    seen_ids = set()
    for raw in records:
        debt = normalize_debt(raw)
        if debt.remaining_balance <= ZERO:
            logger.debug("Skipping settled debt", extra={"debt_id": debt.id})
            continue
        if debt.id in seen_ids:
            raise InvalidInputError(f"Duplicate debt id: {debt.id}")
        seen_ids.add(debt.id)
        debts.append(debt)

    return DebtSet(debts=tuple(debts), monthly_budget=budget)
