"""Payoff simulator - month-by-month amortization for one ordering policy"""

import logging
from decimal import Decimal
from typing import Dict, List

from payoff_planner.domain.models import (
    DebtPayment,
    DebtSet,
    MonthlyStatement,
    PayoffEvent,
    PayoffOutcome,
    SimulationResult,
)
from payoff_planner.domain.policies import DebtState, OrderingPolicy
from payoff_planner.utils.money import CENT, ZERO, round_cents

logger = logging.getLogger(__name__)

HORIZON_MONTHS = 360
PAYOFF_EPSILON = CENT
MONTHS_PER_YEAR = Decimal(12)
PERCENT = Decimal(100)


def monthly_interest(balance: Decimal, annual_rate_percent: Decimal) -> Decimal:
    """Interest for one month on ``balance``, rounded to cents"""
    return round_cents(balance * annual_rate_percent / PERCENT / MONTHS_PER_YEAR)


def simulate(
    debt_set: DebtSet,
    policy: OrderingPolicy,
    horizon_months: int = HORIZON_MONTHS,
) -> SimulationResult:
    """
    Project month-by-month payoff of ``debt_set`` under ``policy``.

    Each month:
    1. Interest accrues on every active debt before any payment
    2. Surplus = budget minus minimums of debts still active this month
       (minimums of debts cleared earlier roll into the surplus)
    3. Policy orders the active debts
    4. Every active debt pays min(minimum, balance); the policy then
       allocates the surplus
    5. Balances at or below one cent are cleared and recorded in clearance
       order, ties by DebtSet order

    Minimums are paid in full even when the budget cannot cover them; the gap
    is reported as ``budget_shortfall`` rather than raised. The run stops when
    every debt is cleared or after ``horizon_months`` months (UNRESOLVED).
    """
    states = [
        DebtState(record=debt, position=i, remaining=debt.remaining_balance)
        for i, debt in enumerate(debt_set.debts)
    ]
    fixed_order = None if policy.resort_each_month else policy.order(states)

    total_interest = ZERO
    total_paid = ZERO
    payoff_schedule: List[PayoffEvent] = []
    statements: List[MonthlyStatement] = []
    payment_order: tuple = ()
    month = 0

    while any(s.is_active for s in states) and month < horizon_months:
        month += 1
        active = [s for s in states if s.is_active]

        # 1. Interest first
        interest_by_id: Dict[str, Decimal] = {}
        for state in active:
            interest = monthly_interest(state.remaining, state.record.annual_interest_rate_percent)
            state.remaining += interest
            total_interest += interest
            interest_by_id[state.record.id] = interest

        # 2. Surplus after this month's minimums
        minimums_due = sum((s.record.minimum_monthly_payment for s in active), ZERO)
        extra = max(ZERO, debt_set.monthly_budget - minimums_due)

        # 3. Priority
        if fixed_order is None:
            ordered = policy.order(active)
        else:
            ordered = [s for s in fixed_order if s.is_active]
        if month == 1:
            payment_order = tuple(s.record.id for s in ordered)

        # 4. Minimums, then surplus
        minimum_by_id: Dict[str, Decimal] = {}
        for state in ordered:
            payment = min(state.record.minimum_monthly_payment, state.remaining)
            state.remaining -= payment
            minimum_by_id[state.record.id] = payment

        extra_by_id = policy.allocate_extra(ordered, extra)
        for state in ordered:
            state.remaining -= extra_by_id.get(state.record.id, ZERO)

        # 5. Clear paid-off debts
        cleared = []
        for state in ordered:
            if state.remaining <= PAYOFF_EPSILON:
                state.remaining = ZERO
                cleared.append(state)
        for state in sorted(cleared, key=lambda s: s.position):
            payoff_schedule.append(PayoffEvent(debt_id=state.record.id, payoff_month=month))

        payments = []
        for state in sorted(active, key=lambda s: s.position):
            debt_id = state.record.id
            payment = DebtPayment(
                debt_id=debt_id,
                interest=interest_by_id[debt_id],
                minimum_paid=minimum_by_id[debt_id],
                extra_paid=extra_by_id.get(debt_id, ZERO),
                ending_balance=state.remaining,
            )
            total_paid += payment.total_paid
            payments.append(payment)
        statements.append(MonthlyStatement(month=month, payments=tuple(payments)))

    remaining = sum((s.remaining for s in states), ZERO)
    resolved = remaining == ZERO
    if not resolved:
        logger.info(
            "Simulation unresolved within horizon",
            extra={
                "strategy": policy.name.value,
                "horizon_months": horizon_months,
                "debts_cleared": len(payoff_schedule),
                "debts_total": len(states),
            },
        )

    return SimulationResult(
        strategy=policy.name,
        outcome=PayoffOutcome.RESOLVED if resolved else PayoffOutcome.UNRESOLVED,
        total_months=month if resolved else None,
        months_simulated=month,
        total_interest_accrued=total_interest,
        total_paid=total_paid,
        remaining_balance=remaining,
        monthly_budget=debt_set.monthly_budget,
        budget_shortfall=debt_set.budget_shortfall,
        payoff_schedule=tuple(payoff_schedule),
        payment_order=payment_order,
        statements=tuple(statements),
    )
