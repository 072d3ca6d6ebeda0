"""Domain models - immutable dataclasses for debts and simulation output"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from payoff_planner.utils.money import ZERO

HIGH_INTEREST_THRESHOLD = Decimal("10")


class StrategyName(str, Enum):
    """Built-in repayment orderings"""

    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"
    PROPORTIONAL = "proportional"


class PayoffOutcome(str, Enum):
    """Whether every debt cleared within the horizon"""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class DebtRecord:
    """One outstanding debt as supplied by the caller"""

    id: str
    creditor_name: str
    remaining_balance: Decimal
    annual_interest_rate_percent: Decimal
    minimum_monthly_payment: Decimal


@dataclass(frozen=True)
class DebtSet:
    """Active debts (balance > 0) plus the total monthly budget, including minimums"""

    debts: Tuple[DebtRecord, ...]
    monthly_budget: Decimal

    def __len__(self) -> int:
        return len(self.debts)

    @property
    def total_balance(self) -> Decimal:
        return sum((d.remaining_balance for d in self.debts), ZERO)

    @property
    def total_minimum_payments(self) -> Decimal:
        return sum((d.minimum_monthly_payment for d in self.debts), ZERO)

    @property
    def budget_shortfall(self) -> Decimal:
        """How far the budget falls short of covering every minimum payment"""
        return max(ZERO, self.total_minimum_payments - self.monthly_budget)

    @property
    def extra_capacity(self) -> Decimal:
        """Surplus left in month one after all minimums"""
        return max(ZERO, self.monthly_budget - self.total_minimum_payments)

    def has_high_interest(self, threshold: Decimal = HIGH_INTEREST_THRESHOLD) -> bool:
        return any(d.annual_interest_rate_percent > threshold for d in self.debts)

    def with_budget(self, monthly_budget: Decimal) -> "DebtSet":
        """Same debts, different budget (used for budget sweeps)"""
        return DebtSet(debts=self.debts, monthly_budget=monthly_budget)


@dataclass(frozen=True)
class DebtPayment:
    """What happened to a single debt in a single month"""

    debt_id: str
    interest: Decimal
    minimum_paid: Decimal
    extra_paid: Decimal
    ending_balance: Decimal

    @property
    def total_paid(self) -> Decimal:
        return self.minimum_paid + self.extra_paid


@dataclass(frozen=True)
class MonthlyStatement:
    """All debt payments for one simulated month (1-based)"""

    month: int
    payments: Tuple[DebtPayment, ...]


@dataclass(frozen=True)
class PayoffEvent:
    """Debt cleared in a given month"""

    debt_id: str
    payoff_month: int


@dataclass(frozen=True)
class SimulationResult:
    """Output of one simulation run for one ordering policy"""

    strategy: StrategyName
    outcome: PayoffOutcome
    total_months: Optional[int]  # None when unresolved within the horizon
    months_simulated: int
    total_interest_accrued: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    monthly_budget: Decimal
    budget_shortfall: Decimal
    payoff_schedule: Tuple[PayoffEvent, ...]
    payment_order: Tuple[str, ...]
    statements: Tuple[MonthlyStatement, ...]

    @property
    def is_resolved(self) -> bool:
        return self.outcome is PayoffOutcome.RESOLVED

    def payoff_month(self, debt_id: str) -> Optional[int]:
        """Month the debt was cleared, or None if it never cleared"""
        for event in self.payoff_schedule:
            if event.debt_id == debt_id:
                return event.payoff_month
        return None
