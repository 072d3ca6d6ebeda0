"""Ordering policies - decide each month which debts receive the surplus budget"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import ClassVar, Dict, List, Sequence, Tuple

from payoff_planner.domain.exceptions import InvalidInputError
from payoff_planner.domain.models import DebtRecord, StrategyName
from payoff_planner.utils.money import ZERO, floor_cents


@dataclass
class DebtState:
    """Mutable per-run balance of one debt; position is its index in the DebtSet"""

    record: DebtRecord
    position: int
    remaining: Decimal

    @property
    def is_active(self) -> bool:
        return self.remaining > ZERO


class OrderingPolicy(ABC):
    """
    Priority ordering plus surplus allocation.

    Sorting is always stable against DebtSet order, so ties keep input order.
    Policies whose key never changes during a run set ``resort_each_month``
    to False and the simulator orders them once.
    """

    name: ClassVar[StrategyName]
    resort_each_month: ClassVar[bool] = True

    @abstractmethod
    def sort_key(self, debt: DebtState) -> Tuple:
        ...

    def order(self, debts: Sequence[DebtState]) -> List[DebtState]:
        by_position = sorted(debts, key=lambda d: d.position)
        return sorted(by_position, key=self.sort_key)

    def allocate_extra(self, ordered: Sequence[DebtState], extra: Decimal) -> Dict[str, Decimal]:
        """
        Single-target allocation: the whole surplus goes to the top-priority debt,
        capped at its balance. Leftover surplus is not passed on to the next debt.
        """
        if extra <= ZERO or not ordered:
            return {}
        target = ordered[0]
        return {target.record.id: min(extra, target.remaining)}


@dataclass(frozen=True)
class SnowballPolicy(OrderingPolicy):
    """Smallest remaining balance first, re-sorted every month"""

    name: ClassVar[StrategyName] = StrategyName.SNOWBALL

    def sort_key(self, debt: DebtState) -> Tuple:
        return (debt.remaining,)


@dataclass(frozen=True)
class AvalanchePolicy(OrderingPolicy):
    """Highest annual rate first; rates are fixed so one sort per run suffices"""

    name: ClassVar[StrategyName] = StrategyName.AVALANCHE
    resort_each_month: ClassVar[bool] = False

    def sort_key(self, debt: DebtState) -> Tuple:
        return (-debt.record.annual_interest_rate_percent,)


@dataclass(frozen=True)
class ProportionalPolicy(OrderingPolicy):
    """Surplus split across every active debt by its share of the total balance"""

    name: ClassVar[StrategyName] = StrategyName.PROPORTIONAL
    resort_each_month: ClassVar[bool] = False

    def sort_key(self, debt: DebtState) -> Tuple:
        return (debt.position,)

    def allocate_extra(self, ordered: Sequence[DebtState], extra: Decimal) -> Dict[str, Decimal]:
        total = sum((d.remaining for d in ordered), ZERO)
        if extra <= ZERO or total <= ZERO:
            return {}

        # Shares are floored to cents so the split never exceeds the surplus
        return {
            d.record.id: min(d.remaining, floor_cents(extra * d.remaining / total))
            for d in ordered
            if d.remaining > ZERO
        }


SNOWBALL = SnowballPolicy()
AVALANCHE = AvalanchePolicy()
PROPORTIONAL = ProportionalPolicy()

POLICIES: Tuple[OrderingPolicy, ...] = (SNOWBALL, AVALANCHE, PROPORTIONAL)


def get_policy(name: str) -> OrderingPolicy:
    """Look up a built-in policy by strategy name"""
    for policy in POLICIES:
        if policy.name.value == name:
            return policy
    raise InvalidInputError(f"Unknown strategy: {name}")
