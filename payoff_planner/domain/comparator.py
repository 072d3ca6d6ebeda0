"""Strategy comparison and recommendation heuristic"""

from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from typing import Dict, Optional

from payoff_planner.domain.models import DebtSet, SimulationResult, StrategyName
from payoff_planner.domain.policies import AVALANCHE, PROPORTIONAL, SNOWBALL, OrderingPolicy
from payoff_planner.domain.simulator import HORIZON_MONTHS, simulate

INTEREST_SAVINGS_THRESHOLD = Decimal("100")
MOMENTUM_DEBT_COUNT = 3


@dataclass(frozen=True)
class StrategyComparison:
    """Results of every built-in policy on one debt set, plus the recommendation"""

    snowball: SimulationResult
    avalanche: SimulationResult
    proportional: SimulationResult
    recommended: StrategyName
    reasoning: str

    @property
    def results(self) -> Dict[StrategyName, SimulationResult]:
        return {
            StrategyName.SNOWBALL: self.snowball,
            StrategyName.AVALANCHE: self.avalanche,
            StrategyName.PROPORTIONAL: self.proportional,
        }

    def result_for(self, name: StrategyName) -> SimulationResult:
        return self.results[StrategyName(name)]

    @property
    def interest_delta(self) -> Decimal:
        """Interest Snowball costs on top of Avalanche (negative if cheaper)"""
        return self.snowball.total_interest_accrued - self.avalanche.total_interest_accrued

    @property
    def months_delta(self) -> Optional[int]:
        """Snowball months minus Avalanche months; None if either is unresolved"""
        if not (self.snowball.is_resolved and self.avalanche.is_resolved):
            return None
        return self.snowball.total_months - self.avalanche.total_months


@lru_cache(maxsize=256)
def simulate_cached(debt_set: DebtSet, policy: OrderingPolicy, horizon_months: int = HORIZON_MONTHS) -> SimulationResult:
    """Memoized simulate; safe because simulate is pure and its inputs are immutable"""
    return simulate(debt_set, policy, horizon_months)


def recommend_strategy(
    debt_set: DebtSet,
    snowball: SimulationResult,
    avalanche: SimulationResult,
) -> tuple[StrategyName, str]:
    """
    Pick Snowball or Avalanche as the default strategy.

    Decision order:
    - Any rate above 10% and Avalanche saves more than 100 in interest: Avalanche
    - More than 3 debts: Snowball (frequent small wins keep people going)
    - Otherwise: whichever accrues less interest, Snowball on a tie

    Proportional is never recommended.

    Returns: (strategy, reasoning)
    """
    interest_delta = snowball.total_interest_accrued - avalanche.total_interest_accrued

    if debt_set.has_high_interest() and interest_delta > INTEREST_SAVINGS_THRESHOLD:
        return StrategyName.AVALANCHE, (
            f"You have high-interest debt. The Avalanche method saves you "
            f"{interest_delta:.2f} in interest."
        )

    if len(debt_set) > MOMENTUM_DEBT_COUNT:
        return StrategyName.SNOWBALL, (
            f"With {len(debt_set)} debts, the Snowball method gives you quick wins "
            f"that keep you motivated."
        )

    if avalanche.total_interest_accrued < snowball.total_interest_accrued:
        return StrategyName.AVALANCHE, "The Avalanche method saves you the most money."
    return StrategyName.SNOWBALL, "The Snowball method gives you quick, small wins."


def compare(debt_set: DebtSet, horizon_months: int = HORIZON_MONTHS) -> StrategyComparison:
    """Run every built-in policy on the same debt set and budget, then recommend one"""
    snowball = simulate_cached(debt_set, SNOWBALL, horizon_months)
    avalanche = simulate_cached(debt_set, AVALANCHE, horizon_months)
    proportional = simulate_cached(debt_set, PROPORTIONAL, horizon_months)

    recommended, reasoning = recommend_strategy(debt_set, snowball, avalanche)

    return StrategyComparison(
        snowball=snowball,
        avalanche=avalanche,
        proportional=proportional,
        recommended=recommended,
        reasoning=reasoning,
    )
