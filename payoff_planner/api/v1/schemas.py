"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from payoff_planner.domain.advisory import Advice
from payoff_planner.domain.comparator import StrategyComparison
from payoff_planner.domain.models import DebtRecord, PayoffOutcome, SimulationResult, StrategyName


class DebtInput(BaseModel):
    """Single active debt; sign checks happen in the domain layer"""

    id: str = Field(..., min_length=1, description="Debt identifier, unique per request")
    creditor_name: str = ""
    remaining_balance: Decimal
    annual_interest_rate_percent: Decimal = Decimal("0")
    minimum_monthly_payment: Decimal = Decimal("0")

    def to_record(self) -> DebtRecord:
        return DebtRecord(
            id=self.id,
            creditor_name=self.creditor_name,
            remaining_balance=self.remaining_balance,
            annual_interest_rate_percent=self.annual_interest_rate_percent,
            minimum_monthly_payment=self.minimum_monthly_payment,
        )


class CompareRequest(BaseModel):
    """Request body for POST /v1/compare and POST /v1/advice"""

    monthly_budget: Decimal = Field(..., description="Total monthly amount, minimums included")
    debts: List[DebtInput]


class SimulateRequest(CompareRequest):
    """Request body for POST /v1/simulate"""

    strategy: StrategyName
    include_statements: bool = False


class PayoffEventSchema(BaseModel):
    debt_id: str
    payoff_month: int


class DebtPaymentSchema(BaseModel):
    debt_id: str
    interest: Decimal
    minimum_paid: Decimal
    extra_paid: Decimal
    ending_balance: Decimal


class MonthlyStatementSchema(BaseModel):
    month: int
    payments: List[DebtPaymentSchema]


class SimulationResponse(BaseModel):
    """One strategy's projected payoff"""

    strategy: StrategyName
    outcome: PayoffOutcome
    total_months: Optional[int] = None
    months_simulated: int
    total_interest_accrued: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    monthly_budget: Decimal
    budget_shortfall: Decimal
    payoff_schedule: List[PayoffEventSchema]
    payment_order: List[str]
    statements: Optional[List[MonthlyStatementSchema]] = None

    @classmethod
    def from_result(cls, result: SimulationResult, include_statements: bool = False) -> "SimulationResponse":
        statements = None
        if include_statements:
            statements = [
                MonthlyStatementSchema(
                    month=s.month,
                    payments=[
                        DebtPaymentSchema(
                            debt_id=p.debt_id,
                            interest=p.interest,
                            minimum_paid=p.minimum_paid,
                            extra_paid=p.extra_paid,
                            ending_balance=p.ending_balance,
                        )
                        for p in s.payments
                    ],
                )
                for s in result.statements
            ]

        return cls(
            strategy=result.strategy,
            outcome=result.outcome,
            total_months=result.total_months,
            months_simulated=result.months_simulated,
            total_interest_accrued=result.total_interest_accrued,
            total_paid=result.total_paid,
            remaining_balance=result.remaining_balance,
            monthly_budget=result.monthly_budget,
            budget_shortfall=result.budget_shortfall,
            payoff_schedule=[
                PayoffEventSchema(debt_id=e.debt_id, payoff_month=e.payoff_month)
                for e in result.payoff_schedule
            ],
            payment_order=list(result.payment_order),
            statements=statements,
        )


class ComparisonResponse(BaseModel):
    """Response for POST /v1/compare"""

    snowball: SimulationResponse
    avalanche: SimulationResponse
    proportional: SimulationResponse
    recommended: StrategyName
    reasoning: str
    interest_delta: Decimal
    months_delta: Optional[int] = None

    @classmethod
    def from_comparison(cls, comparison: StrategyComparison) -> "ComparisonResponse":
        return cls(
            snowball=SimulationResponse.from_result(comparison.snowball),
            avalanche=SimulationResponse.from_result(comparison.avalanche),
            proportional=SimulationResponse.from_result(comparison.proportional),
            recommended=comparison.recommended,
            reasoning=comparison.reasoning,
            interest_delta=comparison.interest_delta,
            months_delta=comparison.months_delta,
        )


class AdviceSchema(BaseModel):
    tips: List[str]
    priority: Optional[str] = None
    warning: Optional[str] = None


class AdviceResponse(BaseModel):
    """Response for POST /v1/advice; advice is null when the service is unavailable"""

    recommended: StrategyName
    reasoning: str
    advice: Optional[AdviceSchema] = None

    @classmethod
    def build(cls, comparison: StrategyComparison, advice: Optional[Advice]) -> "AdviceResponse":
        return cls(
            recommended=comparison.recommended,
            reasoning=comparison.reasoning,
            advice=(
                AdviceSchema(tips=list(advice.tips), priority=advice.priority, warning=advice.warning)
                if advice is not None
                else None
            ),
        )
