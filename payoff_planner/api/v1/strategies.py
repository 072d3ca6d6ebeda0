"""POST /v1/simulate and POST /v1/compare - payoff projections"""

import time
import logging
from fastapi import APIRouter, HTTPException, Request

from payoff_planner.api.v1.schemas import (
    CompareRequest,
    ComparisonResponse,
    SimulateRequest,
    SimulationResponse,
)
from payoff_planner.api.dependencies import get_request_id
from payoff_planner.config import settings
from payoff_planner.domain.comparator import compare, simulate_cached
from payoff_planner.domain.debt_set import build_debt_set
from payoff_planner.domain.exceptions import InvalidInputError
from payoff_planner.domain.policies import get_policy
from payoff_planner.infrastructure.observability.logging import log_comparison
from payoff_planner.infrastructure.observability.metrics import record_recommendation, record_simulation

router = APIRouter()


@router.post("/simulate", response_model=SimulationResponse)
def simulate_strategy(request_body: SimulateRequest, request: Request):
    """
    Project the payoff of the supplied debts under a single strategy.

    Returns an UNRESOLVED outcome (total_months null) when the debts do not
    clear within the planning horizon; that is not an error.
    """
    request_id = get_request_id(request)

    try:
        debt_set = build_debt_set(
            [d.to_record() for d in request_body.debts],
            request_body.monthly_budget,
        )
        policy = get_policy(request_body.strategy)
    except InvalidInputError as e:
        logging.warning(f"Invalid simulation input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    result = simulate_cached(debt_set, policy, settings.simulation_horizon_months)
    record_simulation(result)

    return SimulationResponse.from_result(result, include_statements=request_body.include_statements)


@router.post("/compare", response_model=ComparisonResponse)
def compare_strategies(request_body: CompareRequest, request: Request):
    """
    Run Snowball, Avalanche and Proportional on the same debts and budget.

    Flow:
    1. Validate and normalize the debt set
    2. Simulate every built-in strategy
    3. Recommend Snowball or Avalanche
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        debt_set = build_debt_set(
            [d.to_record() for d in request_body.debts],
            request_body.monthly_budget,
        )
    except InvalidInputError as e:
        logging.warning(f"Invalid comparison input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    comparison = compare(debt_set, settings.simulation_horizon_months)

    for result in comparison.results.values():
        record_simulation(result)
    record_recommendation(comparison.recommended)

    duration_ms = (time.time() - start_time) * 1000
    log_comparison(
        request_id,
        len(debt_set),
        comparison.recommended.value,
        str(comparison.interest_delta),
        duration_ms,
    )

    return ComparisonResponse.from_comparison(comparison)
