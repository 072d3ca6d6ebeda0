"""POST /v1/advice - best-effort qualitative tips for a strategy comparison"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from payoff_planner.api.v1.schemas import AdviceResponse, CompareRequest
from payoff_planner.api.dependencies import get_advisory_enricher, get_request_id
from payoff_planner.config import settings
from payoff_planner.domain.advisory import AdvisoryEnricher
from payoff_planner.domain.comparator import compare
from payoff_planner.domain.debt_set import build_debt_set
from payoff_planner.domain.exceptions import InvalidInputError
from payoff_planner.infrastructure.observability.logging import log_comparison
from payoff_planner.infrastructure.observability.metrics import record_recommendation, record_simulation

router = APIRouter()


@router.post("/advice", response_model=AdviceResponse)
async def get_advice(
    request_body: CompareRequest,
    request: Request,
    enricher: AdvisoryEnricher = Depends(get_advisory_enricher),
):
    """
    Compare strategies, then ask the text-generation service for tips.

    Advice is null when the service is disabled, fails or times out; the
    recommendation is returned either way.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        debt_set = build_debt_set(
            [d.to_record() for d in request_body.debts],
            request_body.monthly_budget,
        )
    except InvalidInputError as e:
        logging.warning(f"Invalid advice input: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    comparison = compare(debt_set, settings.simulation_horizon_months)

    for result in comparison.results.values():
        record_simulation(result)
    record_recommendation(comparison.recommended)

    advice = None
    if settings.advisory_enabled and len(debt_set) > 0:
        advice = await enricher.enrich(debt_set, comparison)
        if advice is None:
            logging.info("Returning comparison without advice", extra={"request_id": request_id})

    duration_ms = (time.time() - start_time) * 1000
    log_comparison(
        request_id,
        len(debt_set),
        comparison.recommended.value,
        str(comparison.interest_delta),
        duration_ms,
    )

    return AdviceResponse.build(comparison, advice)
