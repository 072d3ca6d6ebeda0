"""Advisory enrichment - best-effort tips from an external text generator"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Tuple

from payoff_planner.domain.comparator import StrategyComparison
from payoff_planner.domain.exceptions import AdvisoryUnavailable
from payoff_planner.domain.models import DebtSet
from payoff_planner.infrastructure.observability.metrics import advisory_failure_counter

logger = logging.getLogger(__name__)

MAX_TIPS = 3

ADVICE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "tips": {"type": "array", "items": {"type": "string"}},
        "priority": {
            "type": "string",
            "description": "Which debt to tackle first and why (1 sentence)",
        },
        "warning": {
            "type": "string",
            "description": "Optional warning or point of attention",
        },
    },
    "required": ["tips"],
}


class TextGenerator(Protocol):
    """External text-generation collaborator"""

    async def generate(self, prompt: str, response_schema: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass(frozen=True)
class Advice:
    """Qualitative guidance shown next to the numeric results"""

    tips: Tuple[str, ...]
    priority: Optional[str] = None
    warning: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Advice":
        """
        Parse the generator's JSON answer.

        Raises:
            AdvisoryUnavailable: If there is no usable tip in the payload
        """
        raw_tips = payload.get("tips") if isinstance(payload, dict) else None
        if not isinstance(raw_tips, list):
            raise AdvisoryUnavailable("Advisory payload has no tips list")

        tips = tuple(t.strip() for t in raw_tips if isinstance(t, str) and t.strip())[:MAX_TIPS]
        if not tips:
            raise AdvisoryUnavailable("Advisory payload has no usable tips")

        return cls(
            tips=tips,
            priority=_optional_text(payload.get("priority")),
            warning=_optional_text(payload.get("warning")),
        )


def _optional_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def build_debt_summary(debt_set: DebtSet) -> Dict[str, Any]:
    """Compact, JSON-safe view of the debt set for the prompt"""
    return {
        "debts": [
            {
                "name": d.creditor_name or d.id,
                "balance": str(d.remaining_balance),
                "rate": str(d.annual_interest_rate_percent),
                "minimum": str(d.minimum_monthly_payment),
            }
            for d in debt_set.debts
        ],
        "total_debt": str(debt_set.total_balance),
        "monthly_budget": str(debt_set.monthly_budget),
        "extra_capacity": str(debt_set.extra_capacity),
    }


def build_prompt(debt_set: DebtSet, comparison: StrategyComparison) -> str:
    summary = build_debt_summary(debt_set)
    recommended = comparison.result_for(comparison.recommended)
    months = recommended.total_months if recommended.is_resolved else "more than the planning horizon"
    return (
        "Analyse these debts and give 2-3 short, practical repayment tips.\n\n"
        f"Debts: {json.dumps(summary['debts'])}\n"
        f"Total debt: {summary['total_debt']}\n"
        f"Monthly budget: {summary['monthly_budget']}\n"
        f"Extra capacity above minimums: {summary['extra_capacity']}\n"
        f"Recommended strategy: {comparison.recommended.value} ({months} months, "
        f"{recommended.total_interest_accrued} interest)\n\n"
        "Keep each tip to one sentence and focus on concrete actions."
    )


class AdvisoryEnricher:
    """
    Ask a text generator for tips about a comparison.

    Failures and timeouts return None. Only the most recent request counts:
    a response arriving after a newer request was issued is discarded, and
    ``submit`` cancels the previous in-flight task.
    """

    def __init__(self, generator: TextGenerator, timeout: float = 10.0):
        self.generator = generator
        self.timeout = timeout
        self._generation = 0
        self._pending: Optional[asyncio.Task] = None

    async def enrich(self, debt_set: DebtSet, comparison: StrategyComparison) -> Optional[Advice]:
        self._generation += 1
        generation = self._generation

        try:
            payload = await asyncio.wait_for(
                self.generator.generate(build_prompt(debt_set, comparison), ADVICE_SCHEMA),
                timeout=self.timeout,
            )
            advice = Advice.from_payload(payload)
        except asyncio.TimeoutError:
            logger.warning("Advisory request timed out", extra={"timeout_seconds": self.timeout})
            return None
        except AdvisoryUnavailable as e:
            logger.warning(f"Advisory unavailable: {e}")
            return None
        except Exception as e:
            # CancelledError is a BaseException and still reaches submit()
            advisory_failure_counter.inc()
            logger.error(f"Unexpected advisory error: {e!r}")
            return None

        if generation != self._generation:
            logger.info("Discarding stale advisory response", extra={"generation": generation})
            return None
        return advice

    def submit(self, debt_set: DebtSet, comparison: StrategyComparison) -> asyncio.Task:
        """Schedule enrich() and cancel whatever request was still in flight"""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = asyncio.create_task(self.enrich(debt_set, comparison))
        return self._pending
