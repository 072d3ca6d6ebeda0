"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from payoff_planner.config import settings
from payoff_planner.domain.advisory import AdvisoryEnricher
from payoff_planner.infrastructure.clients.advisory import AdvisoryClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_advisory_enricher() -> AdvisoryEnricher:
    """Provide an advisory enricher backed by the HTTP text-generation client"""
    return AdvisoryEnricher(AdvisoryClient(), timeout=settings.advisory_timeout_seconds)
