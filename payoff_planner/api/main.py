"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from payoff_planner.api.middleware import RequestIDMiddleware, MetricsMiddleware
from payoff_planner.api.v1 import advice, strategies
from payoff_planner.infrastructure.observability.logging import setup_logging
from payoff_planner.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Payoff Planner",
        description="Debt payoff strategy simulation and recommendation service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(strategies.router, prefix="/v1", tags=["strategies"])
    app.include_router(advice.router, prefix="/v1", tags=["advice"])

    return app


app = create_app()
