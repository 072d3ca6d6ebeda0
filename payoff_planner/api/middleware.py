"""FastAPI middleware for request tracing and metrics"""

import re
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from payoff_planner.infrastructure.observability.metrics import request_duration_histogram

# Caller-supplied IDs end up in JSON logs; anything else is replaced
_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(header_value):
    if header_value and _SAFE_REQUEST_ID.match(header_value):
        return header_value
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate the caller's X-Request-ID, or mint one, so a comparison can be traced across logs"""

    async def dispatch(self, request: Request, call_next):
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Time each request, labelled by route template rather than raw path"""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)

        route = request.scope.get("route")
        request_duration_histogram.labels(
            method=request.method,
            endpoint=getattr(route, "path", "unmatched"),
            status=response.status_code,
        ).observe(time.perf_counter() - started)
        return response
