"""Request instrumentation middleware."""

from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.core.logging import emit_event
from src.core.metrics import RequestMetrics

logger = logging.getLogger(__name__)

UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """Path template of the matched route, or a fixed label when none matched.

    The router records the matched route in the shared scope, so this is only
    meaningful once the request has been dispatched.
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else UNMATCHED_ROUTE


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """Count every request and record its latency.

    Metrics are labeled by route template, so unknown URLs share a single
    series. They are recorded whether the handler returns or raises. The
    response and any exception pass through unchanged.
    """

    def __init__(self, app: ASGIApp, metrics: RequestMetrics) -> None:
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        method = request.method
        status_code = 500
        start = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start
            route = route_label(request)
            self.metrics.observe(route, method, duration)
            emit_event(
                logger,
                "request",
                f"{method} {request.url.path} {status_code}",
                method=method,
                path=request.url.path,
                route=route,
                status=status_code,
                duration_ms=round(duration * 1000, 2),
            )
