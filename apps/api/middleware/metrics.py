"""Prometheus metrics middleware for HTTP request instrumentation.

Records request counts by method, route and status, and request duration
histograms by method and route. Routes are labelled by their path template,
so user-supplied path segments never become label values.
"""

from __future__ import annotations

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from apps.api.routes.metrics import http_request_duration_seconds, http_requests_total


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware to instrument HTTP requests with Prometheus metrics.

    Example:
        >>> app = FastAPI()
        >>> app.add_middleware(PrometheusMiddleware)
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore
        """Process request and record metrics."""
        # Skip metrics endpoint to avoid recursion
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        path = _route_label(request)
        http_requests_total.labels(
            method=request.method, path=path, status=response.status_code
        ).inc()
        http_request_duration_seconds.labels(method=request.method, path=path).observe(duration)

        return response


# Export public API
__all__ = ["PrometheusMiddleware"]
