"""Request logging middleware for ChannelScope API.

Logs every HTTP request as structured JSON with:
- Correlation ID (taken from X-Request-ID or generated), also set on the
  logging context so provider and pipeline logs carry it
- Method and path
- Response status code
- Elapsed time in milliseconds
"""

import logging
import time
from typing import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from packages.common.tracing import TracingContext

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging all HTTP requests with correlation IDs."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in chain.

        Returns:
            Response: HTTP response from handler, with X-Request-ID set.
        """
        with TracingContext(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            request.state.request_id = request_id
            start_ns = time.perf_counter_ns()

            # Query strings carry user input; keep them out of access logs
            logger.info(
                "Request started",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client_host": request.client.host if request.client else None,
                },
            )

            try:
                response = await call_next(request)
            except Exception:
                logger.exception(
                    "Request failed",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "elapsed_ms": (time.perf_counter_ns() - start_ns) // 1_000_000,
                    },
                )
                raise

            logger.info(
                "Request completed",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "elapsed_ms": (time.perf_counter_ns() - start_ns) // 1_000_000,
                },
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response


__all__ = ["REQUEST_ID_HEADER", "RequestLoggingMiddleware"]
