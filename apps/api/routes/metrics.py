"""Prometheus metrics endpoint for ChannelScope API.

Exposes the HTTP request metrics defined here together with the resolution
and provider call metrics from ``packages.common.metrics``.
"""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import REGISTRY, Counter, Histogram, generate_latest

router = APIRouter(tags=["observability"])

# HTTP request metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "path"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
    registry=REGISTRY,
)


@router.get("/metrics")
async def prometheus_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Response: Metrics in Prometheus text exposition format.

    Example:
        $ curl http://localhost:3000/metrics
        # HELP channel_resolutions_total Channel resolution requests by outcome
        # TYPE channel_resolutions_total counter
        channel_resolutions_total{outcome="resolved"} 42.0
        ...
    """
    return Response(
        content=generate_latest(REGISTRY),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )


# Export public API
__all__ = ["http_request_duration_seconds", "http_requests_total", "router"]
