"""Prometheus metrics for channel resolution.

Tracks:
- Resolution outcomes (resolved, not_found, invalid_input, ...)
- Which reference kind produced a match
- Provider call counts and latency per upstream operation

Metrics live in the default prometheus_client registry and are exposed by the
API's /metrics route.
"""

from prometheus_client import REGISTRY, Counter, Histogram

channel_resolutions_total = Counter(
    "channel_resolutions_total",
    "Channel resolution requests by outcome",
    ["outcome"],
    registry=REGISTRY,
)

channel_resolution_matches_total = Counter(
    "channel_resolution_matches_total",
    "Successful resolutions by the reference kind that matched",
    ["kind", "redirect", "ambiguous"],
    registry=REGISTRY,
)

provider_calls_total = Counter(
    "provider_calls_total",
    "Upstream provider calls by operation and outcome",
    ["operation", "outcome"],
    registry=REGISTRY,
)

provider_call_duration_seconds = Histogram(
    "provider_call_duration_seconds",
    "Upstream provider call latency in seconds",
    ["operation"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
    registry=REGISTRY,
)


def record_resolution(outcome: str) -> None:
    """Increment the resolution outcome counter."""
    channel_resolutions_total.labels(outcome=outcome).inc()


def record_match(kind: str, redirect: bool, ambiguous: bool) -> None:
    """Increment the matched-kind counter for a successful resolution."""
    channel_resolution_matches_total.labels(
        kind=kind, redirect=str(redirect).lower(), ambiguous=str(ambiguous).lower()
    ).inc()


def record_provider_call(operation: str, outcome: str, duration_seconds: float) -> None:
    """Record one upstream call with its outcome and latency."""
    provider_calls_total.labels(operation=operation, outcome=outcome).inc()
    provider_call_duration_seconds.labels(operation=operation).observe(duration_seconds)


__all__ = [
    "channel_resolution_matches_total",
    "channel_resolutions_total",
    "provider_call_duration_seconds",
    "provider_calls_total",
    "record_match",
    "record_provider_call",
    "record_resolution",
]
