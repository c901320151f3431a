"""Common utilities for ChannelScope.

This package provides reusable utilities: configuration, JSON logging,
correlation-ID tracing, retry helpers, and Prometheus metrics.
"""

from packages.common.config import (
    ChannelScopeConfig,
    ResolutionSettings,
    YouTubeProviderSettings,
    get_config,
)
from packages.common.resilience import retry_async

__all__ = [
    "ChannelScopeConfig",
    "ResolutionSettings",
    "YouTubeProviderSettings",
    "get_config",
    "retry_async",
]
