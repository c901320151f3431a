"""Resilience utilities for upstream provider calls with retry logic.

Provides a bounded retry helper built on tenacity. The resolution pipeline and
the metadata aggregator wrap every provider call in it so that transient
upstream failures are retried locally, with exponential backoff, before the
caller decides what to do next.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 4.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
) -> T:
    """Run an async operation with bounded exponential-backoff retries.

    Only exceptions listed in ``retry_on`` are retried; anything else propagates
    immediately. After the last attempt the original exception is re-raised.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt.
        max_attempts: Maximum number of attempts, including the first (default: 3).
        base_delay: Backoff multiplier in seconds; 0 disables sleeping (default: 0.5).
        max_delay: Upper bound on a single backoff sleep in seconds (default: 4.0).
        retry_on: Exception types that trigger a retry (default: all exceptions).

    Returns:
        T: The operation's result.

    Example:
        >>> result = await retry_async(
        ...     lambda: provider.lookup_by_handle("Google"),
        ...     max_attempts=3,
        ...     base_delay=0.5,
        ...     retry_on=(TransientProviderError,),
        ... )
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            return await operation()
    raise AssertionError("unreachable: tenacity re-raises after the last attempt")


__all__ = ["retry_async"]
