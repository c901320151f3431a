"""Caller-driven cancellation for provider calls."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from packages.core.errors import ResolutionCancelledError

T = TypeVar("T")


async def run_cancellable(awaitable: Awaitable[T], cancel_event: asyncio.Event | None) -> T:
    """Await ``awaitable`` unless ``cancel_event`` fires first.

    When the event fires, the in-flight work is cancelled and awaited so that no
    call outlives the request, then ResolutionCancelledError is raised.
    Cancelling the calling task propagates asyncio.CancelledError unchanged.
    """
    if cancel_event is None:
        return await awaitable

    task = asyncio.ensure_future(awaitable)
    if cancel_event.is_set():
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        raise ResolutionCancelledError("Resolution cancelled by caller")

    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        waiter.cancel()
        raise

    if task in done:
        waiter.cancel()
        return task.result()

    task.cancel()
    await asyncio.gather(task, return_exceptions=True)
    raise ResolutionCancelledError("Resolution cancelled by caller")


__all__ = ["run_cancellable"]
