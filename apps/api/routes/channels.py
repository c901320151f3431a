"""Channel resolution endpoint.

GET /api/channel?q=<reference>[&type=<kind>] resolves any channel reference
(URL, @handle, username, custom URL name, display name or channel ID) into
the canonical channel and its metadata.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from apps.api.deps.youtube import get_resolve_use_case
from apps.api.schemas.envelope import ResponseEnvelope
from packages.core.use_cases.resolve_channel import ResolveChannelUseCase
from packages.schemas.youtube.channel import ChannelMetadata
from packages.schemas.youtube.reference import ReferenceKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["channels"])

DISCONNECT_POLL_SECONDS = 1.0


async def _cancel_on_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    """Set ``cancel_event`` once the client goes away."""
    while not cancel_event.is_set():
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)
        if await request.is_disconnected():
            logger.info("Client disconnected, cancelling resolution")
            cancel_event.set()


@router.get("/channel", response_model=ResponseEnvelope[ChannelMetadata])
async def resolve_channel(
    request: Request,
    use_case: Annotated[ResolveChannelUseCase, Depends(get_resolve_use_case)],
    q: Annotated[str, Query(max_length=2048, description="Channel reference to resolve")],
    type: Annotated[
        ReferenceKind | None,
        Query(description="Treat the reference as this kind instead of classifying it"),
    ] = None,
) -> ResponseEnvelope[ChannelMetadata]:
    """Resolve a channel reference.

    Returns:
        ResponseEnvelope[ChannelMetadata]: Canonical channel plus metadata.
            Enrichment failures yield ``partial: true`` with diagnostics, not an error.

    Raises:
        ChannelResolutionError: Mapped to 400/404/410/499/502/503 by the error handlers.
    """
    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(_cancel_on_disconnect(request, cancel_event))
    try:
        metadata = await use_case.execute(q, kind=type, cancel_event=cancel_event)
    finally:
        watcher.cancel()

    return ResponseEnvelope[ChannelMetadata](data=metadata)


__all__ = ["router"]
