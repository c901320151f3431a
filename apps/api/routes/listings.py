"""Paginated channel listings.

POST /api/subscriptions   - public subscriptions of a channel
POST /api/playlist_items  - videos of a playlist (or a channel's uploads)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from apps.api.deps.youtube import get_list_subscriptions_use_case, get_list_uploads_use_case
from apps.api.schemas.envelope import ResponseEnvelope
from packages.core.use_cases.list_subscriptions import ListSubscriptionsUseCase
from packages.core.use_cases.list_uploads import ListUploadsUseCase
from packages.schemas.youtube.provider import PlaylistPage, SubscriptionPage

router = APIRouter(prefix="/api", tags=["listings"])


class PageRequest(BaseModel):
    """Request body for a paginated listing."""

    id: str = Field(..., min_length=1, description="Channel ID or playlist ID")
    page_token: str | None = Field(default=None, description="Token from a previous page")


@router.post("/subscriptions", response_model=ResponseEnvelope[SubscriptionPage])
async def list_subscriptions(
    body: PageRequest,
    use_case: Annotated[ListSubscriptionsUseCase, Depends(get_list_subscriptions_use_case)],
) -> ResponseEnvelope[SubscriptionPage]:
    """List one page of a channel's public subscriptions."""
    page = await use_case.execute(body.id, page_token=body.page_token)
    return ResponseEnvelope[SubscriptionPage](data=page)


@router.post("/playlist_items", response_model=ResponseEnvelope[PlaylistPage])
async def list_playlist_items(
    body: PageRequest,
    use_case: Annotated[ListUploadsUseCase, Depends(get_list_uploads_use_case)],
) -> ResponseEnvelope[PlaylistPage]:
    """List one page of a playlist; a channel ID lists its uploads."""
    page = await use_case.execute(body.id, page_token=body.page_token)
    return ResponseEnvelope[PlaylistPage](data=page)


__all__ = ["router"]
