"""Provider and use-case dependencies for FastAPI routes."""

from __future__ import annotations

from typing import Annotated, cast

from fastapi import Depends, Request

from packages.common.config import ResolutionSettings, get_config
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.core.use_cases.list_subscriptions import ListSubscriptionsUseCase
from packages.core.use_cases.list_uploads import ListUploadsUseCase
from packages.core.use_cases.resolve_channel import ResolveChannelUseCase


async def get_provider(request: Request) -> ChannelDataProvider:
    """Get the channel data provider from app state via Request.

    The provider (and its pooled httpx client) is created once in the app
    lifespan and shared by all requests.
    """
    return cast(ChannelDataProvider, request.app.state.provider)


def get_resolution_settings() -> ResolutionSettings:
    """Retry and paging settings from the cached configuration."""
    return get_config().resolution_settings


async def get_resolve_use_case(
    provider: Annotated[ChannelDataProvider, Depends(get_provider)],
    settings: Annotated[ResolutionSettings, Depends(get_resolution_settings)],
) -> ResolveChannelUseCase:
    """Dependency factory for ResolveChannelUseCase (one per request)."""
    return ResolveChannelUseCase(provider=provider, settings=settings)


async def get_list_subscriptions_use_case(
    provider: Annotated[ChannelDataProvider, Depends(get_provider)],
    settings: Annotated[ResolutionSettings, Depends(get_resolution_settings)],
) -> ListSubscriptionsUseCase:
    """Dependency factory for ListSubscriptionsUseCase."""
    return ListSubscriptionsUseCase(provider=provider, settings=settings)


async def get_list_uploads_use_case(
    provider: Annotated[ChannelDataProvider, Depends(get_provider)],
    settings: Annotated[ResolutionSettings, Depends(get_resolution_settings)],
) -> ListUploadsUseCase:
    """Dependency factory for ListUploadsUseCase."""
    return ListUploadsUseCase(provider=provider, settings=settings)


__all__ = [
    "get_list_subscriptions_use_case",
    "get_list_uploads_use_case",
    "get_provider",
    "get_resolution_settings",
    "get_resolve_use_case",
]
