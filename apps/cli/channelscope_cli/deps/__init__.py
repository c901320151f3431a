"""Dependency construction for CLI commands."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from packages.clients.youtube_provider import YouTubeChannelProvider
from packages.common.config import get_config
from packages.core.ports.channel_provider import ChannelDataProvider


@asynccontextmanager
async def provider_session() -> AsyncIterator[ChannelDataProvider]:
    """Open a YouTube provider for one CLI invocation and close it afterwards."""
    config = get_config()
    async with YouTubeChannelProvider(config.provider_settings) as provider:
        yield provider


__all__ = ["provider_session"]
