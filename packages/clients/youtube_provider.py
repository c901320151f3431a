"""YouTube implementation of the ChannelDataProvider port.

Combines the Data API v3 client (channel lookups, search, subscriptions,
playlist items) with the innertube client (custom URL resolution, channel page
facts) over one shared httpx.AsyncClient.
"""

from __future__ import annotations

import logging
from types import TracebackType

import httpx

from packages.clients.innertube import InnertubeClient
from packages.clients.youtube_data_api import YouTubeDataAPIClient
from packages.common.config import YouTubeProviderSettings
from packages.core.errors import ProviderNotFoundError
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.schemas.youtube.provider import (
    ChannelRecord,
    PlaylistPage,
    ProviderResult,
    RegionRestrictions,
    ResponseShape,
    SubscriptionPage,
)

logger = logging.getLogger(__name__)


class YouTubeChannelProvider(ChannelDataProvider):
    """Channel data provider backed by the YouTube APIs.

    Lookups that upstream rejects as not found (HTTP 404, or a 400 caused by a
    malformed lookup value) return an empty result; listings raise
    ProviderNotFoundError instead.

    Example:
        >>> async with YouTubeChannelProvider(config.provider_settings) as provider:
        ...     result = await provider.lookup_by_handle("Google")
    """

    def __init__(
        self,
        settings: YouTubeProviderSettings,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            settings: Provider settings.
            client: Optional shared httpx.AsyncClient; created and owned if omitted.
        """
        self.settings = settings
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)
        self._owns_client = client is None
        self.data_api = YouTubeDataAPIClient(settings, client=self._client)
        self.innertube = InnertubeClient(settings, client=self._client)

        logger.info(
            "Initialized YouTubeChannelProvider",
            extra={"api_key_configured": settings.api_key is not None},
        )

    async def __aenter__(self) -> YouTubeChannelProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the shared HTTP client if owned."""
        if self._owns_client:
            await self._client.aclose()

    async def _channels(
        self,
        query: str,
        *,
        ids: list[str] | None = None,
        for_handle: str | None = None,
        for_username: str | None = None,
    ) -> ProviderResult:
        try:
            records = await self.data_api.list_channels(
                ids=ids, for_handle=for_handle, for_username=for_username
            )
        except ProviderNotFoundError:
            records = []
        return ProviderResult(
            shape=ResponseShape.CHANNELS_LIST, query=query, matches=tuple(records)
        )

    async def lookup_by_id(self, channel_id: str) -> ProviderResult:
        return await self._channels(channel_id, ids=[channel_id])

    async def lookup_by_handle(self, handle: str) -> ProviderResult:
        return await self._channels(handle, for_handle=handle.lstrip("@"))

    async def lookup_by_username(self, username: str) -> ProviderResult:
        return await self._channels(username, for_username=username)

    async def lookup_by_custom_url(self, name: str) -> ProviderResult:
        """Resolve ``youtube.com/c/<name>`` and hydrate the channel it points to."""
        endpoint = await self.innertube.resolve_url(f"youtube.com/c/{name}")
        channel_id = endpoint.channel_id if endpoint else None
        if channel_id is None:
            return ProviderResult(shape=ResponseShape.RESOLVE_URL, query=name)

        hydrated = await self._channels(name, ids=[channel_id])
        return ProviderResult(
            shape=ResponseShape.RESOLVE_URL, query=name, matches=hydrated.matches
        )

    async def search_by_text(self, query: str) -> ProviderResult:
        """Search channels and hydrate the hits, keeping search relevance order."""
        ids = await self.data_api.search_channel_ids(query, self.settings.search_max_results)
        if not ids:
            return ProviderResult(shape=ResponseShape.SEARCH, query=query)

        hydrated = await self._channels(query, ids=ids)
        by_id: dict[str, ChannelRecord] = {r.channel_id: r for r in hydrated.matches}
        ordered = tuple(by_id[channel_id] for channel_id in ids if channel_id in by_id)
        return ProviderResult(shape=ResponseShape.SEARCH, query=query, matches=ordered)

    async def fetch_region_restrictions(self, channel_id: str) -> RegionRestrictions:
        return await self.innertube.browse_channel(channel_id)

    async def fetch_url_redirect(self, handle: str) -> str | None:
        """Resolve ``youtube.com/@<handle>``; a URL endpoint means the handle forwards."""
        endpoint = await self.innertube.resolve_url(f"youtube.com/@{handle.lstrip('@')}")
        if endpoint is None or endpoint.browse_id:
            return None
        return endpoint.url

    async def fetch_subscriptions(
        self,
        channel_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> SubscriptionPage:
        return await self.data_api.list_subscriptions(
            channel_id, page_token=page_token, max_results=max_results
        )

    async def fetch_playlist_items(
        self,
        playlist_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PlaylistPage:
        return await self.data_api.list_playlist_items(
            playlist_id, page_token=page_token, max_results=max_results
        )


__all__ = ["YouTubeChannelProvider"]
