"""Channel data provider port definition.

The resolution core talks to YouTube only through this interface. Adapters in
``packages.clients`` implement it; tests use scripted fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from packages.schemas.youtube.provider import (
    PlaylistPage,
    ProviderResult,
    RegionRestrictions,
    SubscriptionPage,
)


class ChannelDataProvider(ABC):
    """Async capability the resolution pipeline and aggregator depend on.

    Lookups return a ``ProviderResult`` that may hold zero, one or several
    matches; zero matches is never an error. Failures raise subclasses of
    ``packages.core.errors.ProviderError``.
    """

    @abstractmethod
    async def lookup_by_id(self, channel_id: str) -> ProviderResult:
        """Look up a channel by its channel ID."""

    @abstractmethod
    async def lookup_by_handle(self, handle: str) -> ProviderResult:
        """Look up a channel by handle (without the '@' marker)."""

    @abstractmethod
    async def lookup_by_username(self, username: str) -> ProviderResult:
        """Look up a channel by legacy username."""

    @abstractmethod
    async def lookup_by_custom_url(self, name: str) -> ProviderResult:
        """Look up a channel by legacy custom URL name (``/c/<name>``)."""

    @abstractmethod
    async def search_by_text(self, query: str) -> ProviderResult:
        """Search channels by free text, preserving upstream relevance order."""

    @abstractmethod
    async def fetch_region_restrictions(self, channel_id: str) -> RegionRestrictions:
        """Fetch blocked countries and page-level visibility facts."""

    @abstractmethod
    async def fetch_url_redirect(self, handle: str) -> str | None:
        """Return the URL youtube.com/@<handle> forwards to, or None if it does not."""

    @abstractmethod
    async def fetch_subscriptions(
        self,
        channel_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> SubscriptionPage:
        """Fetch one page of the channel's public subscriptions."""

    @abstractmethod
    async def fetch_playlist_items(
        self,
        playlist_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PlaylistPage:
        """Fetch one page of a playlist's videos."""


__all__ = ["ChannelDataProvider"]
