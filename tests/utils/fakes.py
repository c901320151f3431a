"""Scripted test doubles for the channel data provider port."""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from packages.core.ports.channel_provider import ChannelDataProvider
from packages.schemas.youtube.provider import (
    ChannelRecord,
    PlaylistPage,
    PlaylistVideo,
    ProviderResult,
    RegionRestrictions,
    ResponseShape,
    Subscription,
    SubscriptionPage,
    VerificationStatus,
)

GOOGLE_ID = "UCK8sQmJBp8GCxrOtXWBpyEA"
GOOGLE_DEVELOPERS_ID = "UC_x5XG1OV2P6uZZ5FSM9Ttw"

# An outcome is a result to return, an exception to raise, or an async
# callable producing either.
Outcome = Any


def make_record(
    channel_id: str = GOOGLE_ID,
    title: str | None = "Google",
    custom_url: str | None = "@google",
    **overrides: Any,
) -> ChannelRecord:
    """Create a fully populated ChannelRecord; override any field by keyword."""
    fields: dict[str, Any] = {
        "channel_id": channel_id,
        "title": title,
        "description": "Experience the world's information with Google.",
        "custom_url": custom_url,
        "published_at": datetime(2005, 9, 18, tzinfo=UTC),
        "country": "US",
        "thumbnail_url": "https://yt3.ggpht.com/google=s88",
        "banner_url": "https://yt3.googleusercontent.com/google-banner",
        "subscriber_count": 13_400_000,
        "view_count": 4_500_000_000,
        "video_count": 3_100,
        "made_for_kids": False,
        "keywords": ("google", "technology"),
        "uploads_playlist_id": "UU" + channel_id[2:],
    }
    fields.update(overrides)
    return ChannelRecord(**fields)


def make_result(
    *records: ChannelRecord,
    query: str = "query",
    shape: ResponseShape = ResponseShape.CHANNELS_LIST,
) -> ProviderResult:
    """Wrap records into a ProviderResult."""
    return ProviderResult(shape=shape, query=query, matches=records)


def make_subscription_page(count: int = 2, next_page_token: str | None = None) -> SubscriptionPage:
    items = [
        Subscription(
            channel_id=f"UC{index:022d}",
            title=f"Channel {index}",
            subscribed_at=datetime(2024, 3, 4, 10, 27, 40, tzinfo=UTC),
        )
        for index in range(count)
    ]
    return SubscriptionPage(items=items, next_page_token=next_page_token)


def make_playlist_page(count: int = 2, next_page_token: str | None = None) -> PlaylistPage:
    items = [
        PlaylistVideo(
            video_id=f"video{index:06d}",
            title=f"Video {index}",
            published_at=datetime(2024, 1, 1, tzinfo=UTC),
        )
        for index in range(count)
    ]
    return PlaylistPage(items=items, next_page_token=next_page_token)


DEFAULT_RESTRICTIONS = RegionRestrictions(
    blocked_countries=(),
    no_index=False,
    verification=VerificationStatus.VERIFIED,
)


class FakeChannelProvider(ChannelDataProvider):
    """In-memory provider whose answers are scripted per (operation, key).

    Each scripted key holds a queue of outcomes; the last outcome repeats once
    the queue is down to one entry. Unscripted lookups return an empty result.
    Every call is recorded in ``calls`` as ``(operation, key)``.
    """

    def __init__(self) -> None:
        self._script: dict[tuple[str, str], list[Outcome]] = {}
        self.calls: list[tuple[str, str]] = []
        self.region_restrictions: Outcome = DEFAULT_RESTRICTIONS
        self.url_redirect: Outcome = None
        self.subscriptions: Outcome = make_subscription_page()
        self.playlist_items: Outcome = make_playlist_page()

    def script(self, operation: str, key: str, *outcomes: Outcome) -> "FakeChannelProvider":
        """Queue outcomes for ``operation`` called with ``key``."""
        self._script[(operation, key)] = list(outcomes)
        return self

    def calls_for(self, operation: str) -> list[str]:
        return [key for op, key in self.calls if op == operation]

    async def _resolve(self, outcome: Outcome) -> Any:
        if callable(outcome) and not isinstance(outcome, type):
            outcome = await outcome()
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def _lookup(self, operation: str, key: str) -> ProviderResult:
        self.calls.append((operation, key))
        queue = self._script.get((operation, key))
        if not queue:
            return make_result(query=key)
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        return await self._resolve(outcome)

    async def lookup_by_id(self, channel_id: str) -> ProviderResult:
        return await self._lookup("lookup_by_id", channel_id)

    async def lookup_by_handle(self, handle: str) -> ProviderResult:
        return await self._lookup("lookup_by_handle", handle)

    async def lookup_by_username(self, username: str) -> ProviderResult:
        return await self._lookup("lookup_by_username", username)

    async def lookup_by_custom_url(self, name: str) -> ProviderResult:
        return await self._lookup("lookup_by_custom_url", name)

    async def search_by_text(self, query: str) -> ProviderResult:
        return await self._lookup("search_by_text", query)

    async def fetch_region_restrictions(self, channel_id: str) -> RegionRestrictions:
        self.calls.append(("fetch_region_restrictions", channel_id))
        return await self._resolve(self.region_restrictions)

    async def fetch_url_redirect(self, handle: str) -> str | None:
        self.calls.append(("fetch_url_redirect", handle))
        return await self._resolve(self.url_redirect)

    async def fetch_subscriptions(
        self,
        channel_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> SubscriptionPage:
        self.calls.append(("fetch_subscriptions", channel_id))
        return await self._resolve(self.subscriptions)

    async def fetch_playlist_items(
        self,
        playlist_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PlaylistPage:
        self.calls.append(("fetch_playlist_items", playlist_id))
        return await self._resolve(self.playlist_items)


def hanging(seconds: float = 30.0) -> Callable[[], Awaitable[ProviderResult]]:
    """Outcome that never completes within a test's lifetime."""
    import asyncio

    async def _wait() -> ProviderResult:
        await asyncio.sleep(seconds)
        return make_result()

    return _wait


__all__ = [
    "DEFAULT_RESTRICTIONS",
    "GOOGLE_DEVELOPERS_ID",
    "GOOGLE_ID",
    "FakeChannelProvider",
    "hanging",
    "make_playlist_page",
    "make_record",
    "make_result",
    "make_subscription_page",
]
