"""Async client for the YouTube Data API v3.

Wraps the ``channels``, ``search``, ``subscriptions`` and ``playlistItems``
endpoints. Responses are normalized into ``packages.schemas.youtube`` models by
the module-level ``*_from_item`` functions; upstream errors are mapped onto the
``packages.core.errors`` provider taxonomy by ``map_error_response``.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any, Final

import httpx

from packages.common.config import YouTubeProviderSettings
from packages.common.metrics import record_provider_call
from packages.core.errors import (
    AccountClosedError,
    AccountTerminatedError,
    PermanentProviderError,
    ProviderError,
    ProviderNotFoundError,
    SubscriptionsPrivateError,
    TransientProviderError,
)
from packages.schemas.youtube.provider import (
    ChannelRecord,
    PlaylistPage,
    PlaylistVideo,
    Subscription,
    SubscriptionPage,
)

logger = logging.getLogger(__name__)

CHANNEL_PARTS: Final[str] = "brandingSettings,contentDetails,id,snippet,statistics,status"

QUOTA_EXCEEDED_PREFIX: Final[str] = (
    "The request cannot be completed because you have exceeded your"
)
ACCOUNT_CLOSED_MESSAGE: Final[str] = (
    "Subscriptions could not be retrieved because the subscriber's account is closed."
)
ACCOUNT_SUSPENDED_MESSAGE: Final[str] = (
    "Subscriptions could not be retrieved because the subscriber's account is suspended."
)
SUBSCRIPTIONS_PRIVATE_MESSAGE: Final[str] = (
    "The requester is not allowed to access the requested subscriptions."
)

_QUOTA_REASONS: Final[frozenset[str]] = frozenset({"quotaExceeded", "dailyLimitExceeded"})
_RATE_LIMIT_REASONS: Final[frozenset[str]] = frozenset(
    {"rateLimitExceeded", "userRateLimitExceeded"}
)
_KEY_REASONS: Final[frozenset[str]] = frozenset({"keyInvalid", "keyExpired", "accessNotConfigured"})
_TRANSIENT_STATUSES: Final[frozenset[int]] = frozenset({500, 502, 503, 504})


# ========== Error mapping ==========


def _error_details(body: Any) -> tuple[str, set[str]]:
    """Extract the message and reason codes of a Data API error body."""
    if not isinstance(body, dict) or not isinstance(body.get("error"), dict):
        return "", set()
    error = body["error"]
    message = str(error.get("message") or "")
    reasons = {
        str(item.get("reason"))
        for item in error.get("errors") or []
        if isinstance(item, dict) and item.get("reason")
    }
    return message, reasons


def map_error_response(status_code: int, body: Any) -> ProviderError:
    """Map a non-200 Data API response to a provider error.

    The returned error never carries the raw upstream payload.
    """
    message, reasons = _error_details(body)

    if status_code == 429:
        return TransientProviderError("YouTube Data API rate limit reached")

    if status_code == 403:
        if message == ACCOUNT_CLOSED_MESSAGE:
            return AccountClosedError("Channel account is closed")
        if message == ACCOUNT_SUSPENDED_MESSAGE:
            return AccountTerminatedError("Channel account is terminated")
        if message == SUBSCRIPTIONS_PRIVATE_MESSAGE or "subscriptionForbidden" in reasons:
            return SubscriptionsPrivateError("Subscriptions are private")
        if message.startswith(QUOTA_EXCEEDED_PREFIX) or reasons & _QUOTA_REASONS:
            return PermanentProviderError("YouTube Data API quota exhausted")
        if reasons & _RATE_LIMIT_REASONS:
            return TransientProviderError("YouTube Data API rate limit reached")
        return PermanentProviderError("YouTube Data API request forbidden")

    if status_code == 401:
        return PermanentProviderError("YouTube Data API rejected the credentials")

    if status_code == 400:
        if reasons & _KEY_REASONS or "API key" in message:
            return PermanentProviderError("YouTube Data API key is invalid")
        return ProviderNotFoundError("YouTube Data API rejected the lookup parameters")

    if status_code == 404:
        return ProviderNotFoundError("Requested resource was not found")

    if status_code in _TRANSIENT_STATUSES:
        return TransientProviderError(f"YouTube Data API unavailable (HTTP {status_code})")

    if status_code >= 500:
        return TransientProviderError(f"YouTube Data API error (HTTP {status_code})")
    return PermanentProviderError(f"Unexpected YouTube Data API status {status_code}")


def _outcome_label(error: ProviderError) -> str:
    if isinstance(error, TransientProviderError):
        return "transient"
    if isinstance(error, PermanentProviderError):
        return "permanent"
    if isinstance(error, ProviderNotFoundError):
        return "not_found"
    return "rejected"


# ========== Normalization ==========


def parse_keywords(raw: str | None) -> tuple[str, ...] | None:
    """Split a brandingSettings keyword string into tags.

    Tags are space separated; double quotes group words into one tag.

    Example:
        >>> parse_keywords('music "live concerts" tour')
        ('music', 'live concerts', 'tour')
    """
    if raw is None:
        return None

    tags: list[str] = []
    current: list[str] = []
    in_quotes = False
    for char in raw:
        if char == '"':
            in_quotes = not in_quotes
        elif char == " " and not in_quotes:
            if current:
                tags.append("".join(current).strip())
                current = []
        elif char == "\\":
            continue
        else:
            current.append(char)
    if current:
        tags.append("".join(current).strip())

    return tuple(tag for tag in tags if tag)


def _parse_count(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def _best_thumbnail(thumbnails: Any) -> str | None:
    if not isinstance(thumbnails, dict):
        return None
    for size in ("high", "medium", "default"):
        url = (thumbnails.get(size) or {}).get("url")
        if url:
            return str(url)
    return None


def channel_record_from_item(item: dict[str, Any]) -> ChannelRecord:
    """Normalize one ``channels.list`` item."""
    snippet = item.get("snippet") or {}
    statistics = item.get("statistics") or {}
    status = item.get("status") or {}
    branding = item.get("brandingSettings") or {}
    branding_channel = branding.get("channel") or {}
    related = (item.get("contentDetails") or {}).get("relatedPlaylists") or {}

    return ChannelRecord(
        channel_id=item["id"],
        title=snippet.get("title"),
        description=snippet.get("description"),
        custom_url=snippet.get("customUrl") or None,
        published_at=_parse_datetime(snippet.get("publishedAt")),
        country=snippet.get("country") or branding_channel.get("country") or None,
        thumbnail_url=_best_thumbnail(snippet.get("thumbnails")),
        banner_url=(branding.get("image") or {}).get("bannerExternalUrl"),
        subscriber_count=_parse_count(statistics.get("subscriberCount")),
        hidden_subscriber_count=bool(statistics.get("hiddenSubscriberCount", False)),
        view_count=_parse_count(statistics.get("viewCount")),
        video_count=_parse_count(statistics.get("videoCount")),
        made_for_kids=status.get("madeForKids"),
        keywords=parse_keywords(branding_channel.get("keywords")),
        trailer_video_id=branding_channel.get("unsubscribedTrailer") or None,
        analytics_account_id=branding_channel.get("trackingAnalyticsAccountId") or None,
        uploads_playlist_id=related.get("uploads") or None,
    )


def subscription_from_item(item: dict[str, Any]) -> Subscription | None:
    """Normalize one ``subscriptions.list`` item; incomplete items yield None."""
    snippet = item.get("snippet") or {}
    channel_id = (snippet.get("resourceId") or {}).get("channelId")
    title = snippet.get("title")
    subscribed_at = _parse_datetime(snippet.get("publishedAt"))
    if not channel_id or title is None or subscribed_at is None:
        return None
    return Subscription(
        channel_id=channel_id,
        title=title,
        subscribed_at=subscribed_at,
        thumbnail_url=_best_thumbnail(snippet.get("thumbnails")),
    )


def playlist_video_from_item(item: dict[str, Any]) -> PlaylistVideo | None:
    """Normalize one ``playlistItems.list`` item; incomplete items yield None."""
    snippet = item.get("snippet") or {}
    video_id = (snippet.get("resourceId") or {}).get("videoId")
    title = snippet.get("title")
    published_at = _parse_datetime(snippet.get("publishedAt"))
    if not video_id or title is None or published_at is None:
        return None
    return PlaylistVideo(
        video_id=video_id,
        title=title,
        description=snippet.get("description") or "",
        published_at=published_at,
    )


# ========== Client ==========


class YouTubeDataAPIClient:
    """Client for the YouTube Data API v3.

    Every request sends the API key in the ``X-Goog-Api-Key`` header and is
    recorded in the provider call metrics.

    Example:
        >>> async with httpx.AsyncClient() as http:
        ...     api = YouTubeDataAPIClient(settings, client=http)
        ...     records = await api.list_channels(for_handle="Google")
    """

    def __init__(
        self,
        settings: YouTubeProviderSettings,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Data API client.

        Args:
            settings: Provider settings (API key, base URL, timeout).
            client: Optional shared httpx.AsyncClient (primarily for tests).
        """
        self.settings = settings
        self.base_url = settings.data_api_base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)
        self._owns_client = client is None

    async def _get(self, endpoint: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET ``endpoint`` and return the decoded JSON body.

        Raises:
            ProviderError: Mapped from the HTTP status or transport failure.
        """
        if self.settings.api_key is None:
            raise PermanentProviderError("YouTube Data API key is not configured")

        headers = {"X-Goog-Api-Key": self.settings.api_key.get_secret_value()}
        started = time.perf_counter()
        try:
            response = await self._client.get(
                f"{self.base_url}/{endpoint}",
                params={k: v for k, v in params.items() if v is not None},
                headers=headers,
                timeout=self.settings.timeout,
            )
        except httpx.TimeoutException as exc:
            record_provider_call(endpoint, "transient", time.perf_counter() - started)
            raise TransientProviderError(f"YouTube Data API request timed out ({endpoint})") from exc
        except httpx.TransportError as exc:
            record_provider_call(endpoint, "transient", time.perf_counter() - started)
            raise TransientProviderError(f"YouTube Data API unreachable ({endpoint})") from exc

        elapsed = time.perf_counter() - started
        if response.status_code != 200:
            try:
                body: Any = response.json()
            except ValueError:
                body = None
            error = map_error_response(response.status_code, body)
            record_provider_call(endpoint, _outcome_label(error), elapsed)
            logger.warning(
                f"YouTube Data API {endpoint} failed",
                extra={
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                    "error_type": type(error).__name__,
                },
            )
            raise error

        try:
            data = response.json()
        except ValueError as exc:
            record_provider_call(endpoint, "transient", elapsed)
            raise TransientProviderError(f"Malformed YouTube Data API response ({endpoint})") from exc

        record_provider_call(endpoint, "ok", elapsed)
        return data if isinstance(data, dict) else {}

    async def list_channels(
        self,
        *,
        ids: list[str] | None = None,
        for_handle: str | None = None,
        for_username: str | None = None,
    ) -> list[ChannelRecord]:
        """Call ``channels.list`` with exactly one filter.

        Returns:
            list[ChannelRecord]: Items in upstream order (empty if none match).
        """
        params: dict[str, Any] = {
            "part": CHANNEL_PARTS,
            "id": ",".join(ids) if ids else None,
            "forHandle": for_handle,
            "forUsername": for_username,
        }
        data = await self._get("channels", params)
        return [channel_record_from_item(item) for item in data.get("items") or [] if item.get("id")]

    async def search_channel_ids(self, query: str, max_results: int) -> list[str]:
        """Call ``search.list`` for channels and return IDs in relevance order."""
        data = await self._get(
            "search",
            {"part": "snippet", "type": "channel", "q": query, "maxResults": max_results},
        )
        ids: list[str] = []
        for item in data.get("items") or []:
            channel_id = ((item.get("id") or {}).get("channelId")) or (
                (item.get("snippet") or {}).get("channelId")
            )
            if channel_id and channel_id not in ids:
                ids.append(channel_id)
        return ids

    async def list_subscriptions(
        self,
        channel_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> SubscriptionPage:
        """Call ``subscriptions.list`` ordered alphabetically."""
        data = await self._get(
            "subscriptions",
            {
                "channelId": channel_id,
                "part": "snippet",
                "order": "alphabetical",
                "maxResults": max_results,
                "pageToken": page_token,
            },
        )
        items = [subscription_from_item(item) for item in data.get("items") or []]
        return SubscriptionPage(
            items=[item for item in items if item is not None],
            next_page_token=data.get("nextPageToken"),
        )

    async def list_playlist_items(
        self,
        playlist_id: str,
        page_token: str | None = None,
        max_results: int = 50,
    ) -> PlaylistPage:
        """Call ``playlistItems.list``."""
        data = await self._get(
            "playlistItems",
            {
                "playlistId": playlist_id,
                "part": "snippet",
                "maxResults": max_results,
                "pageToken": page_token,
            },
        )
        items = [playlist_video_from_item(item) for item in data.get("items") or []]
        return PlaylistPage(
            items=[item for item in items if item is not None],
            next_page_token=data.get("nextPageToken"),
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP client if owned."""
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "CHANNEL_PARTS",
    "YouTubeDataAPIClient",
    "channel_record_from_item",
    "map_error_response",
    "parse_keywords",
    "playlist_video_from_item",
    "subscription_from_item",
]
