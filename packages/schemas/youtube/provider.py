"""Normalized provider response schemas.

Each upstream endpoint has its own JSON shape; adapters normalize them into
these models before the resolution core sees them.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ResponseShape(str, Enum):
    """Upstream endpoint a ProviderResult was normalized from."""

    CHANNELS_LIST = "channels_list"
    SEARCH = "search"
    RESOLVE_URL = "resolve_url"


class VerificationStatus(str, Enum):
    """Badge shown next to a channel's name."""

    NONE = "none"
    VERIFIED = "verified"
    ARTIST = "artist"


class ChannelRecord(BaseModel):
    """One upstream channel item, normalized.

    Fields the upstream omitted stay ``None``; the aggregator decides how each
    absence is reported.
    """

    model_config = ConfigDict(frozen=True)

    channel_id: str = Field(..., min_length=1, description="Channel ID (UC...)")
    title: str | None = None
    description: str | None = None
    custom_url: str | None = Field(
        default=None,
        description="Current canonical custom URL as returned upstream (e.g. '@google')",
    )
    published_at: datetime | None = None
    country: str | None = None
    thumbnail_url: str | None = None
    banner_url: str | None = None
    subscriber_count: int | None = Field(default=None, ge=0)
    hidden_subscriber_count: bool = False
    view_count: int | None = Field(default=None, ge=0)
    video_count: int | None = Field(default=None, ge=0)
    made_for_kids: bool | None = None
    keywords: tuple[str, ...] | None = None
    trailer_video_id: str | None = None
    analytics_account_id: str | None = None
    uploads_playlist_id: str | None = None

    @property
    def handle(self) -> str | None:
        """Handle without the '@' marker, if the custom URL is a handle."""
        if self.custom_url and self.custom_url.startswith("@"):
            return self.custom_url[1:]
        return None


class ProviderResult(BaseModel):
    """Matches returned by one provider query, in upstream relevance order."""

    model_config = ConfigDict(frozen=True)

    shape: ResponseShape
    query: str
    matches: tuple[ChannelRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.matches

    def match_for(self, channel_id: str) -> ChannelRecord | None:
        """Return the match with the given channel ID, if present."""
        for record in self.matches:
            if record.channel_id == channel_id:
                return record
        return None


class RegionRestrictions(BaseModel):
    """Country restrictions and page-level visibility facts for a channel."""

    model_config = ConfigDict(frozen=True)

    blocked_countries: tuple[str, ...] | None = Field(
        default=None,
        description="ISO 3166-1 alpha-2 codes the channel is unavailable in (None if unknown)",
    )
    no_index: bool | None = None
    verification: VerificationStatus | None = None
    conditional_redirect: str | None = Field(
        default=None,
        description="Channel ID the channel page navigates to instead of itself",
    )
    owner_handle: str | None = None


class Subscription(BaseModel):
    """A public subscription of a channel."""

    channel_id: str
    title: str
    subscribed_at: datetime
    thumbnail_url: str | None = None


class SubscriptionPage(BaseModel):
    """One page of a channel's public subscriptions."""

    items: list[Subscription] = Field(default_factory=list)
    next_page_token: str | None = None


class PlaylistVideo(BaseModel):
    """A video listed in a playlist (usually the uploads playlist)."""

    video_id: str
    title: str
    description: str = ""
    published_at: datetime


class PlaylistPage(BaseModel):
    """One page of playlist items."""

    items: list[PlaylistVideo] = Field(default_factory=list)
    next_page_token: str | None = None


__all__ = [
    "ChannelRecord",
    "PlaylistPage",
    "PlaylistVideo",
    "ProviderResult",
    "RegionRestrictions",
    "ResponseShape",
    "Subscription",
    "SubscriptionPage",
    "VerificationStatus",
]
