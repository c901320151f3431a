"""Resolved channel schemas.

CanonicalChannel is the identity produced by resolution; ChannelMetadata is the
enriched record returned to callers. Any field the upstream did not provide,
hid, or failed to deliver is an explicit ``Unavailable`` marker, so "zero
subscribers" and "subscriber count hidden" never look alike.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field

from packages.schemas.youtube.provider import SubscriptionPage, VerificationStatus
from packages.schemas.youtube.reference import ReferenceKind


class UnavailableReason(str, Enum):
    """Why a metadata field carries no value."""

    HIDDEN_BY_OWNER = "hidden_by_owner"
    NOT_PROVIDED = "not_provided"
    FETCH_FAILED = "fetch_failed"
    PRIVATE = "private"
    ACCOUNT_CLOSED = "account_closed"
    ACCOUNT_TERMINATED = "account_terminated"


# Reasons caused by a failed enrichment call rather than by the channel itself
ENRICHMENT_FAILURE_REASONS = frozenset(
    {
        UnavailableReason.FETCH_FAILED,
        UnavailableReason.PRIVATE,
        UnavailableReason.ACCOUNT_CLOSED,
        UnavailableReason.ACCOUNT_TERMINATED,
    }
)


class Unavailable(BaseModel):
    """Explicit marker for a field without a value."""

    unavailable: Literal[True] = True
    reason: UnavailableReason

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={"examples": [{"unavailable": True, "reason": "hidden_by_owner"}]},
    )


def unavailable(reason: UnavailableReason) -> Unavailable:
    """Shorthand constructor used by the aggregator."""
    return Unavailable(reason=reason)


class Provenance(BaseModel):
    """How a canonical channel was found."""

    model_config = ConfigDict(frozen=True)

    kind: ReferenceKind = Field(..., description="Reference kind of the matching candidate")
    priority: int = Field(..., ge=0, description="Priority of the matching candidate")
    query: str = Field(..., description="Normalized query sent upstream")
    raw: str = Field(..., description="Original input string")
    redirect: bool = Field(
        False,
        description="Whether the input is an outdated alias of the resolved channel",
    )
    redirect_target: str | None = Field(
        None,
        description="Current canonical handle, custom URL, or channel ID",
    )
    ambiguous: bool = Field(False, description="Whether the provider returned several matches")
    alternates: tuple[str, ...] = Field(
        (),
        description="Channel IDs of the lower-ranked matches of an ambiguous query",
    )


class CanonicalChannel(BaseModel):
    """Resolved channel identity."""

    model_config = ConfigDict(frozen=True)

    channel_id: str = Field(..., min_length=1, description="YouTube channel ID")
    title: str | None = Field(None, description="Display title at resolution time")
    provenance: Provenance

    @property
    def redirect(self) -> bool:
        return self.provenance.redirect


class ChannelStatistics(BaseModel):
    """Public counters of a channel."""

    subscriber_count: int | Unavailable
    video_count: int | Unavailable
    view_count: int | Unavailable


class ChannelMetadata(BaseModel):
    """Aggregated channel record returned by a successful resolution.

    ``partial`` is true when at least one enrichment call failed; the matching
    note is in ``diagnostics``.
    """

    # Identity
    channel_id: str = Field(..., min_length=1, description="YouTube channel ID")
    title: str | Unavailable
    description: str | Unavailable
    handle: str | Unavailable
    custom_url: str | Unavailable
    published_at: datetime | Unavailable
    country: str | Unavailable

    # Branding
    thumbnail_url: str | Unavailable
    banner_url: str | Unavailable
    keywords: list[str] | Unavailable
    trailer_video_id: str | Unavailable
    analytics_account_id: str | Unavailable
    made_for_kids: bool | Unavailable

    statistics: ChannelStatistics
    uploads_playlist_id: str = Field(..., description="Playlist listing the channel's uploads")

    # Channel page enrichment
    blocked_countries: list[str] | Unavailable
    no_index: bool | Unavailable
    verification: VerificationStatus | Unavailable
    conditional_redirect: str | None | Unavailable = Field(
        None,
        description="Channel ID the channel page navigates to, if any",
    )
    url_redirect: str | None | Unavailable = Field(
        None,
        description="URL the channel's handle page forwards to, if any",
    )

    # Subscriptions enrichment
    subscriptions: Unavailable | SubscriptionPage

    # Resolution outcome
    redirect: bool = False
    redirect_target: str | None = None
    ambiguous: bool = False
    alternates: list[str] = Field(default_factory=list)
    provenance: Provenance
    diagnostics: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def partial(self) -> bool:
        """True when an enrichment field could not be fetched."""
        enrichment = (
            self.blocked_countries,
            self.no_index,
            self.verification,
            self.conditional_redirect,
            self.url_redirect,
            self.subscriptions,
        )
        return any(
            isinstance(value, Unavailable) and value.reason in ENRICHMENT_FAILURE_REASONS
            for value in enrichment
        )


__all__ = [
    "ENRICHMENT_FAILURE_REASONS",
    "CanonicalChannel",
    "ChannelMetadata",
    "ChannelStatistics",
    "Provenance",
    "Unavailable",
    "UnavailableReason",
    "unavailable",
]
