"""Metadata aggregator.

Builds the ChannelMetadata record for a resolved channel. The channel page
facts (blocked countries, visibility, verification) and the subscriptions page
are fetched concurrently; failure of either is reported on the record instead
of failing the resolution.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from packages.common.config import ResolutionSettings
from packages.common.resilience import retry_async
from packages.core.errors import (
    AccountClosedError,
    AccountTerminatedError,
    ProviderError,
    SubscriptionsPrivateError,
    TransientProviderError,
)
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.core.resolution.cancellation import run_cancellable
from packages.schemas.youtube.channel import (
    ENRICHMENT_FAILURE_REASONS,
    CanonicalChannel,
    ChannelMetadata,
    ChannelStatistics,
    Unavailable,
    UnavailableReason,
    unavailable,
)
from packages.schemas.youtube.provider import (
    ChannelRecord,
    ProviderResult,
    RegionRestrictions,
    SubscriptionPage,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NOT_PROVIDED = unavailable(UnavailableReason.NOT_PROVIDED)

_REASON_FOR_ERROR: tuple[tuple[type[ProviderError], UnavailableReason], ...] = (
    (SubscriptionsPrivateError, UnavailableReason.PRIVATE),
    (AccountClosedError, UnavailableReason.ACCOUNT_CLOSED),
    (AccountTerminatedError, UnavailableReason.ACCOUNT_TERMINATED),
)


def _or_missing(value: T | None) -> T | Unavailable:
    return NOT_PROVIDED if value is None else value


def uploads_playlist_for(channel_id: str) -> str:
    """Derive the uploads playlist ID from a channel ID (UCxxxx -> UUxxxx)."""
    return "UU" + channel_id[2:]


class MetadataAggregator:
    """Aggregate a resolved channel's record with secondary provider calls."""

    def __init__(
        self,
        provider: ChannelDataProvider,
        settings: ResolutionSettings | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or ResolutionSettings()

    async def aggregate(
        self,
        channel: CanonicalChannel,
        raw: ProviderResult,
        cancel_event: asyncio.Event | None = None,
    ) -> ChannelMetadata:
        """Build the metadata record for ``channel``.

        Args:
            channel: Canonical identity from the redirect detector.
            raw: Provider result the identity was accepted from.
            cancel_event: Set by the caller to abandon the enrichment calls.

        Returns:
            ChannelMetadata: Never fails because of an enrichment error; failed
            fields are ``Unavailable`` and explained in ``diagnostics``.
        """
        record = raw.match_for(channel.channel_id) or raw.matches[0]
        channel_id = channel.channel_id
        handle = record.handle

        restrictions, subscriptions, url_redirect = await run_cancellable(
            asyncio.gather(
                self._enrich(
                    "blocked countries",
                    lambda: self.provider.fetch_region_restrictions(channel_id),
                ),
                self._enrich(
                    "subscriptions",
                    lambda: self.provider.fetch_subscriptions(
                        channel_id, max_results=self.settings.subscriptions_page_size
                    ),
                ),
                self._url_redirect(handle),
            ),
            cancel_event,
        )

        diagnostics: list[str] = []
        for label, outcome in (
            ("blocked countries", restrictions),
            ("subscriptions", subscriptions),
            ("url redirect", url_redirect),
        ):
            if isinstance(outcome, Unavailable) and outcome.reason in ENRICHMENT_FAILURE_REASONS:
                diagnostics.append(f"{label} unavailable: {outcome.reason.value}")
        if not record.uploads_playlist_id:
            diagnostics.append("uploads playlist derived from channel ID")
        if channel.provenance.ambiguous:
            diagnostics.append(
                f"ambiguous match: {len(channel.provenance.alternates)} other channel(s) matched"
            )

        metadata = self._build(
            channel, record, restrictions, subscriptions, url_redirect, diagnostics
        )
        logger.info(
            "Aggregated channel metadata",
            extra={"channel_id": channel_id, "partial": metadata.partial},
        )
        return metadata

    async def _url_redirect(self, handle: str | None) -> str | None | Unavailable:
        if handle is None:
            return NOT_PROVIDED
        return await self._enrich(
            "url redirect", lambda: self.provider.fetch_url_redirect(handle)
        )

    async def _enrich(
        self, label: str, operation: Callable[[], Awaitable[T]]
    ) -> T | Unavailable:
        try:
            return await retry_async(
                operation,
                max_attempts=self.settings.max_attempts,
                base_delay=self.settings.base_delay,
                max_delay=self.settings.max_delay,
                retry_on=(TransientProviderError,),
            )
        except ProviderError as exc:
            reason = next(
                (r for error_type, r in _REASON_FOR_ERROR if isinstance(exc, error_type)),
                UnavailableReason.FETCH_FAILED,
            )
            logger.warning(
                f"Could not fetch {label}",
                extra={"error": str(exc), "reason": reason.value},
            )
            return unavailable(reason)

    @staticmethod
    def _build(
        channel: CanonicalChannel,
        record: ChannelRecord,
        restrictions: RegionRestrictions | Unavailable,
        subscriptions: SubscriptionPage | Unavailable,
        url_redirect: str | None | Unavailable,
        diagnostics: list[str],
    ) -> ChannelMetadata:
        provenance = channel.provenance

        if record.hidden_subscriber_count:
            subscriber_count: int | Unavailable = unavailable(UnavailableReason.HIDDEN_BY_OWNER)
        else:
            subscriber_count = _or_missing(record.subscriber_count)

        handle: str | None = record.handle
        if isinstance(restrictions, Unavailable):
            blocked = no_index = verification = conditional_redirect = restrictions
        else:
            handle = handle or restrictions.owner_handle
            blocked = _or_missing(
                list(restrictions.blocked_countries)
                if restrictions.blocked_countries is not None
                else None
            )
            no_index = _or_missing(restrictions.no_index)
            verification = _or_missing(restrictions.verification)
            conditional_redirect = restrictions.conditional_redirect

        return ChannelMetadata(
            channel_id=channel.channel_id,
            title=_or_missing(record.title),
            description=_or_missing(record.description),
            handle=_or_missing(handle),
            custom_url=_or_missing(record.custom_url),
            published_at=_or_missing(record.published_at),
            country=_or_missing(record.country),
            thumbnail_url=_or_missing(record.thumbnail_url),
            banner_url=_or_missing(record.banner_url),
            keywords=_or_missing(list(record.keywords) if record.keywords is not None else None),
            trailer_video_id=_or_missing(record.trailer_video_id),
            analytics_account_id=_or_missing(record.analytics_account_id),
            made_for_kids=_or_missing(record.made_for_kids),
            statistics=ChannelStatistics(
                subscriber_count=subscriber_count,
                video_count=_or_missing(record.video_count),
                view_count=_or_missing(record.view_count),
            ),
            uploads_playlist_id=record.uploads_playlist_id
            or uploads_playlist_for(channel.channel_id),
            blocked_countries=blocked,
            no_index=no_index,
            verification=verification,
            conditional_redirect=conditional_redirect,
            url_redirect=url_redirect,
            subscriptions=subscriptions,
            redirect=provenance.redirect,
            redirect_target=provenance.redirect_target,
            ambiguous=provenance.ambiguous,
            alternates=list(provenance.alternates),
            provenance=provenance,
            diagnostics=diagnostics,
        )


__all__ = ["MetadataAggregator", "uploads_playlist_for"]
