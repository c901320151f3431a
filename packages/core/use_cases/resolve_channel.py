"""ResolveChannelUseCase - Resolve a channel reference into enriched metadata.

Glues the resolution engine together:
1. Classify and resolve the raw reference (ResolutionPipeline)
2. Aggregate metadata for the canonical channel (MetadataAggregator)
3. Record outcome metrics

A channel ID that cannot be found is probed once more through the
subscriptions endpoint, which distinguishes closed from terminated accounts.
"""

import asyncio
import logging

from packages.common.config import ResolutionSettings
from packages.common.metrics import record_match, record_resolution
from packages.core.errors import (
    AccountClosedError,
    AccountTerminatedError,
    ChannelNotFoundError,
    ChannelResolutionError,
    ProviderError,
)
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.core.resolution.aggregator import MetadataAggregator
from packages.core.resolution.classifier import is_channel_id, normalize
from packages.core.resolution.pipeline import ResolutionPipeline
from packages.schemas.youtube.channel import ChannelMetadata
from packages.schemas.youtube.reference import ReferenceKind

logger = logging.getLogger(__name__)

ACCOUNT_CLOSED_MESSAGE = "This channel has been deleted"
ACCOUNT_TERMINATED_MESSAGE = "This channel has been terminated"


class ResolveChannelUseCase:
    """Use case for resolving a raw channel reference.

    Resolution errors propagate to the caller as ChannelResolutionError
    subclasses; enrichment failures only mark fields unavailable.
    """

    def __init__(
        self,
        provider: ChannelDataProvider,
        settings: ResolutionSettings | None = None,
    ) -> None:
        """Initialize ResolveChannelUseCase with dependencies.

        Args:
            provider: Channel data provider implementation.
            settings: Retry and page size tuning.
        """
        self.provider = provider
        self.settings = settings or ResolutionSettings()
        self.pipeline = ResolutionPipeline(provider, self.settings)
        self.aggregator = MetadataAggregator(provider, self.settings)

        logger.info("Initialized ResolveChannelUseCase")

    async def execute(
        self,
        raw: str,
        kind: ReferenceKind | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ChannelMetadata:
        """Resolve ``raw`` into channel metadata.

        Args:
            raw: Channel reference (URL, @handle, username, name or channel ID).
            kind: Treat the input as exactly this kind instead of classifying it.
            cancel_event: Set by the caller to abandon the request.

        Returns:
            ChannelMetadata: Canonical identity plus enrichment.

        Raises:
            ChannelResolutionError: One of invalid_input, not_found,
                all_candidates_failed, permanent_provider_failure or cancelled.
        """
        logger.info("Resolving channel reference", extra={"raw": raw, "kind": kind})

        try:
            try:
                resolution = await self.pipeline.resolve_with_result(
                    raw, kind=kind, cancel_event=cancel_event
                )
            except ChannelNotFoundError as exc:
                refined = await self._refine_not_found(raw, exc)
                if refined is exc:
                    raise
                raise refined from exc

            metadata = await self.aggregator.aggregate(
                resolution.channel, resolution.result, cancel_event=cancel_event
            )
        except ChannelResolutionError as exc:
            record_resolution(exc.kind)
            logger.info(
                "Channel resolution failed",
                extra={"raw": raw, "error_kind": exc.kind, "error": exc.message},
            )
            raise

        record_resolution("resolved")
        record_match(resolution.candidate.kind.value, metadata.redirect, metadata.ambiguous)
        return metadata

    async def _refine_not_found(
        self, raw: str, exc: ChannelNotFoundError
    ) -> ChannelNotFoundError:
        """Probe a missing channel ID for a closed or terminated account."""
        value = normalize(raw).value
        if not is_channel_id(value) or exc.unchecked:
            return exc

        try:
            await self.provider.fetch_subscriptions(value, max_results=1)
        except AccountClosedError:
            return ChannelNotFoundError(ACCOUNT_CLOSED_MESSAGE, account_status="closed")
        except AccountTerminatedError:
            return ChannelNotFoundError(ACCOUNT_TERMINATED_MESSAGE, account_status="terminated")
        except ProviderError as probe_error:
            logger.debug(
                "Account status probe inconclusive",
                extra={"channel_id": value, "error": str(probe_error)},
            )
        return exc


__all__ = ["ACCOUNT_CLOSED_MESSAGE", "ACCOUNT_TERMINATED_MESSAGE", "ResolveChannelUseCase"]
