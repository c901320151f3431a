"""Resolution pipeline.

Drives classified candidates against the channel data provider in priority
order and stops at the first candidate that matches.

Outcomes:
- first match wins; several matches keep the top-ranked one and flag ambiguity
- a permanent provider failure aborts the whole request
- transient failures are retried locally, then the next candidate is tried
- exhausting the candidates yields NotFound, or AllCandidatesFailed when every
  attempted candidate failed transiently
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum

from packages.common.config import ResolutionSettings
from packages.common.resilience import retry_async
from packages.core.errors import (
    AllCandidatesFailedError,
    ChannelNotFoundError,
    PermanentProviderError,
    PermanentProviderFailure,
    ProviderError,
    TransientProviderError,
)
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.core.resolution.cancellation import run_cancellable
from packages.core.resolution.classifier import classify, classify_as
from packages.core.resolution.redirect_detector import RedirectDetector
from packages.schemas.youtube.channel import CanonicalChannel
from packages.schemas.youtube.provider import ProviderResult
from packages.schemas.youtube.reference import (
    ProviderOperation,
    ReferenceKind,
    ResolutionCandidate,
)

logger = logging.getLogger(__name__)


class CandidateStatus(str, Enum):
    """What happened when a candidate was tried."""

    MATCHED = "matched"
    EMPTY = "empty"
    TRANSIENT_FAILURE = "transient_failure"


@dataclass(slots=True, frozen=True)
class CandidateOutcome:
    """Result of trying one candidate."""

    candidate: ResolutionCandidate
    status: CandidateStatus
    detail: str | None = None


@dataclass(slots=True)
class Resolution:
    """A successful resolution with the provider result it was built from."""

    channel: CanonicalChannel
    result: ProviderResult
    candidate: ResolutionCandidate
    outcomes: list[CandidateOutcome] = field(default_factory=list)


class ResolutionPipeline:
    """Resolve a raw channel reference to a canonical channel."""

    def __init__(
        self,
        provider: ChannelDataProvider,
        settings: ResolutionSettings | None = None,
        detector: RedirectDetector | None = None,
    ) -> None:
        """Initialize with a provider and retry settings.

        Args:
            provider: Channel data provider implementation.
            settings: Retry tuning; defaults to ``ResolutionSettings()``.
            detector: Redirect detector; defaults to ``RedirectDetector()``.
        """
        self.provider = provider
        self.settings = settings or ResolutionSettings()
        self.detector = detector or RedirectDetector()

    async def resolve(
        self,
        raw: str,
        kind: ReferenceKind | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> CanonicalChannel:
        """Resolve ``raw`` and return only the canonical channel."""
        resolution = await self.resolve_with_result(raw, kind=kind, cancel_event=cancel_event)
        return resolution.channel

    async def resolve_with_result(
        self,
        raw: str,
        kind: ReferenceKind | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Resolution:
        """Resolve ``raw`` and keep the accepted provider result.

        Args:
            raw: Raw channel reference.
            kind: Force a single candidate of this kind instead of classifying.
            cancel_event: Set by the caller to abandon the resolution.

        Returns:
            Resolution: Canonical channel, accepted result and per-candidate outcomes.

        Raises:
            InvalidInputError: Raw input is empty or unparseable (no provider call made).
            PermanentProviderFailure: Provider rejected the request for good.
            AllCandidatesFailedError: Every attempted candidate failed transiently.
            ChannelNotFoundError: Candidates exhausted without a match.
            ResolutionCancelledError: ``cancel_event`` fired.
        """
        candidates = classify_as(raw, kind) if kind is not None else classify(raw)
        outcomes: list[CandidateOutcome] = []

        for candidate in candidates:
            try:
                result = await run_cancellable(self._lookup(candidate), cancel_event)
            except PermanentProviderError as exc:
                logger.error(
                    "Permanent provider failure, aborting resolution",
                    extra={"raw": raw, "kind": candidate.kind.value, "error": str(exc)},
                )
                raise PermanentProviderFailure(str(exc)) from exc
            except TransientProviderError as exc:
                logger.warning(
                    "Candidate failed after retries",
                    extra={"raw": raw, "kind": candidate.kind.value, "error": str(exc)},
                )
                outcomes.append(
                    CandidateOutcome(candidate, CandidateStatus.TRANSIENT_FAILURE, str(exc))
                )
                continue
            except ProviderError as exc:
                # Not-found style errors on a lookup count as zero matches
                logger.debug(
                    "Candidate lookup reported no channel",
                    extra={"raw": raw, "kind": candidate.kind.value, "error": str(exc)},
                )
                outcomes.append(CandidateOutcome(candidate, CandidateStatus.EMPTY, str(exc)))
                continue

            if result.is_empty:
                outcomes.append(CandidateOutcome(candidate, CandidateStatus.EMPTY))
                continue

            outcomes.append(CandidateOutcome(candidate, CandidateStatus.MATCHED))
            channel = self.detector.detect(candidate, result)
            logger.info(
                "Resolved channel reference",
                extra={
                    "raw": raw,
                    "kind": candidate.kind.value,
                    "channel_id": channel.channel_id,
                    "redirect": channel.provenance.redirect,
                    "ambiguous": channel.provenance.ambiguous,
                },
            )
            return Resolution(
                channel=channel, result=result, candidate=candidate, outcomes=outcomes
            )

        raise self._exhausted(raw, outcomes)

    async def _lookup(self, candidate: ResolutionCandidate) -> ProviderResult:
        call = self._operation(candidate.operation)
        return await retry_async(
            lambda: call(candidate.query),
            max_attempts=self.settings.max_attempts,
            base_delay=self.settings.base_delay,
            max_delay=self.settings.max_delay,
            retry_on=(TransientProviderError,),
        )

    def _operation(self, operation: ProviderOperation) -> Callable[[str], Awaitable[ProviderResult]]:
        operations: dict[ProviderOperation, Callable[[str], Awaitable[ProviderResult]]] = {
            ProviderOperation.LOOKUP_BY_ID: self.provider.lookup_by_id,
            ProviderOperation.LOOKUP_BY_HANDLE: self.provider.lookup_by_handle,
            ProviderOperation.LOOKUP_BY_USERNAME: self.provider.lookup_by_username,
            ProviderOperation.LOOKUP_BY_CUSTOM_URL: self.provider.lookup_by_custom_url,
            ProviderOperation.SEARCH_BY_TEXT: self.provider.search_by_text,
        }
        return operations[operation]

    @staticmethod
    def _exhausted(raw: str, outcomes: list[CandidateOutcome]) -> Exception:
        failed = [o.candidate for o in outcomes if o.status is CandidateStatus.TRANSIENT_FAILURE]

        if outcomes and len(failed) == len(outcomes):
            kinds = ", ".join(c.kind.value for c in failed)
            return AllCandidatesFailedError(
                f"Could not check any candidate for '{raw.strip()}' ({kinds}); "
                "the upstream service failed, retry later",
                attempted=failed,
            )

        message = f"No channel found for '{raw.strip()}'"
        if failed:
            kinds = ", ".join(c.kind.value for c in failed)
            message += f" (unchecked due to upstream errors: {kinds})"
        return ChannelNotFoundError(message, unchecked=failed)


__all__ = ["CandidateOutcome", "CandidateStatus", "Resolution", "ResolutionPipeline"]
