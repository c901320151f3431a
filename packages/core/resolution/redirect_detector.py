"""Redirect/alias detection.

Decides whether the reference a channel was found under is an outdated alias
of that channel (renamed handle, retired custom URL, merged channel ID).
"""

from __future__ import annotations

import logging

from packages.schemas.youtube.channel import CanonicalChannel, Provenance
from packages.schemas.youtube.provider import ChannelRecord, ProviderResult
from packages.schemas.youtube.reference import ReferenceKind, ResolutionCandidate

logger = logging.getLogger(__name__)


def _fold(value: str) -> str:
    return value.strip().lstrip("@").casefold()


class RedirectDetector:
    """Build the canonical identity for an accepted provider result.

    The top-ranked match is authoritative. Detection never fails: a match that
    cannot be compared is reported as not redirected.
    """

    def detect(self, candidate: ResolutionCandidate, result: ProviderResult) -> CanonicalChannel:
        """Return the canonical channel for the top match of ``result``.

        Raises:
            ValueError: If ``result`` has no matches.
        """
        if result.is_empty:
            raise ValueError("Cannot detect redirect on an empty provider result")

        top = result.matches[0]
        redirect, target = self._compare(candidate, top)
        alternates = tuple(record.channel_id for record in result.matches[1:])

        if redirect:
            logger.info(
                "Reference is an alias of the resolved channel",
                extra={
                    "kind": candidate.kind.value,
                    "query": candidate.query,
                    "channel_id": top.channel_id,
                    "redirect_target": target,
                },
            )

        return CanonicalChannel(
            channel_id=top.channel_id,
            title=top.title,
            provenance=Provenance(
                kind=candidate.kind,
                priority=candidate.priority,
                query=candidate.query,
                raw=candidate.reference.raw,
                redirect=redirect,
                redirect_target=target,
                ambiguous=bool(alternates),
                alternates=alternates,
            ),
        )

    @staticmethod
    def _compare(candidate: ResolutionCandidate, top: ChannelRecord) -> tuple[bool, str | None]:
        if candidate.kind is ReferenceKind.CHANNEL_ID:
            if top.channel_id != candidate.query:
                return True, top.channel_id
            return False, None

        canonical = top.custom_url
        if not canonical:
            return False, None
        if _fold(candidate.query) != _fold(canonical):
            return True, canonical
        return False, None


__all__ = ["RedirectDetector"]
