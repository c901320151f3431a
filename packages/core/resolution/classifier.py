"""Reference classifier.

Turns a raw channel reference (URL, ``@handle``, username, legacy custom URL
name, display name, or channel ID) into an ordered list of resolution
candidates. Pure: performs no I/O.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final
from urllib.parse import unquote

from packages.core.errors import InvalidInputError
from packages.schemas.youtube.reference import (
    ChannelReference,
    ReferenceKind,
    ResolutionCandidate,
)

logger = logging.getLogger(__name__)

MAX_INPUT_LENGTH: Final[int] = 256

CHANNEL_ID_PATTERN: Final[re.Pattern[str]] = re.compile(r"^UC[A-Za-z0-9_-]{22}$")
HANDLE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9._-]{3,30}$")

_URL_PREFIX: Final[re.Pattern[str]] = re.compile(
    r"^(?:https?://)?(?:(?:www|m)\.)?youtube\.com(?:/|$)",
    re.IGNORECASE,
)

# Path marker -> marker name, checked against the lowercased path
_PATH_MARKERS: Final[tuple[tuple[str, str], ...]] = (
    ("channel/", "channel"),
    ("user/", "user"),
    ("c/", "c"),
    ("@", "@"),
)

_ORDER_BY_MARKER: Final[dict[str, tuple[ReferenceKind, ...]]] = {
    "@": (ReferenceKind.HANDLE, ReferenceKind.USERNAME, ReferenceKind.CUSTOM_URL),
    "user": (ReferenceKind.USERNAME, ReferenceKind.CUSTOM_URL, ReferenceKind.VANITY),
    "c": (ReferenceKind.CUSTOM_URL, ReferenceKind.USERNAME, ReferenceKind.VANITY),
}

_HANDLE_LIKE_ORDER: Final[tuple[ReferenceKind, ...]] = (
    ReferenceKind.HANDLE,
    ReferenceKind.USERNAME,
    ReferenceKind.CUSTOM_URL,
)

_FALLBACK_ORDER: Final[tuple[ReferenceKind, ...]] = (
    ReferenceKind.CUSTOM_URL,
    ReferenceKind.USERNAME,
    ReferenceKind.VANITY,
)


@dataclass(frozen=True, slots=True)
class NormalizedInput:
    """Raw input reduced to a lookup token plus the path marker it carried."""

    raw: str
    value: str
    marker: str | None


def is_channel_id(value: str) -> bool:
    """Return True if value has the shape of a channel ID (UC + 22 chars)."""
    return bool(CHANNEL_ID_PATTERN.match(value))


def is_handle_like(value: str) -> bool:
    """Return True if value satisfies the handle character rules."""
    return bool(HANDLE_PATTERN.match(value))


def normalize(raw: str) -> NormalizedInput:
    """Strip URL prefix, path markers, trailing segments and query strings.

    Raises:
        InvalidInputError: If the input is empty, too long, or empty after stripping.
    """
    text = (raw or "").strip()
    if not text:
        raise InvalidInputError("Channel reference is empty")
    if len(text) > MAX_INPUT_LENGTH:
        raise InvalidInputError(
            f"Channel reference exceeds {MAX_INPUT_LENGTH} characters"
        )

    path = text
    is_url = False
    prefix = _URL_PREFIX.match(path)
    if prefix:
        is_url = True
        path = unquote(path[prefix.end() :])

    marker: str | None = None
    lowered = path.lower()
    for prefix_text, name in _PATH_MARKERS:
        if lowered.startswith(prefix_text):
            marker = name
            path = path[len(prefix_text) :]
            break

    if is_url or marker is not None:
        # "/@name/videos?si=..." -> "name"
        path = re.split(r"[?#]", path, maxsplit=1)[0]
        path = path.strip("/").split("/", 1)[0]

    value = path.strip()
    if not value:
        raise InvalidInputError(f"Channel reference '{text}' contains no channel name or ID")

    return NormalizedInput(raw=raw, value=value, marker=marker)


def _build(normalized: NormalizedInput, kinds: tuple[ReferenceKind, ...]) -> list[ResolutionCandidate]:
    return [
        ResolutionCandidate(
            reference=ChannelReference(kind=kind, value=normalized.value, raw=normalized.raw),
            priority=priority,
        )
        for priority, kind in enumerate(kinds)
    ]


def classify(raw: str) -> list[ResolutionCandidate]:
    """Classify a raw reference into candidates, most specific first.

    Args:
        raw: User input such as ``"@Google"``, ``"UC_x5XG1OV2P6uZZ5FSM9Ttw"``,
            ``"https://www.youtube.com/c/GoogleDevelopers"`` or ``"Google"``.

    Returns:
        list[ResolutionCandidate]: Non-empty, ordered by ascending priority.

    Raises:
        InvalidInputError: If the input is empty or cannot be reduced to a token.

    Example:
        >>> [c.kind.value for c in classify("@Google")]
        ['handle', 'username', 'custom_url']
    """
    normalized = normalize(raw)

    if is_channel_id(normalized.value):
        kinds: tuple[ReferenceKind, ...] = (ReferenceKind.CHANNEL_ID,)
    elif normalized.marker in _ORDER_BY_MARKER:
        kinds = _ORDER_BY_MARKER[normalized.marker]
    elif is_handle_like(normalized.value):
        kinds = _HANDLE_LIKE_ORDER
    else:
        kinds = _FALLBACK_ORDER

    candidates = _build(normalized, kinds)
    logger.debug(
        "Classified channel reference",
        extra={
            "raw": raw,
            "value": normalized.value,
            "marker": normalized.marker,
            "candidates": [c.kind.value for c in candidates],
        },
    )
    return candidates


def classify_as(raw: str, kind: ReferenceKind) -> list[ResolutionCandidate]:
    """Classify a raw reference as one explicit kind.

    Used when the caller already knows what the input is (typed lookups).

    Raises:
        InvalidInputError: If the input is empty, or ``kind`` is CHANNEL_ID and
            the token does not have a channel ID shape.
    """
    normalized = normalize(raw)
    if kind is ReferenceKind.CHANNEL_ID and not is_channel_id(normalized.value):
        raise InvalidInputError(f"'{normalized.value}' is not a valid channel ID")
    return _build(normalized, (kind,))


__all__ = [
    "CHANNEL_ID_PATTERN",
    "HANDLE_PATTERN",
    "MAX_INPUT_LENGTH",
    "NormalizedInput",
    "classify",
    "classify_as",
    "is_channel_id",
    "is_handle_like",
    "normalize",
]
