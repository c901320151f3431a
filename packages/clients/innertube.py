"""Async client for YouTube's innertube web API.

Two endpoints are used:
- ``navigation/resolve_url`` turns a youtube.com URL (e.g. a legacy ``/c/``
  custom URL) into a browse ID or a canonical URL
- ``browse`` returns the channel page, from which blocked countries, the
  verification badge, the noindex flag, a conditional redirect and the owner
  handle are read
"""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Final

import httpx

from packages.common.config import YouTubeProviderSettings
from packages.common.metrics import record_provider_call
from packages.core.errors import ProviderNotFoundError, TransientProviderError
from packages.schemas.youtube.provider import RegionRestrictions, VerificationStatus

logger = logging.getLogger(__name__)

# ISO 3166-1 alpha-2 codes a channel page can list as available
ALL_COUNTRIES: Final[frozenset[str]] = frozenset(
    """
    AD AE AF AG AI AL AM AO AQ AR AS AT AU AW AX AZ BA BB BD BE BF BG BH BI
    BJ BL BM BN BO BQ BR BS BT BV BW BY BZ CA CC CD CF CG CH CI CK CL CM CN
    CO CR CU CV CW CX CY CZ DE DJ DK DM DO DZ EC EE EG EH ER ES ET FI FJ FK
    FM FO FR GA GB GD GE GF GG GH GI GL GM GN GP GQ GR GS GT GU GW GY HK HM
    HN HR HT HU ID IE IL IM IN IO IQ IR IS IT JE JM JO JP KE KG KH KI KM KN
    KP KR KW KY KZ LA LB LC LI LK LR LS LT LU LV LY MA MC MD ME MF MG MH MK
    ML MM MN MO MP MQ MR MS MT MU MV MW MX MY MZ NA NC NE NF NG NI NL NO NP
    NR NU NZ OM PA PE PF PG PH PK PL PM PN PR PS PT PW PY QA RE RO RS RU RW
    SA SB SC SD SE SG SH SI SJ SK SL SM SN SO SR SS ST SV SX SY SZ TC TD TF
    TG TH TJ TK TL TM TN TO TR TT TV TW TZ UA UG UM US UY UZ VA VC VE VG VI
    VN VU WF WS YE YT ZA ZM ZW
    """.split()
)

BADGE_VERIFICATION: Final[dict[str, VerificationStatus]] = {
    "AUDIO_BADGE": VerificationStatus.ARTIST,
    "CHECK_CIRCLE_FILLED": VerificationStatus.VERIFIED,
}

_OWNER_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^https?://(?:www\.)?youtube\.com/@(?P<handle>[^/?#]+)"
)
_CHANNEL_URL_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"youtube\.com/channel/(?P<channel_id>UC[A-Za-z0-9_-]{22})"
)


@dataclass(frozen=True, slots=True)
class ResolvedEndpoint:
    """Where ``navigation/resolve_url`` points a URL to."""

    browse_id: str | None = None
    url: str | None = None

    @property
    def channel_id(self) -> str | None:
        """Channel ID the endpoint refers to, if it refers to a channel."""
        if self.browse_id and self.browse_id.startswith("UC"):
            return self.browse_id
        if self.url:
            match = _CHANNEL_URL_PATTERN.search(self.url)
            if match:
                return match.group("channel_id")
        return None


def _dig(data: Any, *path: str | int) -> Any:
    """Follow dict keys / list indexes, returning None on any miss."""
    current = data
    for key in path:
        if isinstance(key, int):
            if not isinstance(current, list) or len(current) <= key:
                return None
        elif not isinstance(current, dict):
            return None
        current = current[key] if isinstance(key, int) else current.get(key)
        if current is None:
            return None
    return current


def parse_resolve_url_response(data: Any) -> ResolvedEndpoint | None:
    """Normalize a ``navigation/resolve_url`` response."""
    browse_id = _dig(data, "endpoint", "browseEndpoint", "browseId")
    if browse_id:
        return ResolvedEndpoint(browse_id=str(browse_id))
    url = _dig(data, "endpoint", "urlEndpoint", "url")
    if url:
        return ResolvedEndpoint(url=str(url))
    return None


def parse_browse_response(data: Any, channel_id: str) -> RegionRestrictions:
    """Normalize a channel ``browse`` response into region restrictions.

    Blocked countries are every known country missing from
    ``availableCountries``; they stay None when the page omits the list.
    """
    redirect_id = _dig(
        data,
        "onResponseReceivedActions",
        0,
        "navigateAction",
        "endpoint",
        "browseEndpoint",
        "browseId",
    )
    conditional_redirect = redirect_id if redirect_id and redirect_id != channel_id else None

    verification: VerificationStatus | None = None
    header_title = _dig(
        data,
        "header",
        "pageHeaderRenderer",
        "content",
        "pageHeaderViewModel",
        "title",
        "dynamicTextViewModel",
        "text",
    )
    if header_title is not None:
        badge = _dig(
            header_title,
            "attachmentRuns",
            0,
            "element",
            "type",
            "imageType",
            "image",
            "sources",
            0,
            "clientResource",
            "imageName",
        )
        verification = BADGE_VERIFICATION.get(badge, VerificationStatus.NONE)

    microformat = _dig(data, "microformat", "microformatDataRenderer") or {}
    no_index = microformat.get("noindex")
    available = microformat.get("availableCountries")
    blocked: tuple[str, ...] | None = None
    if isinstance(available, list):
        blocked = tuple(sorted(ALL_COUNTRIES - set(available)))

    owner_handle: str | None = None
    for owner_url in _dig(data, "metadata", "channelMetadataRenderer", "ownerUrls") or []:
        match = _OWNER_URL_PATTERN.match(str(owner_url))
        if match:
            owner_handle = match.group("handle")
            break

    return RegionRestrictions(
        blocked_countries=blocked,
        no_index=no_index if isinstance(no_index, bool) else None,
        verification=verification,
        conditional_redirect=conditional_redirect,
        owner_handle=owner_handle,
    )


class InnertubeClient:
    """Client for the innertube ``navigation/resolve_url`` and ``browse`` endpoints."""

    def __init__(
        self,
        settings: YouTubeProviderSettings,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.base_url = settings.innertube_base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=settings.timeout)
        self._owns_client = client is None

    def _context(self) -> dict[str, Any]:
        return {
            "client": {
                "clientName": self.settings.innertube_client_name,
                "clientVersion": self.settings.innertube_client_version,
            }
        }

    async def _post(self, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        """POST to ``endpoint``; transport failures become transient errors."""
        started = time.perf_counter()
        try:
            response = await self._client.post(
                f"{self.base_url}/{endpoint}",
                params={"prettyPrint": "false"},
                json={"context": self._context(), **payload},
                timeout=self.settings.timeout,
            )
        except httpx.HTTPError as exc:
            record_provider_call(endpoint, "transient", time.perf_counter() - started)
            raise TransientProviderError(f"Innertube {endpoint} request failed") from exc

        elapsed = time.perf_counter() - started
        if response.status_code == 200:
            record_provider_call(endpoint, "ok", elapsed)
        elif response.status_code in (400, 404):
            record_provider_call(endpoint, "not_found", elapsed)
        else:
            record_provider_call(endpoint, "transient", elapsed)
            logger.warning(
                f"Innertube {endpoint} failed",
                extra={"endpoint": endpoint, "status_code": response.status_code},
            )
            raise TransientProviderError(
                f"Innertube {endpoint} returned HTTP {response.status_code}"
            )
        return response

    @staticmethod
    def _json(response: httpx.Response, endpoint: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransientProviderError(f"Malformed innertube {endpoint} response") from exc

    async def resolve_url(self, url: str) -> ResolvedEndpoint | None:
        """Resolve a youtube.com URL; None when YouTube does not know it."""
        response = await self._post("navigation/resolve_url", {"url": url})
        if response.status_code != 200:
            return None
        return parse_resolve_url_response(self._json(response, "navigation/resolve_url"))

    async def browse_channel(self, channel_id: str) -> RegionRestrictions:
        """Fetch the channel page facts.

        Raises:
            ProviderNotFoundError: If the channel page does not exist.
            TransientProviderError: On network or upstream failures.
        """
        response = await self._post("browse", {"browseId": channel_id})
        if response.status_code != 200:
            raise ProviderNotFoundError(f"Channel page for '{channel_id}' not found")
        return parse_browse_response(self._json(response, "browse"), channel_id)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if owned."""
        if self._owns_client:
            await self._client.aclose()


__all__ = [
    "ALL_COUNTRIES",
    "InnertubeClient",
    "ResolvedEndpoint",
    "parse_browse_response",
    "parse_resolve_url_response",
]
