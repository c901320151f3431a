"""Tests for MetadataAggregator.

Enrichment failures must never fail the resolution; they surface as
``Unavailable`` fields, diagnostics and the ``partial`` flag.
"""

import pytest

from packages.common.config import ResolutionSettings
from packages.core.errors import (
    AccountClosedError,
    PermanentProviderError,
    SubscriptionsPrivateError,
    TransientProviderError,
)
from packages.core.resolution.aggregator import MetadataAggregator, uploads_playlist_for
from packages.core.resolution.classifier import classify
from packages.core.resolution.redirect_detector import RedirectDetector
from packages.schemas.youtube.channel import ChannelMetadata, Unavailable, UnavailableReason
from packages.schemas.youtube.provider import (
    ChannelRecord,
    RegionRestrictions,
    SubscriptionPage,
    VerificationStatus,
)
from tests.utils.fakes import (
    GOOGLE_DEVELOPERS_ID,
    GOOGLE_ID,
    FakeChannelProvider,
    make_record,
    make_result,
)


@pytest.fixture
def aggregator(provider: FakeChannelProvider, fast_settings: ResolutionSettings) -> MetadataAggregator:
    return MetadataAggregator(provider, fast_settings)


async def aggregate(
    aggregator: MetadataAggregator, *records: ChannelRecord, raw: str = "@google"
) -> ChannelMetadata:
    result = make_result(*records)
    channel = RedirectDetector().detect(classify(raw)[0], result)
    return await aggregator.aggregate(channel, result)


def test_uploads_playlist_for_swaps_prefix() -> None:
    assert uploads_playlist_for(GOOGLE_ID) == "UU" + GOOGLE_ID[2:]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_full_record(aggregator: MetadataAggregator, provider: FakeChannelProvider) -> None:
    provider.region_restrictions = RegionRestrictions(
        blocked_countries=("CN", "KP"),
        no_index=False,
        verification=VerificationStatus.VERIFIED,
    )

    metadata = await aggregate(aggregator, make_record())

    assert metadata.channel_id == GOOGLE_ID
    assert metadata.title == "Google"
    assert metadata.handle == "google"
    assert metadata.custom_url == "@google"
    assert metadata.keywords == ["google", "technology"]
    assert metadata.statistics.subscriber_count == 13_400_000
    assert metadata.uploads_playlist_id == "UU" + GOOGLE_ID[2:]
    assert metadata.blocked_countries == ["CN", "KP"]
    assert metadata.no_index is False
    assert metadata.verification is VerificationStatus.VERIFIED
    assert metadata.conditional_redirect is None
    assert metadata.url_redirect is None
    assert isinstance(metadata.subscriptions, SubscriptionPage)
    assert metadata.partial is False
    assert metadata.diagnostics == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_enrichment_calls_target_resolved_channel(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    await aggregate(aggregator, make_record())

    assert provider.calls_for("fetch_region_restrictions") == [GOOGLE_ID]
    assert provider.calls_for("fetch_subscriptions") == [GOOGLE_ID]
    assert provider.calls_for("fetch_url_redirect") == ["google"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_hidden_subscriber_count_differs_from_zero(aggregator: MetadataAggregator) -> None:
    hidden = await aggregate(
        aggregator, make_record(subscriber_count=None, hidden_subscriber_count=True)
    )
    zero = await aggregate(aggregator, make_record(subscriber_count=0))

    assert hidden.statistics.subscriber_count == Unavailable(
        reason=UnavailableReason.HIDDEN_BY_OWNER
    )
    assert zero.statistics.subscriber_count == 0
    assert hidden.partial is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_fields_are_not_provided(aggregator: MetadataAggregator) -> None:
    record = ChannelRecord(channel_id=GOOGLE_ID, title="Google")

    metadata = await aggregate(aggregator, record, raw=GOOGLE_ID)

    assert metadata.country == Unavailable(reason=UnavailableReason.NOT_PROVIDED)
    assert metadata.keywords == Unavailable(reason=UnavailableReason.NOT_PROVIDED)
    assert metadata.statistics.video_count == Unavailable(reason=UnavailableReason.NOT_PROVIDED)
    assert metadata.uploads_playlist_id == "UU" + GOOGLE_ID[2:]
    assert metadata.url_redirect == Unavailable(reason=UnavailableReason.NOT_PROVIDED)
    assert metadata.diagnostics == ["uploads playlist derived from channel ID"]
    assert metadata.partial is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_owner_handle_fills_missing_handle(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.region_restrictions = RegionRestrictions(blocked_countries=(), owner_handle="google")

    metadata = await aggregate(aggregator, make_record(custom_url=None), raw=GOOGLE_ID)

    assert metadata.handle == "google"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unknown_blocked_countries(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.region_restrictions = RegionRestrictions(blocked_countries=None)

    metadata = await aggregate(aggregator, make_record())

    assert metadata.blocked_countries == Unavailable(reason=UnavailableReason.NOT_PROVIDED)
    assert metadata.partial is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_private_subscriptions_are_partial(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.subscriptions = SubscriptionsPrivateError("subscriptions are private")

    metadata = await aggregate(aggregator, make_record())

    assert metadata.subscriptions == Unavailable(reason=UnavailableReason.PRIVATE)
    assert metadata.partial is True
    assert metadata.diagnostics == ["subscriptions unavailable: private"]
    assert metadata.title == "Google"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_restrictions_mark_page_fields(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.region_restrictions = TransientProviderError("innertube 503")

    metadata = await aggregate(aggregator, make_record())

    failed = Unavailable(reason=UnavailableReason.FETCH_FAILED)
    assert metadata.blocked_countries == failed
    assert metadata.no_index == failed
    assert metadata.verification == failed
    assert metadata.conditional_redirect == failed
    assert metadata.partial is True
    assert metadata.diagnostics == ["blocked countries unavailable: fetch_failed"]
    assert provider.calls_for("fetch_region_restrictions") == [GOOGLE_ID] * 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_permanent_enrichment_error_is_not_fatal(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.subscriptions = PermanentProviderError("quota exceeded")

    metadata = await aggregate(aggregator, make_record())

    assert metadata.subscriptions == Unavailable(reason=UnavailableReason.FETCH_FAILED)
    assert provider.calls_for("fetch_subscriptions") == [GOOGLE_ID]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_closed_account_reason(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.subscriptions = AccountClosedError("closed")

    metadata = await aggregate(aggregator, make_record())

    assert metadata.subscriptions == Unavailable(reason=UnavailableReason.ACCOUNT_CLOSED)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ambiguity_is_carried_into_metadata(aggregator: MetadataAggregator) -> None:
    other = make_record(GOOGLE_DEVELOPERS_ID, "Google for Developers", "@googledevelopers")

    metadata = await aggregate(aggregator, make_record(), other, raw="Google")

    assert metadata.ambiguous is True
    assert metadata.alternates == [GOOGLE_DEVELOPERS_ID]
    assert metadata.diagnostics == ["ambiguous match: 1 other channel(s) matched"]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_unavailable_serializes_as_marker(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.subscriptions = SubscriptionsPrivateError("private")

    data = (await aggregate(aggregator, make_record())).model_dump(mode="json")

    assert data["subscriptions"] == {"unavailable": True, "reason": "private"}
    assert data["partial"] is True


@pytest.mark.unit
@pytest.mark.asyncio
async def test_forwarded_handle_url_is_reported(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.url_redirect = "https://www.youtube.com/@newgoogle"

    metadata = await aggregate(aggregator, make_record())

    assert metadata.url_redirect == "https://www.youtube.com/@newgoogle"
    assert metadata.partial is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_url_redirect_check_is_partial(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    provider.url_redirect = TransientProviderError("innertube down")

    metadata = await aggregate(aggregator, make_record())

    assert metadata.url_redirect == Unavailable(reason=UnavailableReason.FETCH_FAILED)
    assert metadata.partial is True
    assert metadata.diagnostics == ["url redirect unavailable: fetch_failed"]
    assert provider.calls_for("fetch_url_redirect") == ["google"] * 3


@pytest.mark.unit
@pytest.mark.asyncio
async def test_channel_without_handle_skips_url_redirect_check(
    aggregator: MetadataAggregator, provider: FakeChannelProvider
) -> None:
    await aggregate(aggregator, make_record(custom_url="googlelegacy"), raw=GOOGLE_ID)

    assert provider.calls_for("fetch_url_redirect") == []
