"""Tests for ResolveChannelUseCase.

Covers the resolve-then-aggregate flow, outcome metrics, and the account
status probe for channel IDs that no longer resolve.
"""

from typing import Any

import pytest

from packages.common.config import ResolutionSettings
from packages.core.errors import (
    AccountClosedError,
    AccountTerminatedError,
    ChannelNotFoundError,
    InvalidInputError,
    TransientProviderError,
)
from packages.core.use_cases.resolve_channel import (
    ACCOUNT_CLOSED_MESSAGE,
    ACCOUNT_TERMINATED_MESSAGE,
    ResolveChannelUseCase,
)
from packages.schemas.youtube.channel import ChannelMetadata
from packages.schemas.youtube.reference import ReferenceKind
from tests.utils.fakes import GOOGLE_ID, FakeChannelProvider, make_record, make_result


@pytest.fixture
def use_case(provider: FakeChannelProvider, fast_settings: ResolutionSettings) -> ResolveChannelUseCase:
    """Create ResolveChannelUseCase with the scripted provider."""
    return ResolveChannelUseCase(provider, fast_settings)


@pytest.fixture
def metrics(mocker: Any) -> dict[str, Any]:
    """Patch the metric recorders used by the use case."""
    return {
        "resolution": mocker.patch("packages.core.use_cases.resolve_channel.record_resolution"),
        "match": mocker.patch("packages.core.use_cases.resolve_channel.record_match"),
    }


@pytest.mark.unit
@pytest.mark.asyncio
async def test_execute_returns_metadata(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    """Test execute resolves the reference and aggregates its metadata."""
    # Arrange
    provider.script("lookup_by_handle", "Google", make_result(make_record()))

    # Act
    metadata = await use_case.execute("https://www.youtube.com/@Google")

    # Assert
    assert isinstance(metadata, ChannelMetadata)
    assert metadata.channel_id == GOOGLE_ID
    assert metadata.provenance.kind is ReferenceKind.HANDLE
    assert metadata.partial is False
    metrics["resolution"].assert_called_once_with("resolved")
    metrics["match"].assert_called_once_with("handle", False, False)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_execute_with_explicit_kind(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    provider.script("lookup_by_username", "GoogleDevelopers", make_result(make_record()))

    metadata = await use_case.execute("GoogleDevelopers", kind=ReferenceKind.USERNAME)

    assert metadata.provenance.kind is ReferenceKind.USERNAME
    assert metadata.redirect is True
    metrics["match"].assert_called_once_with("username", True, False)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_execute_records_failure_kind(
    use_case: ResolveChannelUseCase, metrics: dict[str, Any]
) -> None:
    with pytest.raises(InvalidInputError):
        await use_case.execute("   ")

    metrics["resolution"].assert_called_once_with("invalid_input")
    metrics["match"].assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_channel_id_of_closed_account(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    """Test a closed account is reported distinctly from an unknown ID."""
    provider.subscriptions = AccountClosedError("channel closed")

    with pytest.raises(ChannelNotFoundError) as exc_info:
        await use_case.execute(GOOGLE_ID)

    assert exc_info.value.message == ACCOUNT_CLOSED_MESSAGE
    assert exc_info.value.account_status == "closed"
    assert isinstance(exc_info.value.__cause__, ChannelNotFoundError)
    metrics["resolution"].assert_called_once_with("not_found")


@pytest.mark.unit
@pytest.mark.asyncio
async def test_missing_channel_id_of_terminated_account(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    provider.subscriptions = AccountTerminatedError("channel suspended")

    with pytest.raises(ChannelNotFoundError) as exc_info:
        await use_case.execute(GOOGLE_ID)

    assert exc_info.value.message == ACCOUNT_TERMINATED_MESSAGE
    assert exc_info.value.account_status == "terminated"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_inconclusive_probe_keeps_not_found(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    provider.subscriptions = TransientProviderError("503")

    with pytest.raises(ChannelNotFoundError) as exc_info:
        await use_case.execute(GOOGLE_ID)

    assert exc_info.value.account_status is None
    assert provider.calls_for("fetch_subscriptions") == [GOOGLE_ID]


@pytest.mark.unit
@pytest.mark.asyncio
async def test_non_id_reference_is_not_probed(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    provider.subscriptions = AccountClosedError("channel closed")

    with pytest.raises(ChannelNotFoundError) as exc_info:
        await use_case.execute("@NoSuchChannelAnywhere")

    assert exc_info.value.account_status is None
    assert provider.calls_for("fetch_subscriptions") == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_enrichment_failure_does_not_fail_resolution(
    use_case: ResolveChannelUseCase,
    provider: FakeChannelProvider,
    metrics: dict[str, Any],
) -> None:
    provider.script("lookup_by_id", GOOGLE_ID, make_result(make_record()))
    provider.region_restrictions = TransientProviderError("innertube down")

    metadata = await use_case.execute(GOOGLE_ID)

    assert metadata.partial is True
    metrics["resolution"].assert_called_once_with("resolved")
