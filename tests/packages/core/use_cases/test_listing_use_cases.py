"""Tests for ListSubscriptionsUseCase and ListUploadsUseCase."""

import pytest

from packages.common.config import ResolutionSettings
from packages.core.errors import (
    ChannelNotFoundError,
    InvalidInputError,
    PermanentProviderError,
    PermanentProviderFailure,
    ProviderNotFoundError,
    SubscriptionsPrivateError,
    TransientProviderError,
)
from packages.core.use_cases.list_subscriptions import ListSubscriptionsUseCase
from packages.core.use_cases.list_uploads import ListUploadsUseCase
from tests.utils.fakes import GOOGLE_ID, FakeChannelProvider, make_subscription_page

UPLOADS_ID = "UU" + GOOGLE_ID[2:]


@pytest.mark.unit
class TestListSubscriptions:
    """Subscriptions listing."""

    @pytest.mark.asyncio
    async def test_returns_page(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.subscriptions = make_subscription_page(3, next_page_token="CAIQAA")

        page = await ListSubscriptionsUseCase(provider, fast_settings).execute(f" {GOOGLE_ID} ")

        assert len(page.items) == 3
        assert page.next_page_token == "CAIQAA"
        assert provider.calls == [("fetch_subscriptions", GOOGLE_ID)]

    @pytest.mark.asyncio
    async def test_rejects_non_channel_id(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        with pytest.raises(InvalidInputError):
            await ListSubscriptionsUseCase(provider, fast_settings).execute("@Google")

        assert provider.calls == []

    @pytest.mark.asyncio
    async def test_retries_transient_errors(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.subscriptions = TransientProviderError("503")

        with pytest.raises(TransientProviderError):
            await ListSubscriptionsUseCase(provider, fast_settings).execute(GOOGLE_ID)

        assert len(provider.calls) == fast_settings.max_attempts

    @pytest.mark.asyncio
    async def test_private_subscriptions_propagate(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.subscriptions = SubscriptionsPrivateError("private")

        with pytest.raises(SubscriptionsPrivateError):
            await ListSubscriptionsUseCase(provider, fast_settings).execute(GOOGLE_ID)

    @pytest.mark.asyncio
    async def test_unknown_channel_is_not_found(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.subscriptions = ProviderNotFoundError("no such channel")

        with pytest.raises(ChannelNotFoundError):
            await ListSubscriptionsUseCase(provider, fast_settings).execute(GOOGLE_ID)

    @pytest.mark.asyncio
    async def test_permanent_error_is_wrapped(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.subscriptions = PermanentProviderError("bad key")

        with pytest.raises(PermanentProviderFailure) as exc_info:
            await ListSubscriptionsUseCase(provider, fast_settings).execute(GOOGLE_ID)

        assert exc_info.value.message == "bad key"


@pytest.mark.unit
class TestListUploads:
    """Playlist listing."""

    @pytest.mark.asyncio
    async def test_channel_id_maps_to_uploads_playlist(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        page = await ListUploadsUseCase(provider, fast_settings).execute(GOOGLE_ID)

        assert len(page.items) == 2
        assert provider.calls == [("fetch_playlist_items", UPLOADS_ID)]

    @pytest.mark.asyncio
    async def test_playlist_id_passes_through(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        await ListUploadsUseCase(provider, fast_settings).execute("PLOU2XLYxmsIKC8eODk_RNCWv3fBcLvMMy")

        assert provider.calls == [("fetch_playlist_items", "PLOU2XLYxmsIKC8eODk_RNCWv3fBcLvMMy")]

    @pytest.mark.asyncio
    async def test_empty_id_rejected(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        with pytest.raises(InvalidInputError):
            await ListUploadsUseCase(provider, fast_settings).execute("  ")

    @pytest.mark.asyncio
    async def test_missing_playlist_is_not_found(
        self, provider: FakeChannelProvider, fast_settings: ResolutionSettings
    ) -> None:
        provider.playlist_items = ProviderNotFoundError("playlistNotFound")

        with pytest.raises(ChannelNotFoundError) as exc_info:
            await ListUploadsUseCase(provider, fast_settings).execute(GOOGLE_ID)

        assert UPLOADS_ID in exc_info.value.message
