"""ListUploadsUseCase - Page through a playlist, typically a channel's uploads.

Accepts either a playlist ID or a channel ID; a channel ID is mapped to its
uploads playlist (UCxxxx -> UUxxxx).
"""

import logging

from packages.common.config import ResolutionSettings
from packages.common.resilience import retry_async
from packages.core.errors import (
    ChannelNotFoundError,
    InvalidInputError,
    PermanentProviderError,
    PermanentProviderFailure,
    ProviderNotFoundError,
    TransientProviderError,
)
from packages.core.ports.channel_provider import ChannelDataProvider
from packages.core.resolution.aggregator import uploads_playlist_for
from packages.core.resolution.classifier import is_channel_id
from packages.schemas.youtube.provider import PlaylistPage

logger = logging.getLogger(__name__)


class ListUploadsUseCase:
    """Fetch one page of playlist items."""

    def __init__(
        self,
        provider: ChannelDataProvider,
        settings: ResolutionSettings | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or ResolutionSettings()

        logger.info("Initialized ListUploadsUseCase")

    async def execute(self, playlist_id: str, page_token: str | None = None) -> PlaylistPage:
        """Return the playlist page starting at ``page_token``.

        Raises:
            InvalidInputError: If ``playlist_id`` is empty.
            ChannelNotFoundError: If the playlist does not exist.
            PermanentProviderFailure: On credential or quota problems.
        """
        playlist_id = (playlist_id or "").strip()
        if not playlist_id:
            raise InvalidInputError("Playlist ID is empty")
        if is_channel_id(playlist_id):
            playlist_id = uploads_playlist_for(playlist_id)

        try:
            page = await retry_async(
                lambda: self.provider.fetch_playlist_items(
                    playlist_id,
                    page_token=page_token,
                    max_results=self.settings.subscriptions_page_size,
                ),
                max_attempts=self.settings.max_attempts,
                base_delay=self.settings.base_delay,
                max_delay=self.settings.max_delay,
                retry_on=(TransientProviderError,),
            )
        except ProviderNotFoundError as exc:
            raise ChannelNotFoundError(f"No playlist found for '{playlist_id}'") from exc
        except PermanentProviderError as exc:
            raise PermanentProviderFailure(str(exc)) from exc

        logger.info(
            f"Fetched {len(page.items)} playlist items",
            extra={"playlist_id": playlist_id, "has_next": page.next_page_token is not None},
        )
        return page


__all__ = ["ListUploadsUseCase"]
