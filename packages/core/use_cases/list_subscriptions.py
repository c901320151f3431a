"""ListSubscriptionsUseCase - Page through a channel's public subscriptions."""

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
from packages.core.resolution.classifier import is_channel_id
from packages.schemas.youtube.provider import SubscriptionPage

logger = logging.getLogger(__name__)


class ListSubscriptionsUseCase:
    """Fetch one page of subscriptions for a channel ID.

    Privacy and account-state errors (SubscriptionsPrivateError,
    AccountClosedError, AccountTerminatedError) and exhausted transient retries
    propagate unchanged for the caller to report.
    """

    def __init__(
        self,
        provider: ChannelDataProvider,
        settings: ResolutionSettings | None = None,
    ) -> None:
        self.provider = provider
        self.settings = settings or ResolutionSettings()

        logger.info("Initialized ListSubscriptionsUseCase")

    async def execute(self, channel_id: str, page_token: str | None = None) -> SubscriptionPage:
        """Return the subscriptions page starting at ``page_token``.

        Raises:
            InvalidInputError: If ``channel_id`` is not a channel ID.
            ChannelNotFoundError: If the channel does not exist.
            PermanentProviderFailure: On credential or quota problems.
        """
        channel_id = (channel_id or "").strip()
        if not is_channel_id(channel_id):
            raise InvalidInputError(f"'{channel_id}' is not a valid channel ID")

        try:
            page = await retry_async(
                lambda: self.provider.fetch_subscriptions(
                    channel_id,
                    page_token=page_token,
                    max_results=self.settings.subscriptions_page_size,
                ),
                max_attempts=self.settings.max_attempts,
                base_delay=self.settings.base_delay,
                max_delay=self.settings.max_delay,
                retry_on=(TransientProviderError,),
            )
        except ProviderNotFoundError as exc:
            raise ChannelNotFoundError(f"No channel found for '{channel_id}'") from exc
        except PermanentProviderError as exc:
            raise PermanentProviderFailure(str(exc)) from exc

        logger.info(
            f"Fetched {len(page.items)} subscriptions",
            extra={"channel_id": channel_id, "has_next": page.next_page_token is not None},
        )
        return page


__all__ = ["ListSubscriptionsUseCase"]
