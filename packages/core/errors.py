"""Error taxonomy for channel resolution.

Two families live here:

- ``ProviderError`` and subclasses: raised by provider adapters. They describe
  what went wrong upstream and never carry the raw upstream payload.
- ``ChannelResolutionError`` and subclasses: the caller-visible outcomes of a
  resolution. Each carries a stable ``kind`` string used by the API and CLI.
"""

from __future__ import annotations

from packages.schemas.youtube.reference import ResolutionCandidate


class ProviderError(Exception):
    """Base exception for provider adapter failures."""

    pass


class TransientProviderError(ProviderError):
    """Raised on failures worth retrying.

    Rate limiting, network errors, timeouts and upstream 5xx responses.
    """

    pass


class PermanentProviderError(ProviderError):
    """Raised on failures that will repeat for every call.

    Exhausted quota, a missing or invalid API key, or a forbidden request.
    """

    pass


class ProviderNotFoundError(ProviderError):
    """Raised when a listing targets a channel or playlist that does not exist."""

    pass


class SubscriptionsPrivateError(ProviderError):
    """Raised when a channel keeps its subscriptions private."""

    pass


class AccountClosedError(ProviderError):
    """Raised when the channel's account was closed by its owner."""

    pass


class AccountTerminatedError(ProviderError):
    """Raised when the channel's account was terminated by YouTube."""

    pass


class ChannelResolutionError(Exception):
    """Base exception for resolution outcomes other than success."""

    kind: str = "resolution_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInputError(ChannelResolutionError):
    """Raised when the raw reference is empty or cannot be parsed."""

    kind = "invalid_input"


class ChannelNotFoundError(ChannelResolutionError):
    """Raised when every candidate was checked and none matched.

    ``unchecked`` lists candidates whose lookups failed transiently, so the
    channel may still exist under one of them. ``account_status`` is set when a
    channel ID is known to belong to a closed or terminated account.
    """

    kind = "not_found"

    def __init__(
        self,
        message: str,
        *,
        unchecked: list[ResolutionCandidate] | None = None,
        account_status: str | None = None,
    ) -> None:
        super().__init__(message)
        self.unchecked = unchecked or []
        self.account_status = account_status


class AllCandidatesFailedError(ChannelResolutionError):
    """Raised when every attempted candidate failed transiently."""

    kind = "all_candidates_failed"

    def __init__(self, message: str, *, attempted: list[ResolutionCandidate]) -> None:
        super().__init__(message)
        self.attempted = attempted


class PermanentProviderFailure(ChannelResolutionError):
    """Raised when the provider rejects the request for good.

    Credentials or quota must change before any request can succeed.
    """

    kind = "permanent_provider_failure"


class ResolutionCancelledError(ChannelResolutionError):
    """Raised when the caller's cancellation signal fired mid-resolution."""

    kind = "cancelled"


__all__ = [
    "AccountClosedError",
    "AccountTerminatedError",
    "AllCandidatesFailedError",
    "ChannelNotFoundError",
    "ChannelResolutionError",
    "InvalidInputError",
    "PermanentProviderError",
    "PermanentProviderFailure",
    "ProviderError",
    "ProviderNotFoundError",
    "ResolutionCancelledError",
    "SubscriptionsPrivateError",
    "TransientProviderError",
]
