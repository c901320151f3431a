"""Mapping of resolution and provider errors onto HTTP responses.

Every error leaves the API as ``{"data": null, "error": {"kind", "message"}}``.
Raw upstream payloads never reach the client.
"""

from __future__ import annotations

import logging
from typing import cast

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from apps.api.schemas.envelope import ErrorDetail, ResponseEnvelope
from packages.core.errors import (
    AccountClosedError,
    AccountTerminatedError,
    AllCandidatesFailedError,
    ChannelNotFoundError,
    ChannelResolutionError,
    InvalidInputError,
    PermanentProviderError,
    PermanentProviderFailure,
    ProviderError,
    ProviderNotFoundError,
    ResolutionCancelledError,
    SubscriptionsPrivateError,
    TransientProviderError,
)

logger = logging.getLogger(__name__)

HTTP_499_CLIENT_CLOSED_REQUEST = 499

_RESOLUTION_STATUS: dict[type[ChannelResolutionError], int] = {
    InvalidInputError: status.HTTP_400_BAD_REQUEST,
    ChannelNotFoundError: status.HTTP_404_NOT_FOUND,
    AllCandidatesFailedError: status.HTTP_503_SERVICE_UNAVAILABLE,
    PermanentProviderFailure: status.HTTP_502_BAD_GATEWAY,
    ResolutionCancelledError: HTTP_499_CLIENT_CLOSED_REQUEST,
}

# Checked in order; subclasses first
_PROVIDER_ERRORS: tuple[tuple[type[ProviderError], str, int], ...] = (
    (SubscriptionsPrivateError, "subscriptions_private", status.HTTP_403_FORBIDDEN),
    (AccountClosedError, "account_closed", status.HTTP_410_GONE),
    (AccountTerminatedError, "account_terminated", status.HTTP_410_GONE),
    (ProviderNotFoundError, "not_found", status.HTTP_404_NOT_FOUND),
    (TransientProviderError, "transient_provider_failure", status.HTTP_503_SERVICE_UNAVAILABLE),
    (PermanentProviderError, "permanent_provider_failure", status.HTTP_502_BAD_GATEWAY),
)


def describe_resolution_error(exc: ChannelResolutionError) -> tuple[str, int]:
    """Return the (kind, HTTP status) pair for a resolution error."""
    if isinstance(exc, ChannelNotFoundError) and exc.account_status:
        return f"account_{exc.account_status}", status.HTTP_410_GONE
    for error_type, status_code in _RESOLUTION_STATUS.items():
        if isinstance(exc, error_type):
            return exc.kind, status_code
    return exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR


def describe_provider_error(exc: ProviderError) -> tuple[str, int]:
    """Return the (kind, HTTP status) pair for a provider error."""
    for error_type, kind, status_code in _PROVIDER_ERRORS:
        if isinstance(exc, error_type):
            return kind, status_code
    return "provider_error", status.HTTP_502_BAD_GATEWAY


def error_response(kind: str, message: str, status_code: int) -> JSONResponse:
    """Build an error envelope response."""
    envelope: ResponseEnvelope[None] = ResponseEnvelope(
        data=None, error=ErrorDetail(kind=kind, message=message)
    )
    return JSONResponse(status_code=status_code, content=envelope.model_dump(mode="json"))


async def resolution_error_handler(request: Request, exc: Exception) -> JSONResponse:
    error = cast(ChannelResolutionError, exc)
    kind, status_code = describe_resolution_error(error)
    logger.info(
        "Resolution error",
        extra={"path": request.url.path, "error_kind": kind, "status_code": status_code},
    )
    return error_response(kind, error.message, status_code)


async def provider_error_handler(request: Request, exc: Exception) -> JSONResponse:
    kind, status_code = describe_provider_error(cast(ProviderError, exc))
    logger.warning(
        "Provider error",
        extra={"path": request.url.path, "error_kind": kind, "status_code": status_code},
    )
    return error_response(kind, str(exc), status_code)


async def validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = cast(RequestValidationError, exc).errors()
    fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in errors)
    return error_response(
        InvalidInputError.kind,
        f"Invalid request parameters: {fields}",
        status.HTTP_400_BAD_REQUEST,
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the envelope error handlers on ``app``."""
    app.add_exception_handler(ChannelResolutionError, resolution_error_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)


__all__ = [
    "HTTP_499_CLIENT_CLOSED_REQUEST",
    "describe_provider_error",
    "describe_resolution_error",
    "error_response",
    "register_error_handlers",
]
