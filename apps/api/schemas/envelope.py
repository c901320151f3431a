"""Response envelope shared by all API routes."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorDetail(BaseModel):
    """Caller-visible error: a stable kind plus a human-readable message."""

    kind: str = Field(..., description="Stable error kind (e.g. not_found)")
    message: str = Field(..., description="Human-readable diagnostic")


class ResponseEnvelope(BaseModel, Generic[T]):
    """Envelope wrapping every API response.

    Exactly one of ``data`` and ``error`` is set.
    """

    data: T | None = None
    error: ErrorDetail | None = None


__all__ = ["ErrorDetail", "ResponseEnvelope"]
