"""Shared Pydantic schemas for the API."""

from __future__ import annotations

from .envelope import ErrorDetail, ResponseEnvelope

__all__ = ["ErrorDetail", "ResponseEnvelope"]
