"""Dependency injection helpers for the API layer."""

from __future__ import annotations

from .youtube import (
    get_list_subscriptions_use_case,
    get_list_uploads_use_case,
    get_provider,
    get_resolution_settings,
    get_resolve_use_case,
)

__all__ = [
    "get_list_subscriptions_use_case",
    "get_list_uploads_use_case",
    "get_provider",
    "get_resolution_settings",
    "get_resolve_use_case",
]
