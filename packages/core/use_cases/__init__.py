"""Core use cases - Application service orchestration.

Use cases orchestrate workflows across adapters without containing framework-specific code.
"""

from __future__ import annotations

from packages.core.use_cases.list_subscriptions import ListSubscriptionsUseCase
from packages.core.use_cases.list_uploads import ListUploadsUseCase
from packages.core.use_cases.resolve_channel import ResolveChannelUseCase

__all__ = [
    "ListSubscriptionsUseCase",
    "ListUploadsUseCase",
    "ResolveChannelUseCase",
]
