"""Ports for core use-cases."""

from __future__ import annotations

from packages.core.ports.channel_provider import ChannelDataProvider

__all__ = ["ChannelDataProvider"]
