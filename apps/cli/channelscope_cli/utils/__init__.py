"""CLI utilities."""

from apps.cli.channelscope_cli.utils.async_wrapper import async_command

__all__ = ["async_command"]
