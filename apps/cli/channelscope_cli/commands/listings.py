"""CLI subscriptions and uploads commands."""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from apps.cli.channelscope_cli.deps import provider_session
from packages.common.config import get_config
from packages.core.errors import ChannelResolutionError, ProviderError
from packages.core.use_cases.list_subscriptions import ListSubscriptionsUseCase
from packages.core.use_cases.list_uploads import ListUploadsUseCase

console = Console()


def _fail(kind: str, message: str) -> typer.Exit:
    console.print(f"[red]{kind}: {message}[/red]")
    return typer.Exit(1)


async def subscriptions_command(channel_id: str, page_token: str | None = None) -> None:
    """Print one page of a channel's subscriptions."""
    settings = get_config().resolution_settings
    try:
        async with provider_session() as provider:
            page = await ListSubscriptionsUseCase(provider, settings).execute(
                channel_id, page_token=page_token
            )
    except ChannelResolutionError as e:
        raise _fail(e.kind, e.message) from e
    except ProviderError as e:
        raise _fail(type(e).__name__, str(e)) from e

    table = Table(title=f"Subscriptions of {channel_id}")
    table.add_column("Channel ID", style="cyan")
    table.add_column("Title")
    table.add_column("Subscribed", style="dim")
    for item in page.items:
        table.add_row(item.channel_id, item.title, item.subscribed_at.date().isoformat())
    console.print(table)

    if page.next_page_token:
        console.print(f"Next page: --page-token {page.next_page_token}")


async def uploads_command(playlist_id: str, page_token: str | None = None) -> None:
    """Print one page of a playlist (a channel ID lists its uploads)."""
    settings = get_config().resolution_settings
    try:
        async with provider_session() as provider:
            page = await ListUploadsUseCase(provider, settings).execute(
                playlist_id, page_token=page_token
            )
    except ChannelResolutionError as e:
        raise _fail(e.kind, e.message) from e
    except ProviderError as e:
        raise _fail(type(e).__name__, str(e)) from e

    table = Table(title=f"Playlist {playlist_id}")
    table.add_column("Video ID", style="cyan")
    table.add_column("Title")
    table.add_column("Published", style="dim")
    for video in page.items:
        table.add_row(video.video_id, video.title, video.published_at.date().isoformat())
    console.print(table)

    if page.next_page_token:
        console.print(f"Next page: --page-token {page.next_page_token}")


__all__ = ["subscriptions_command", "uploads_command"]
