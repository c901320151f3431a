"""CLI resolve command implementation.

Resolves a channel reference and prints the canonical channel with its
metadata, either as a Rich table or as JSON.
"""

from __future__ import annotations

import logging
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from apps.cli.channelscope_cli.deps import provider_session
from packages.common.config import get_config
from packages.core.errors import ChannelResolutionError, InvalidInputError
from packages.core.use_cases.resolve_channel import ResolveChannelUseCase
from packages.schemas.youtube.channel import ChannelMetadata, Unavailable
from packages.schemas.youtube.reference import ReferenceKind

console = Console()
logger = logging.getLogger(__name__)

EXIT_NOT_RESOLVED = 1
EXIT_INVALID_INPUT = 2


def format_value(value: Any) -> str:
    """Render a metadata value for the table view."""
    if isinstance(value, Unavailable):
        return f"[dim]unavailable ({value.reason.value})[/dim]"
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, list):
        return ", ".join(str(item) for item in value) if value else "(none)"
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def render_metadata(metadata: ChannelMetadata) -> Table:
    """Build the Rich table for a resolved channel."""
    table = Table(title=f"Channel {metadata.channel_id}", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")

    subscriptions = metadata.subscriptions
    subscriptions_display = (
        subscriptions
        if isinstance(subscriptions, Unavailable)
        else f"{len(subscriptions.items)} on first page"
    )

    rows: list[tuple[str, Any]] = [
        ("Title", metadata.title),
        ("Handle", metadata.handle),
        ("Custom URL", metadata.custom_url),
        ("Country", metadata.country),
        ("Published", metadata.published_at),
        ("Subscribers", metadata.statistics.subscriber_count),
        ("Videos", metadata.statistics.video_count),
        ("Views", metadata.statistics.view_count),
        ("Uploads playlist", metadata.uploads_playlist_id),
        ("Verification", metadata.verification),
        ("Blocked countries", metadata.blocked_countries),
        ("No index", metadata.no_index),
        ("Conditional redirect", metadata.conditional_redirect),
        ("URL redirect", metadata.url_redirect),
        ("Subscriptions", subscriptions_display),
        ("Matched as", f"{metadata.provenance.kind.value} ({metadata.provenance.query})"),
        ("Redirect", metadata.redirect),
        ("Redirect target", metadata.redirect_target),
        ("Ambiguous", metadata.ambiguous),
    ]
    for label, value in rows:
        table.add_row(label, format_value(value))
    return table


async def resolve_command(raw: str, kind: ReferenceKind | None = None, as_json: bool = False) -> None:
    """Resolve ``raw`` and print the result.

    Args:
        raw: Channel reference.
        kind: Optional explicit reference kind.
        as_json: Print the metadata as JSON instead of a table.

    Raises:
        typer.Exit: 2 on invalid input, 1 on any other resolution error.
    """
    settings = get_config().resolution_settings
    try:
        async with provider_session() as provider:
            use_case = ResolveChannelUseCase(provider=provider, settings=settings)
            metadata = await use_case.execute(raw, kind=kind)
    except ChannelResolutionError as e:
        logger.info("Resolution of %r failed: %s", raw, e.kind)
        console.print(f"[red]{e.kind}: {e.message}[/red]")
        code = EXIT_INVALID_INPUT if isinstance(e, InvalidInputError) else EXIT_NOT_RESOLVED
        raise typer.Exit(code) from e

    if as_json:
        typer.echo(metadata.model_dump_json(indent=2))
        return

    console.print(render_metadata(metadata))
    if metadata.diagnostics:
        console.print("\n[yellow]Diagnostics:[/yellow]")
        for note in metadata.diagnostics:
            console.print(f"  - {note}")


__all__ = ["format_value", "render_metadata", "resolve_command"]
