"""ChannelScope CLI - Typer command-line interface for YouTube channel resolution."""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from apps.cli.channelscope_cli.utils import async_command
from packages.common.logging import setup_logging
from packages.common.tracing import set_correlation_id
from packages.schemas.youtube.reference import ReferenceKind

app = typer.Typer(
    name="channelscope",
    help="ChannelScope CLI - resolve YouTube channel references",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    log_level: str = typer.Option(
        "WARNING", "--log-level", help="Log level for JSON logs on stderr"
    ),
) -> None:
    """Configure logging and the correlation ID for this invocation."""
    setup_logging(log_level)
    correlation_id = set_correlation_id()
    logger.debug("CLI invocation started (correlation_id=%s)", correlation_id)


@app.command()
@async_command
async def resolve(
    reference: str = typer.Argument(..., help="Channel URL, @handle, username, name or ID"),
    kind: ReferenceKind | None = typer.Option(
        None, "--type", "-t", help="Treat the reference as this kind"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print metadata as JSON"),
) -> None:
    """
    Resolve a channel reference into its canonical channel and metadata.

    Examples:
        channelscope resolve @Google
        channelscope resolve https://www.youtube.com/c/GoogleDevelopers
        channelscope resolve UC_x5XG1OV2P6uZZ5FSM9Ttw --json
        channelscope resolve YouTube --type username
    """
    from apps.cli.channelscope_cli.commands.resolve import resolve_command

    await resolve_command(reference, kind=kind, as_json=as_json)


@app.command()
def classify(
    reference: str = typer.Argument(..., help="Channel reference to classify"),
) -> None:
    """
    Show the candidates a reference would be tried as (no network calls).

    Examples:
        channelscope classify @Google
        channelscope classify "Linus Tech Tips"
    """
    from apps.cli.channelscope_cli.commands.classify import classify_command

    classify_command(reference)


@app.command()
@async_command
async def subscriptions(
    channel_id: str = typer.Argument(..., help="Channel ID (UC...)"),
    page_token: str | None = typer.Option(None, "--page-token", help="Page token"),
) -> None:
    """
    List a channel's public subscriptions, one page at a time.

    Examples:
        channelscope subscriptions UCewMTclBJZPaNEfbf-qYMGA
    """
    from apps.cli.channelscope_cli.commands.listings import subscriptions_command

    await subscriptions_command(channel_id, page_token=page_token)


@app.command()
@async_command
async def uploads(
    playlist_id: str = typer.Argument(..., help="Playlist ID, or a channel ID for its uploads"),
    page_token: str | None = typer.Option(None, "--page-token", help="Page token"),
) -> None:
    """
    List the videos of a playlist, one page at a time.

    Examples:
        channelscope uploads UU_x5XG1OV2P6uZZ5FSM9Ttw
        channelscope uploads UC_x5XG1OV2P6uZZ5FSM9Ttw
    """
    from apps.cli.channelscope_cli.commands.listings import uploads_command

    await uploads_command(playlist_id, page_token=page_token)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int | None = typer.Option(None, "--port", help="Port (default from config)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """
    Run the HTTP API.

    Examples:
        channelscope serve
        channelscope serve --port 8080
    """
    from apps.cli.channelscope_cli.commands.serve import serve_command

    serve_command(host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
