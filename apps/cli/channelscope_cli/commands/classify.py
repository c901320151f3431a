"""CLI classify command implementation.

Shows the candidates a reference would be tried as, without any network call.
"""

from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from packages.core.errors import InvalidInputError
from packages.core.resolution.classifier import classify

console = Console()


def classify_command(raw: str) -> None:
    """Print the ordered candidate list for ``raw``.

    Raises:
        typer.Exit: 2 if the reference is invalid.
    """
    try:
        candidates = classify(raw)
    except InvalidInputError as e:
        console.print(f"[red]{e.kind}: {e.message}[/red]")
        raise typer.Exit(2) from e

    table = Table(title="Resolution candidates")
    table.add_column("Priority", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Query")
    table.add_column("Operation", style="dim")

    for candidate in candidates:
        table.add_row(
            str(candidate.priority),
            candidate.kind.value,
            candidate.query,
            candidate.operation.value,
        )
    console.print(table)


__all__ = ["classify_command"]
