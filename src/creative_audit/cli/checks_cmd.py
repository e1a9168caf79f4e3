"""Checks command: list the registered checks."""

from typing import List, Optional

import typer
from rich.table import Table

from ..checks import default_registry
from ..config import KNOWN_PROFILES
from . import app
from ._common import console


@app.command("checks")
def list_checks(
    profile: Optional[List[str]] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Only show checks for this profile (repeatable)",
    ),
):
    """
    List available checks with their profiles and priority.

    [bold cyan]Examples:[/bold cyan]

      creative-audit checks

      creative-audit checks --profile IAB
    """
    registry = default_registry()
    profiles = [p.upper() for p in profile] if profile else list(KNOWN_PROFILES)
    unknown = sorted(set(profiles) - set(KNOWN_PROFILES))
    if unknown:
        console.print(f"[red]Error:[/red] unknown profile(s): {', '.join(unknown)}")
        raise typer.Exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Profiles")
    table.add_column("Priority")
    table.add_column("Tags", style="dim")
    table.add_column("Description")

    for check in registry.select(profiles):
        table.add_row(
            check.id,
            ", ".join(sorted(check.profiles)),
            check.priority.value,
            ", ".join(sorted(check.tags)),
            check.description,
        )
    console.print(table)
