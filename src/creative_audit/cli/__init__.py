"""CLI entry point — registers all subcommands."""

from typing import Optional

import typer

from ._common import console

app = typer.Typer(
    name="creative-audit",
    help="Creative Audit - CM360 / IAB compliance checks for HTML5 ad bundles",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        is_eager=True,
    ),
):
    """Audit zipped HTML5 creatives before trafficking."""
    from .. import __version__

    if version:
        console.print(f"[bold cyan]Creative Audit[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


# Import subcommands to register them
from .audit import audit as _audit  # noqa: F401, E402
from .checks_cmd import list_checks as _list_checks  # noqa: F401, E402
