"""Audit command: run the checks over one or more bundles."""

from pathlib import Path
from typing import List, Optional

import click
import typer

from ..engine import AuditEngine, BundleOutcome
from ..exceptions import CreativeAuditError
from ..formatters import get_formatter
from ..logging_config import setup_logging
from ..models import Severity
from . import app
from ._common import console, resolve_settings

# Bundle statuses that trip --fail-on
_FAIL_ON = {
    "fail": {Severity.FAIL},
    "warn": {Severity.FAIL, Severity.WARN},
}


def should_fail(outcomes: List[BundleOutcome], fail_on: Optional[str]) -> bool:
    """True if any bundle errored, or any status meets the ``--fail-on`` level."""
    if any(not o.ok for o in outcomes):
        return True
    if fail_on is None:
        return False
    trip = _FAIL_ON[fail_on.lower()]
    return any(o.result.summary.status in trip for o in outcomes)


@app.command()
def audit(
    paths: List[Path] = typer.Argument(
        ...,
        help="ZIP/ADZ archives or unpacked creative folders",
        exists=True,
        readable=True,
    ),
    profile: Optional[List[str]] = typer.Option(
        None,
        "--profile",
        "-p",
        help="Compliance profile to apply (repeatable): CM360 | IAB",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Output format: rich | json | csv",
        click_type=click.Choice(["rich", "json", "csv"], case_sensitive=False),
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel bundles (default: auto-detect)",
        min=1,
        max=32,
    ),
    fail_on: Optional[str] = typer.Option(
        None,
        "--fail-on",
        help="Exit 1 if any bundle status meets threshold: fail | warn",
        click_type=click.Choice(["fail", "warn"], case_sensitive=False),
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only log errors",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Append logs, with structured error payloads, to this file",
        dir_okay=False,
    ),
):
    """
    Audit HTML5 creative bundles against CM360 and IAB rules.

    [bold cyan]Examples:[/bold cyan]

      creative-audit audit banner_300x250.zip

      creative-audit audit creatives/*.zip --profile IAB --format json

      creative-audit audit ./unzipped --fail-on warn
    """
    logger = setup_logging(verbose=verbose, quiet=quiet, log_file=str(log_file) if log_file else None)

    try:
        settings = resolve_settings(
            config=config,
            profiles=profile,
            workers=workers,
            verbose=verbose,
            quiet=quiet,
        )
        engine = AuditEngine(settings)
        outcomes = engine.analyze_many(paths, workers=settings.workers)
        get_formatter(output_format.lower()).render(outcomes)

    except CreativeAuditError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Audit interrupted by user")
        console.print("\n[yellow]Audit interrupted[/yellow]")
        raise typer.Exit(130)

    if should_fail(outcomes, fail_on):
        raise typer.Exit(1)
