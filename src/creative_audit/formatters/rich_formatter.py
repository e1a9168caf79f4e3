"""Rich terminal formatter for audit results."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..models import BundleResult, Severity
from .base import BaseFormatter

if TYPE_CHECKING:
    from ..engine import BundleOutcome

_SEVERITY_STYLE = {
    Severity.PASS: "green",
    Severity.WARN: "yellow",
    Severity.FAIL: "red bold",
    Severity.PENDING: "dim",
}

# Offenders shown per finding in the terminal; json/csv carry them all.
_OFFENDER_PREVIEW = 5


def severity_label(severity: Severity) -> str:
    style = _SEVERITY_STYLE[severity]
    return f"[{style}]{severity.value}[/{style}]"


def _kb(value: int) -> str:
    return f"{value / 1024:.1f} KB"


class RichFormatter(BaseFormatter):
    """Rich terminal output: a summary panel and a findings table per bundle."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def render(self, outcomes: List[BundleOutcome]) -> None:
        for outcome in outcomes:
            if outcome.result is None:
                self.console.print(
                    Panel(
                        f"[red]{outcome.error}[/red]",
                        title=f"[bold]{outcome.bundle_name}[/bold]",
                        expand=False,
                    )
                )
                continue
            self._print_summary(outcome.result)
            self._print_findings(outcome.result)
            self.console.print()

    def format(self, outcomes: List[BundleOutcome]) -> str:
        # Rich output goes directly to the console; return empty string
        self.render(outcomes)
        return ""

    def _print_summary(self, result: BundleResult) -> None:
        summary = result.summary
        metrics = result.metrics
        primary = result.primary.path if result.primary else "-"
        size = str(result.ad_size) if result.ad_size else "unknown"
        source = f" ({result.ad_size_source.method.value})" if result.ad_size_source else ""

        lines = [
            f"Status: {severity_label(summary.status)}",
            f"Primary: [cyan]{primary}[/cyan]   Ad size: {size}{source}",
            f"Findings: {summary.fails} fail, {summary.warns} warn, "
            f"{summary.passes} pass, {summary.pending} pending",
            f"Initial load: {_kb(metrics.initial_bytes)} / {metrics.initial_requests} requests   "
            f"Subload: {_kb(metrics.subload_bytes)} / {metrics.subload_requests} requests",
            f"Missing assets: {summary.missing_asset_count}   Orphans: {summary.orphan_count}",
        ]
        self.console.print(
            Panel(
                "\n".join(lines),
                title=f"[bold]{result.bundle_name}[/bold]",
                subtitle=f"[dim]{result.bundle_id}[/dim]",
                expand=False,
            )
        )

    def _print_findings(self, result: BundleResult) -> None:
        table = Table(show_header=True, header_style="bold", expand=False)
        table.add_column("Check", style="cyan", no_wrap=True)
        table.add_column("Severity", no_wrap=True)
        table.add_column("Details")

        for finding in result.findings:
            details = list(finding.messages)
            for offender in finding.offenders[:_OFFENDER_PREVIEW]:
                where = offender.path if offender.line is None else f"{offender.path}:{offender.line}"
                details.append(f"[dim]- {where}[/dim] {offender.detail or ''}".rstrip())
            hidden = len(finding.offenders) - _OFFENDER_PREVIEW
            if hidden > 0:
                details.append(f"[dim]... and {hidden} more[/dim]")

            required = "" if finding.id in result.required_ids else " [dim](info)[/dim]"
            table.add_row(
                f"{finding.id}{required}",
                severity_label(finding.severity),
                "\n".join(details),
            )
        self.console.print(table)
