"""CSV formatter for audit results: one row per offender."""

from __future__ import annotations

import csv
import io
from typing import TYPE_CHECKING, List

from .base import BaseFormatter

if TYPE_CHECKING:
    from ..engine import BundleOutcome

HEADER = ["bundle", "check", "severity", "messages", "offender", "detail", "line"]


class CsvFormatter(BaseFormatter):
    """Render findings as CSV.

    Findings without offenders get a single row with empty offender columns;
    bundles that failed to load get one ``error`` row.
    """

    def render(self, outcomes: List[BundleOutcome]) -> None:
        print(self.format(outcomes), end="")

    def format(self, outcomes: List[BundleOutcome]) -> str:
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(HEADER)
        for outcome in outcomes:
            if outcome.result is None:
                writer.writerow([outcome.bundle_name, "error", "FAIL", str(outcome.error), "", "", ""])
                continue
            for finding in outcome.result.findings:
                messages = " | ".join(finding.messages)
                base = [outcome.bundle_name, finding.id, finding.severity.value, messages]
                if not finding.offenders:
                    writer.writerow(base + ["", "", ""])
                for offender in finding.offenders:
                    line = "" if offender.line is None else offender.line
                    writer.writerow(base + [offender.path, offender.detail or "", line])
        return output.getvalue()
