"""iabWeight — compressed initial and subload budgets, zipped size advisory.

Profiles: CM360, IAB
Priority: required

Budgets compare gzip-compressed sizes. Exceeding either load budget is a
FAIL; exceeding the zipped-size recommendation alone is a WARN.
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity, worst
from .base import CheckContext, Priority, Profile, make_finding

_TOP_OFFENDERS = 5


def _kb(value: int) -> str:
    return f"{value / 1024:.1f}KB"


class IabWeightCheck:
    id = "iabWeight"
    title = "IAB Weight"
    description = "Initial and subload weight within IAB budgets (gzip-compressed)."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"weight", "performance", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        thresholds = context.settings.thresholds
        metrics = context.partial.metrics
        zipped = metrics.zipped_bytes or context.bundle.byte_length
        severity = Severity.PASS
        messages: list[str] = []
        offenders: list[FindingOffender] = []

        initial_cap = thresholds.initial_load_bytes
        if metrics.initial_bytes > initial_cap:
            severity = Severity.FAIL
            messages.append(
                f"Initial load {_kb(metrics.initial_bytes)} exceeds cap {thresholds.initial_load_kb}KB"
            )
            offenders.extend(self._largest(context, metrics.initial_assets, "initial"))
        else:
            messages.append(
                f"Initial load {_kb(metrics.initial_bytes)} within cap {thresholds.initial_load_kb}KB"
            )

        subload_cap = thresholds.subsequent_load_bytes
        if metrics.subload_bytes > subload_cap:
            severity = Severity.FAIL
            messages.append(
                f"Subsequent (polite) load {_kb(metrics.subload_bytes)} exceeds cap "
                f"{thresholds.subsequent_load_kb}KB"
            )
            offenders.extend(self._largest(context, metrics.subload_assets, "subload"))
        else:
            messages.append(
                f"Subsequent (polite) load {_kb(metrics.subload_bytes)} within cap "
                f"{thresholds.subsequent_load_kb}KB"
            )

        if zipped > thresholds.max_zipped_bytes:
            severity = worst(severity, Severity.WARN)
            messages.append(
                f"Compressed creative size {_kb(zipped)} exceeds recommended max {thresholds.max_zipped_kb}KB"
            )
        else:
            messages.append(
                f"Compressed creative size {_kb(zipped)} within recommended max {thresholds.max_zipped_kb}KB"
            )

        messages.append(
            f"Total uncompressed {_kb(metrics.total_bytes)} "
            f"(initial {_kb(metrics.initial_bytes_uncompressed)}, "
            f"subsequent {_kb(metrics.subload_bytes_uncompressed)})"
        )
        return make_finding(self, severity, messages, offenders)

    @staticmethod
    def _largest(context: CheckContext, paths: tuple[str, ...], phase: str) -> list[FindingOffender]:
        """Largest files of an over-budget phase, by raw size."""
        ranked = sorted(paths, key=lambda p: context.bundle.size_of(p), reverse=True)
        return [
            FindingOffender(
                path,
                f"{_kb(context.bundle.size_of(path))} uncompressed ({phase})",
                None,
                OffenderCategory.ASSETS,
            )
            for path in ranked[:_TOP_OFFENDERS]
        ]
