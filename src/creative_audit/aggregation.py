"""Summary aggregation and post-hoc patching of bundle results.

Bundle status folds ``worst`` over the required findings only; recommended
and advisory findings are counted but never move the headline. PENDING
findings are counted separately and never reach the status.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Callable, Iterable

from .checks.base import RUNTIME_TAG, Check, CheckContext
from .checks.runner import run_check
from .logging_config import get_logger
from .models import BundleResult, BundleResultSummary, Finding, RuntimeMetrics, Severity, worst_of

logger = get_logger(__name__)

ContextFactory = Callable[[BundleResult, RuntimeMetrics], CheckContext]


def summarize(
    findings: Iterable[Finding],
    required_ids: Iterable[str],
    orphan_count: int = 0,
    missing_asset_count: int = 0,
) -> BundleResultSummary:
    findings = list(findings)
    required = set(required_ids)
    counts = {severity: 0 for severity in Severity}
    for finding in findings:
        counts[finding.severity] += 1

    status = worst_of(
        f.severity for f in findings if f.id in required and f.severity.is_terminal
    )
    return BundleResultSummary(
        status=status,
        total_findings=len(findings),
        fails=counts[Severity.FAIL],
        warns=counts[Severity.WARN],
        passes=counts[Severity.PASS],
        pending=counts[Severity.PENDING],
        orphan_count=orphan_count,
        missing_asset_count=missing_asset_count,
    )


def resummarize(result: BundleResult, findings: tuple[Finding, ...]) -> BundleResultSummary:
    """Recompute a summary for new findings, keeping the bundle-level counts."""
    return summarize(
        findings,
        result.required_ids,
        orphan_count=result.summary.orphan_count,
        missing_asset_count=result.summary.missing_asset_count,
    )


def patch_finding(result: BundleResult, finding: Finding) -> BundleResult:
    """Replace the finding with the same id and recompute the summary.

    Raises:
        KeyError: If ``result`` has no finding with that id
    """
    ids = [f.id for f in result.findings]
    if finding.id not in ids:
        raise KeyError(finding.id)

    index = ids.index(finding.id)
    findings = result.findings[:index] + (finding,) + result.findings[index + 1 :]
    return replace(result, findings=findings, summary=resummarize(result, findings))


async def apply_runtime_metrics_async(
    result: BundleResult,
    runtime: RuntimeMetrics,
    context_factory: ContextFactory,
    checks: Iterable[Check],
) -> BundleResult:
    """Re-run runtime-tagged checks with ``runtime`` attached and patch them in.

    Only checks that already produced a finding are re-run, so profile
    selection from the original audit still applies.
    """
    present = {f.id for f in result.findings}
    targets = [c for c in checks if RUNTIME_TAG in c.tags and c.id in present]
    context = context_factory(result, runtime)

    patched = replace(result, runtime=runtime)
    findings = await asyncio.gather(*(run_check(c, context) for c in targets))
    for finding in findings:
        patched = patch_finding(patched, finding)

    logger.debug(f"Applied runtime metrics to {len(targets)} checks for {result.bundle_name}")
    return patched


def apply_runtime_metrics(
    result: BundleResult,
    runtime: RuntimeMetrics,
    context_factory: ContextFactory,
    checks: Iterable[Check],
) -> BundleResult:
    return asyncio.run(apply_runtime_metrics_async(result, runtime, context_factory, checks))
