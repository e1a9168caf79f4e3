"""Check runner.

Every applicable check runs against the same frozen context. Checks are
isolated: one that raises, or returns something other than a Finding,
becomes a single FAIL finding for its own id and nothing else is affected.
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import replace
from typing import Iterable, Optional

from ..exceptions import CheckExecutionError
from ..exceptions.taxonomy import AuditError, ErrorCode
from ..logging_config import get_logger
from ..models import Finding, FindingOffender, Severity
from .base import Check, CheckContext, applies_to

logger = get_logger(__name__)


def cap_offenders(finding: Finding, cap: int) -> Finding:
    """Truncate offenders beyond ``cap`` and say how many were dropped."""
    extra = len(finding.offenders) - cap
    if extra <= 0:
        return finding
    return replace(
        finding,
        offenders=finding.offenders[:cap],
        messages=finding.messages + (f"{extra} more offender(s) not shown",),
    )


def stamp(check: Check, finding: Finding) -> Finding:
    """Force the check's id and fill in any metadata the check left out."""
    return replace(
        finding,
        id=check.id,
        title=finding.title or check.title,
        profiles=finding.profiles or tuple(sorted(check.profiles)),
        description=finding.description if finding.description is not None else check.description,
    )


def failure_finding(check: Check, context: CheckContext, error: CheckExecutionError) -> Finding:
    return Finding(
        id=check.id,
        title=check.title,
        severity=Severity.FAIL,
        messages=(f"Check could not complete: {error.reason}",),
        offenders=(FindingOffender(path=context.primary_path, detail=error.reason),),
        profiles=tuple(sorted(check.profiles)),
        description=check.description,
    )


def _log_failure(check: Check, context: CheckContext, error: CheckExecutionError, code: ErrorCode) -> None:
    audit_error = AuditError(
        message=str(error),
        code=code,
        context={"check": check.id, "bundle": context.bundle.name},
        recovery_hint="Report the failing check with the bundle attached",
    )
    logger.warning(str(audit_error), extra={"audit_error": audit_error.to_json()})


async def run_check(check: Check, context: CheckContext, offender_cap: Optional[int] = None) -> Finding:
    """Run one check, converting any failure into a FAIL finding."""
    try:
        result = check.execute(context)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        error = CheckExecutionError(check.id, f"{type(e).__name__}: {e}")
        _log_failure(check, context, error, ErrorCode.CA700)
        return failure_finding(check, context, error)

    if not isinstance(result, Finding):
        error = CheckExecutionError(check.id, f"returned {type(result).__name__} instead of a Finding")
        _log_failure(check, context, error, ErrorCode.CA701)
        return failure_finding(check, context, error)

    finding = stamp(check, result)
    if offender_cap is None:
        offender_cap = context.settings.thresholds.offender_cap
    return cap_offenders(finding, offender_cap)


async def run_checks(
    checks: Iterable[Check],
    context: CheckContext,
    profiles: Optional[Iterable[str]] = None,
) -> list[Finding]:
    """Run applicable checks concurrently; findings come back in input order."""
    active = tuple(profiles) if profiles is not None else context.settings.profiles
    selected = [c for c in checks if applies_to(c, active)]
    logger.debug(f"Running {len(selected)} checks for {context.bundle.name}")
    results = await asyncio.gather(*(run_check(c, context) for c in selected))
    return list(results)


def run_checks_sync(
    checks: Iterable[Check],
    context: CheckContext,
    profiles: Optional[Iterable[str]] = None,
) -> list[Finding]:
    """Blocking wrapper around :func:`run_checks` for callers without a loop."""
    return asyncio.run(run_checks(checks, context, profiles))
