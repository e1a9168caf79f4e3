"""Check contract and the shared read-only context every check receives."""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Awaitable, Iterable, Optional, Protocol, Union

from ..models import (
    BundleResult,
    Finding,
    FindingOffender,
    Reference,
    RuntimeMetrics,
    Severity,
)

if TYPE_CHECKING:
    from ..bundle.models import Bundle
    from ..config import AuditSettings


class Priority(Enum):
    """How much a check's outcome counts toward bundle status.

    Only REQUIRED checks decide ``summary.status``; the others are counted
    but never downgrade the headline.
    """

    REQUIRED = "required"
    RECOMMENDED = "recommended"
    ADVISORY = "advisory"


class Profile:
    CM360 = "CM360"
    IAB = "IAB"


RUNTIME_TAG = "runtime"


class Check(Protocol):
    """A check reads the context (NEVER writes) and returns one finding.

    ``execute`` may be a coroutine function.
    """

    id: str
    title: str
    description: str
    profiles: frozenset[str]
    priority: Priority
    tags: frozenset[str]

    def execute(self, context: CheckContext) -> Union[Finding, Awaitable[Finding]]: ...


def applies_to(check: Check, profiles: Iterable[str]) -> bool:
    return bool(set(check.profiles) & set(profiles))


@dataclass(frozen=True)
class CheckContext:
    """Everything computed before the check stage, frozen.

    ``partial`` is the pre-check result (primary, size, references and load
    phases, no findings). ``runtime`` is only set when runtime metrics are
    being applied after the static pass.
    """

    bundle: Bundle
    files: tuple[str, ...]
    primary_path: str
    html_text: str
    references: tuple[Reference, ...]
    settings: AuditSettings
    partial: BundleResult
    runtime: Optional[RuntimeMetrics] = None
    # Decoded text per path, scoped to one check pass.
    _texts: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    @property
    def entry_name(self) -> str:
        return posixpath.basename(self.primary_path)

    def text_of(self, path: str) -> str:
        text = self._texts.get(path)
        if text is None:
            text = self.bundle.read_text(path)
            self._texts[path] = text
        return text


def make_finding(
    check: Check,
    severity: Severity,
    messages: Iterable[str] = (),
    offenders: Iterable[FindingOffender] = (),
) -> Finding:
    """Finding carrying the check's metadata."""
    return Finding(
        id=check.id,
        title=check.title,
        severity=severity,
        messages=tuple(messages),
        offenders=tuple(offenders),
        profiles=tuple(sorted(check.profiles)),
        description=check.description,
    )
