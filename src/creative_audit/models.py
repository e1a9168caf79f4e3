"""Data models for bundle analysis results.

Every record here is a frozen value: stages build new values rather than
mutating earlier ones. ``to_dict`` methods produce plain JSON-safe data for
persistence and export.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional, Union


class Severity(Enum):
    """Finding severity.

    PASS < WARN < FAIL form a total order. PENDING marks a check whose answer
    depends on runtime data not available to static analysis; it has no rank
    and never becomes a bundle status.
    """

    PASS = "PASS"
    WARN = "WARN"
    FAIL = "FAIL"
    PENDING = "PENDING"

    @property
    def rank(self) -> Optional[int]:
        return _RANK.get(self)

    @property
    def is_terminal(self) -> bool:
        return self is not Severity.PENDING

    @classmethod
    def parse(cls, value: Union[str, "Severity"]) -> "Severity":
        if isinstance(value, Severity):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown severity: {value!r}") from None


_RANK = {Severity.PASS: 0, Severity.WARN: 1, Severity.FAIL: 2}


def worst(a: Severity, b: Severity) -> Severity:
    """Return whichever severity ranks higher.

    PENDING is absorbed by any terminal operand, so folding over PASS/WARN/FAIL
    inputs can never produce PENDING.
    """
    if a is Severity.PENDING:
        return b
    if b is Severity.PENDING:
        return a
    return a if _RANK[a] >= _RANK[b] else b


def worst_of(severities: Iterable[Severity], start: Severity = Severity.PASS) -> Severity:
    result = start
    for severity in severities:
        result = worst(result, severity)
    return result


# ── Size detection ────────────────────────────────────────────────


@dataclass(frozen=True)
class AdSize:
    width: int
    height: int

    @property
    def area(self) -> int:
        return self.width * self.height

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"

    def to_dict(self) -> dict[str, int]:
        return {"width": self.width, "height": self.height}


class SizeSourceMethod(Enum):
    """How a creative size was detected."""

    META = "meta"
    GWD_ADMETADATA = "gwd-admetadata"
    CSS_MEDIA = "css-media"
    CSS_RULE = "css-rule"
    INLINE_STYLE = "inline-style"
    CSS_FILE = "css-file"


@dataclass(frozen=True)
class SizeSource:
    method: SizeSourceMethod
    snippet: Optional[str] = None
    path: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"method": self.method.value, "snippet": self.snippet, "path": self.path}


@dataclass(frozen=True)
class DetectedSize:
    """A size candidate together with its provenance."""

    size: AdSize
    source: SizeSource


@dataclass(frozen=True)
class PrimaryAsset:
    path: str
    ad_size: Optional[AdSize] = None
    size_source: Optional[SizeSource] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "ad_size": self.ad_size.to_dict() if self.ad_size else None,
            "size_source": self.size_source.to_dict() if self.size_source else None,
        }


# ── References ────────────────────────────────────────────────────


class ReferenceType(Enum):
    IMAGE = "img"
    STYLESHEET = "css"
    SCRIPT = "js"
    FONT = "font"
    MEDIA = "media"
    NETWORK = "xhr"
    ANCHOR = "anchor"


@dataclass(frozen=True)
class Reference:
    """One asset dependency edge from ``from_path`` to ``url``."""

    from_path: str
    type: ReferenceType
    url: str
    normalized: Optional[str] = None
    in_zip: bool = False
    external: bool = False
    secure: bool = False
    line: Optional[int] = None
    column: Optional[int] = None

    def __post_init__(self) -> None:
        if self.in_zip and self.normalized is None:
            raise ValueError(f"in-bundle reference needs a normalized path: {self.url!r}")
        if self.in_zip and self.external:
            raise ValueError(f"reference cannot be both external and in-bundle: {self.url!r}")

    @property
    def is_local(self) -> bool:
        """True when the reference resolved to a bundle path (found or not)."""
        return not self.external and self.normalized is not None

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_path,
            "type": self.type.value,
            "url": self.url,
            "normalized": self.normalized,
            "in_zip": self.in_zip,
            "external": self.external,
            "secure": self.secure,
            "line": self.line,
            "column": self.column,
        }


# ── Findings ──────────────────────────────────────────────────────


class OffenderCategory(Enum):
    CODE = "code"
    ASSETS = "assets"
    ENVIRONMENT = "environment"
    PACKAGING = "packaging"


@dataclass(frozen=True)
class FindingOffender:
    path: str
    detail: Optional[str] = None
    line: Optional[int] = None
    category: Optional[OffenderCategory] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "detail": self.detail,
            "line": self.line,
            "category": self.category.value if self.category else None,
        }


@dataclass(frozen=True)
class Finding:
    """The result of one check against one bundle."""

    id: str
    title: str
    severity: Severity
    messages: tuple[str, ...] = ()
    offenders: tuple[FindingOffender, ...] = ()
    profiles: tuple[str, ...] = ()
    description: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept lists from check authors; store tuples.
        object.__setattr__(self, "severity", Severity.parse(self.severity))
        object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "offenders", tuple(self.offenders))
        object.__setattr__(self, "profiles", tuple(self.profiles))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "severity": self.severity.value,
            "messages": list(self.messages),
            "offenders": [o.to_dict() for o in self.offenders],
            "profiles": list(self.profiles),
            "description": self.description,
        }


@dataclass(frozen=True)
class BundleResultSummary:
    status: Severity = Severity.PASS
    total_findings: int = 0
    fails: int = 0
    warns: int = 0
    passes: int = 0
    pending: int = 0
    orphan_count: int = 0
    missing_asset_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "total_findings": self.total_findings,
            "fails": self.fails,
            "warns": self.warns,
            "pass": self.passes,
            "pending": self.pending,
            "orphan_count": self.orphan_count,
            "missing_asset_count": self.missing_asset_count,
        }


# ── Load-phase metrics ────────────────────────────────────────────


@dataclass(frozen=True)
class LoadPhaseMetrics:
    """Byte and request totals per load phase.

    Byte budgets use gzip-compressed sizes; the ``*_uncompressed`` fields and
    ``total_bytes`` are raw sizes kept for display.
    """

    initial_bytes: int = 0
    subload_bytes: int = 0
    initial_bytes_uncompressed: int = 0
    subload_bytes_uncompressed: int = 0
    total_bytes: int = 0
    total_bytes_compressed: int = 0
    zipped_bytes: int = 0
    initial_requests: int = 0
    subload_requests: int = 0
    total_requests: int = 0
    initial_hosts: int = 0
    total_hosts: int = 0
    initial_assets: tuple[str, ...] = ()
    subload_assets: tuple[str, ...] = ()

    @property
    def subsequent_bytes(self) -> int:
        return self.subload_bytes

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_bytes": self.initial_bytes,
            "subload_bytes": self.subload_bytes,
            "subsequent_bytes": self.subsequent_bytes,
            "initial_bytes_uncompressed": self.initial_bytes_uncompressed,
            "subsequent_bytes_uncompressed": self.subload_bytes_uncompressed,
            "total_bytes": self.total_bytes,
            "total_bytes_compressed": self.total_bytes_compressed,
            "zipped_bytes": self.zipped_bytes,
            "initial_requests": self.initial_requests,
            "subload_requests": self.subload_requests,
            "total_requests": self.total_requests,
            "initial_hosts": self.initial_hosts,
            "total_hosts": self.total_hosts,
        }


@dataclass(frozen=True)
class RuntimeMetrics:
    """Metrics supplied after the static pass by a live preview.

    All fields are optional; checks treat a missing value as "not captured".
    """

    source: Optional[str] = None
    captured_at: Optional[float] = None
    dom_content_loaded: Optional[float] = None
    visual_start: Optional[float] = None
    frames: Optional[int] = None
    load_event_time: Optional[float] = None
    initial_requests: Optional[int] = None
    subload_requests: Optional[int] = None
    total_requests: Optional[int] = None
    initial_bytes: Optional[int] = None
    subload_bytes: Optional[int] = None
    total_bytes: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeMetrics":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return {k: getattr(self, k) for k in self.__dataclass_fields__}


# ── Bundle result ─────────────────────────────────────────────────


@dataclass(frozen=True)
class BundleResult:
    """One analyzed bundle: discovery, parsing, load phases and findings.

    ``required_ids`` records which finding ids decide ``summary.status`` so the
    summary can be recomputed after a finding is patched.
    """

    bundle_id: str
    bundle_name: str
    primary: Optional[PrimaryAsset] = None
    ad_size: Optional[AdSize] = None
    ad_size_source: Optional[SizeSource] = None
    findings: tuple[Finding, ...] = ()
    references: tuple[Reference, ...] = ()
    summary: BundleResultSummary = field(default_factory=BundleResultSummary)
    required_ids: frozenset[str] = frozenset()
    metrics: LoadPhaseMetrics = field(default_factory=LoadPhaseMetrics)
    runtime: Optional[RuntimeMetrics] = None

    def finding(self, finding_id: str) -> Optional[Finding]:
        for f in self.findings:
            if f.id == finding_id:
                return f
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "bundle_id": self.bundle_id,
            "bundle_name": self.bundle_name,
            "primary": self.primary.to_dict() if self.primary else None,
            "ad_size": self.ad_size.to_dict() if self.ad_size else None,
            "ad_size_source": self.ad_size_source.to_dict() if self.ad_size_source else None,
            "summary": self.summary.to_dict(),
            "required_ids": sorted(self.required_ids),
            "findings": [f.to_dict() for f in self.findings],
            "references": [r.to_dict() for r in self.references],
            "runtime": self.runtime.to_dict() if self.runtime else None,
        }
        data.update(self.metrics.to_dict())
        return data
