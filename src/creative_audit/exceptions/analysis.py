"""Analysis-related exceptions: archives, discovery, parsing, checks."""

from pathlib import Path
from typing import List, Optional, Sequence, Union

from .base import CreativeAuditError


class AnalysisError(CreativeAuditError):
    """Base class for analysis-related errors."""
    pass


class ArchiveError(AnalysisError):
    """Raised when an uploaded package cannot be read into a bundle."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot read creative package: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason


class DiscoveryError(AnalysisError):
    """Raised when no primary HTML document can be chosen for a bundle.

    This is fatal for the bundle: there is nothing to analyze.
    """

    def __init__(self, bundle_name: str, candidates: Optional[Sequence[str]] = None):
        candidates = list(candidates or [])
        details = {"bundle": bundle_name}
        if candidates:
            details["candidates"] = ", ".join(candidates)
        super().__init__(f"No primary HTML document found in {bundle_name}", details=details)
        self.bundle_name = bundle_name
        self.candidates: List[str] = candidates


class ParsingError(AnalysisError):
    """Raised when file content cannot be decoded or parsed."""

    def __init__(self, path: str, kind: str, reason: str):
        super().__init__(
            f"Failed to parse {kind} file: {path}",
            details={"path": path, "kind": kind, "reason": reason},
        )
        self.path = path
        self.kind = kind
        self.reason = reason


class CheckExecutionError(AnalysisError):
    """Raised (and caught by the runner) when a check cannot produce a finding."""

    def __init__(self, check_id: str, reason: str):
        super().__init__(
            f"Check {check_id} failed",
            details={"check": check_id, "reason": reason},
        )
        self.check_id = check_id
        self.reason = reason
