"""Exception hierarchy for creative-audit."""

from .analysis import (
    AnalysisError,
    ArchiveError,
    CheckExecutionError,
    DiscoveryError,
    ParsingError,
)
from .base import CreativeAuditError
from .config import (
    ConfigurationError,
    DuplicateCheckError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "CreativeAuditError",
    "AnalysisError",
    "ArchiveError",
    "CheckExecutionError",
    "DiscoveryError",
    "ParsingError",
    "ConfigurationError",
    "DuplicateCheckError",
    "InvalidConfigError",
    "InvalidPathError",
]
