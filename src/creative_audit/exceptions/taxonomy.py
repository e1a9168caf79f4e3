"""Structured error codes for audit failures.

Error Code Convention:
    CA1xx - Bundle and archive errors
    CA2xx - Parsing errors
    CA4xx - Weight accounting errors
    CA7xx - Check errors
    CA8xx - Configuration errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for logging and debugging."""

    # Bundle errors (CA1xx)
    CA100 = "CA100"  # Archive unreadable
    CA101 = "CA101"  # No primary document

    # Parsing errors (CA2xx)
    CA200 = "CA200"  # Decode failed
    CA201 = "CA201"  # HTML parse failed
    CA202 = "CA202"  # Vendor metadata JSON invalid

    # Weight errors (CA4xx)
    CA400 = "CA400"  # Compression failed, raw size used

    # Check errors (CA7xx)
    CA700 = "CA700"  # Check raised
    CA701 = "CA701"  # Check returned a non-finding

    # Configuration errors (CA8xx)
    CA800 = "CA800"  # Invalid settings


@dataclass
class AuditError(Exception):
    """Exception with structured context for logging.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (bundle, path, check id, etc.)
        recoverable: Whether the pipeline can continue
        recovery_hint: Suggested fix for the user
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recoverable: bool = True
    recovery_hint: str | None = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
        }
