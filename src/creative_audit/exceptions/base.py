"""Base exception for creative-audit."""

from typing import Any, Dict, Optional


class CreativeAuditError(Exception):
    """Base exception for all creative-audit errors.

    ``details`` holds short string facts (paths, check ids, reasons) that are
    shown after the message and exported with bundle outcomes.
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        facts = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({facts})"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": type(self).__name__, "message": self.message, "details": dict(self.details)}
