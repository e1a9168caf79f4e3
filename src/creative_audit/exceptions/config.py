"""Configuration exceptions: paths, settings, check registration."""

from pathlib import Path
from typing import Any

from .base import CreativeAuditError


class ConfigurationError(CreativeAuditError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class DuplicateCheckError(ConfigurationError):
    """Raised when two checks are registered under the same id."""

    def __init__(self, check_id: str):
        super().__init__(f"Check already registered: {check_id}", details={"check": check_id})
        self.check_id = check_id
