"""Base formatter interface for audit output rendering."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..engine import BundleOutcome


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, outcomes: List[BundleOutcome]) -> None:
        """Render outcomes to stdout/stderr as appropriate."""

    @abstractmethod
    def format(self, outcomes: List[BundleOutcome]) -> str:
        """Return formatted string representation of outcomes."""
