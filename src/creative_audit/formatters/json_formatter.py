"""JSON formatter for audit results."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, List

from .base import BaseFormatter

if TYPE_CHECKING:
    from ..engine import BundleOutcome


def outcome_to_dict(outcome: BundleOutcome) -> dict[str, Any]:
    if outcome.result is not None:
        return outcome.result.to_dict()
    return {"bundle_name": outcome.bundle_name, "error": outcome.error.to_dict()}


class JsonFormatter(BaseFormatter):
    """Render outcomes as a JSON array, one object per bundle."""

    def render(self, outcomes: List[BundleOutcome]) -> None:
        print(self.format(outcomes))

    def format(self, outcomes: List[BundleOutcome]) -> str:
        return json.dumps([outcome_to_dict(o) for o in outcomes], indent=2, default=str)
