"""timing — runtime timings for debugging, never a failure.

Profiles: CM360, IAB
Priority: advisory
"""

from __future__ import annotations

import math
from typing import Optional

from ..models import Finding, Severity
from .base import RUNTIME_TAG, CheckContext, Priority, Profile, make_finding


def _captured(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value)


class TimingCheck:
    id = "timing"
    title = "Timing (Debug)"
    description = "DOMContentLoaded, render start and frame count from a runtime capture."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.ADVISORY
    tags = frozenset({RUNTIME_TAG, "debug"})

    def execute(self, context: CheckContext) -> Finding:
        runtime = context.runtime
        if runtime is None:
            return make_finding(self, Severity.PENDING, ["Awaiting runtime metrics"])

        messages = []
        if _captured(runtime.dom_content_loaded):
            messages.append(f"DOMContentLoaded {round(runtime.dom_content_loaded)} ms")
        else:
            messages.append("DOMContentLoaded not captured")

        if _captured(runtime.visual_start):
            messages.append(f"Time to Render ~{round(runtime.visual_start)} ms")
        else:
            messages.append("Time to Render not captured")

        if runtime.frames is not None:
            messages.append(f"Frames observed {runtime.frames}")
        else:
            messages.append("Frames not tracked")

        if runtime.source:
            messages.append(f"Source: {runtime.source}")
        return make_finding(self, Severity.PASS, messages)
