"""timeToRender — visual start under the render target.

Profiles: IAB
Priority: recommended

Needs runtime metrics; PENDING until they are applied.
"""

from __future__ import annotations

import math

from ..models import Finding, Severity
from .base import RUNTIME_TAG, CheckContext, Priority, Profile, make_finding


class TimeToRenderCheck:
    id = "timeToRender"
    title = "Time to Render"
    description = "IAB: first visual render should start within 500 ms."
    profiles = frozenset({Profile.IAB})
    priority = Priority.RECOMMENDED
    tags = frozenset({RUNTIME_TAG, "performance", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        target = context.settings.thresholds.render_target_ms
        runtime = context.runtime
        if runtime is None:
            return make_finding(self, Severity.PENDING, ["Awaiting runtime metrics", f"Target: < {target} ms"])

        visual = runtime.visual_start
        if visual is None or not math.isfinite(visual):
            return make_finding(
                self,
                Severity.WARN,
                ["Not captured", f"Target: < {target} ms", "Preview needed for timing measurement"],
            )

        messages = [f"Render start ~{round(visual)} ms", f"Target: < {target} ms"]
        if visual < target:
            messages.append("Fast visual start")
            return make_finding(self, Severity.PASS, messages)

        messages.append(f"Slow render ({round(visual - target)}ms over target)")
        messages.append("Inline critical CSS and defer JavaScript")
        return make_finding(self, Severity.WARN, messages)
