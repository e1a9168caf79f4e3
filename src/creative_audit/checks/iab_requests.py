"""iabRequests — initial-load request cap.

Profiles: IAB
Priority: required
"""

from __future__ import annotations

from ..models import Finding, Severity
from .base import CheckContext, Priority, Profile, make_finding


class IabRequestsCheck:
    id = "iabRequests"
    title = "IAB Initial Requests"
    description = "IAB: initial load should make at most 15 requests."
    profiles = frozenset({Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"requests", "performance", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        thresholds = context.settings.thresholds
        metrics = context.partial.metrics
        cap = thresholds.initial_request_cap
        initial = metrics.initial_requests

        if initial > cap:
            severity = Severity.FAIL
            messages = [f"Initial requests: {initial}; exceeds cap of {cap}"]
        elif initial > cap * thresholds.request_warn_ratio:
            severity = Severity.WARN
            messages = [f"Initial requests: {initial}; near cap of {cap}"]
        else:
            severity = Severity.PASS
            messages = [f"Initial requests: {initial}; within cap of {cap}"]

        messages.append(f"Total referenced requests: {metrics.total_requests}")
        if metrics.total_hosts:
            messages.append(
                f"External hosts: {metrics.initial_hosts} initial, {metrics.total_hosts} total"
            )
        return make_finding(self, severity, messages)
