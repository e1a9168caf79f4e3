"""httpsOnly — no insecure external references.

Profiles: CM360, IAB
Priority: required
Severity: settings.http_severity
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding


class HttpsOnlyCheck:
    id = "httpsOnly"
    title = "HTTPS Only"
    description = "External resources must be requested over HTTPS."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"security", "references"})

    def execute(self, context: CheckContext) -> Finding:
        insecure = [
            ref for ref in context.references if ref.external and ref.url.lower().startswith("http:")
        ]
        if not insecure:
            return make_finding(self, Severity.PASS, ["All external references use HTTPS"])

        offenders = [
            FindingOffender(ref.from_path, ref.url, ref.line, OffenderCategory.CODE) for ref in insecure
        ]
        return make_finding(
            self,
            context.settings.severity("http_severity"),
            [f"{len(insecure)} HTTP (non-secure) external reference(s)"],
            offenders,
        )
