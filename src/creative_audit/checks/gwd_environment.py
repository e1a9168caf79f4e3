"""gwdEnvironment — flag Google Web Designer exports.

Profiles: CM360, IAB
Priority: advisory
"""

from __future__ import annotations

import re

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import is_markup, is_system_artifact, line_at

_GWD_SIGNATURE_RE = re.compile(r"gwd-page-wrapper|GWD_preventAutoplay|gwd-google", re.IGNORECASE)


class GwdEnvironmentCheck:
    id = "gwdEnvironment"
    title = "GWD Environment"
    description = "Detects Google Web Designer runtime artifacts that need the CM360 environment."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.ADVISORY
    tags = frozenset({"gwd", "environment"})

    def execute(self, context: CheckContext) -> Finding:
        offenders: list[FindingOffender] = []
        for path in context.files:
            if not is_markup(path) or is_system_artifact(path):
                continue
            text = context.text_of(path)
            m = _GWD_SIGNATURE_RE.search(text)
            if m:
                detail = f"GWD signature found: {m.group(0)}"
                offenders.append(
                    FindingOffender(path, detail, line_at(text, m.start()), OffenderCategory.ENVIRONMENT)
                )

        if not offenders:
            return make_finding(self, Severity.PASS, ["No Google Web Designer signatures detected"])

        messages = ["Google Web Designer export detected"]
        if Profile.CM360 not in context.settings.profiles:
            messages.append("Profile mismatch: verify environment configuration for CM360.")
        return make_finding(self, Severity.WARN, messages, offenders)
