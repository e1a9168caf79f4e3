"""orphanAssets — packaged files nothing references.

Profiles: CM360, IAB
Priority: advisory
Severity: settings.orphan_severity

Dynamic loads (scripts building paths at runtime) are invisible to static
analysis, so orphans are advisory only.
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import orphan_paths


class OrphanAssetsCheck:
    id = "orphanAssets"
    title = "Orphaned Assets"
    description = "Files in the package that the primary document graph never references."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.ADVISORY
    tags = frozenset({"references", "assets", "hygiene"})

    def execute(self, context: CheckContext) -> Finding:
        orphans = orphan_paths(context.files, context.primary_path, context.references)
        if not orphans:
            return make_finding(self, Severity.PASS, ["No orphaned assets"])

        offenders = [
            FindingOffender(path, "Not referenced by primary asset graph", None, OffenderCategory.ASSETS)
            for path in orphans
        ]
        return make_finding(
            self,
            context.settings.severity("orphan_severity"),
            [f"{len(orphans)} orphaned asset(s)"],
            offenders,
        )
