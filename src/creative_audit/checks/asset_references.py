"""assetReferences — every local reference points at a file in the bundle.

Profiles: CM360, IAB
Priority: required
Severity: settings.missing_asset_severity
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import missing_references


class AssetReferencesCheck:
    id = "assetReferences"
    title = "Referenced Assets Present"
    description = "All in-bundle references must resolve to a packaged file."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"references", "assets"})

    def execute(self, context: CheckContext) -> Finding:
        missing = missing_references(context.references)
        if not missing:
            return make_finding(self, Severity.PASS, ["All referenced in-bundle assets found"])

        offenders = [
            FindingOffender(
                path=ref.from_path,
                detail=f"{ref.url} referenced from {ref.from_path}",
                line=ref.line,
                category=OffenderCategory.ASSETS,
            )
            for ref in missing
        ]
        return make_finding(
            self,
            context.settings.severity("missing_asset_severity"),
            [f"{len(missing)} missing asset(s)"],
            offenders,
        )
