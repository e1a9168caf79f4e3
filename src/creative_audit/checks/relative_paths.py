"""relativePaths — packaged assets referenced by relative path.

Profiles: IAB
Priority: recommended
"""

from __future__ import annotations

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding


class RelativePathsCheck:
    id = "relativePaths"
    title = "Relative Paths For Packaged Assets"
    description = "IAB: packaged assets should use relative paths, not root-relative ones."
    profiles = frozenset({Profile.IAB})
    priority = Priority.RECOMMENDED
    tags = frozenset({"paths", "references", "portability", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        offenders = [
            FindingOffender(ref.from_path, ref.url, ref.line, OffenderCategory.CODE)
            for ref in context.references
            if ref.in_zip and ref.url.startswith("/")
        ]
        if not offenders:
            return make_finding(self, Severity.PASS, ["All packaged asset references are relative"])

        return make_finding(
            self,
            Severity.WARN,
            [
                f"{len(offenders)} absolute path reference(s) found",
                "Use relative paths for packaged assets",
                'Example: "images/banner.jpg" instead of "/images/banner.jpg"',
            ],
            offenders,
        )
