"""packaging — ZIP upload, no nested archives, no dangerous file types.

Profiles: CM360, IAB
Priority: required
"""

from __future__ import annotations

from ..bundle.models import ARCHIVE_EXTENSIONS
from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding


class PackagingCheck:
    id = "packaging"
    title = "Packaging Structure"
    description = "Creatives must be uploaded as a single ZIP without nested archives or executables."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"packaging", "structure"})

    def execute(self, context: CheckContext) -> Finding:
        settings = context.settings
        offenders: list[FindingOffender] = []
        messages: list[str] = []

        if context.bundle.mode != "zip":
            messages.append("Upload is not a ZIP archive")
            offenders.append(
                FindingOffender(context.bundle.name, "Package the creative as a .zip", None, OffenderCategory.PACKAGING)
            )

        if settings.disallow_nested_zips:
            nested = [p for p in context.files if p.lower().endswith(ARCHIVE_EXTENSIONS)]
            for path in nested:
                offenders.append(FindingOffender(path, "Nested ZIP not allowed", None, OffenderCategory.PACKAGING))
            if nested:
                messages.append(f"{len(nested)} nested archive(s)")

        dangerous = 0
        for path in context.files:
            lower = path.lower()
            for ext in settings.dangerous_extensions:
                if lower.endswith(ext):
                    dangerous += 1
                    offenders.append(
                        FindingOffender(path, f"Dangerous extension {ext}", None, OffenderCategory.PACKAGING)
                    )
                    break
        if dangerous:
            messages.append(f"{dangerous} file(s) with dangerous extensions")

        if not offenders:
            return make_finding(self, Severity.PASS, ["Packaging structure OK"])
        return make_finding(self, Severity.FAIL, ["Detected packaging issues"] + messages, offenders)
