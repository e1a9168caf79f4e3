"""systemArtifacts — no OS metadata files in the package.

Profiles: CM360, IAB
Priority: required
"""

from __future__ import annotations

import posixpath

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import MACOSX_PREFIX, SYSTEM_ARTIFACT_NAMES


class SystemArtifactsCheck:
    id = "systemArtifacts"
    title = "System Artifacts"
    description = "Packages must not ship __MACOSX/, .DS_Store or Thumbs.db entries."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"packaging", "hygiene"})

    def execute(self, context: CheckContext) -> Finding:
        offenders: list[FindingOffender] = []
        kinds: set[str] = set()

        for path in context.files:
            lower = path.lower()
            if lower.startswith(MACOSX_PREFIX):
                kinds.add("__MACOSX")
                offenders.append(
                    FindingOffender(path, "macOS resource fork directory entry", None, OffenderCategory.PACKAGING)
                )
                continue
            base = posixpath.basename(lower)
            if base in SYSTEM_ARTIFACT_NAMES:
                kinds.add(".DS_Store" if base == ".ds_store" else "Thumbs.db")
                offenders.append(FindingOffender(path, "OS metadata file", None, OffenderCategory.PACKAGING))

        if not offenders:
            return make_finding(self, Severity.PASS, ["No disallowed OS metadata artifacts found"])

        messages = []
        if "__MACOSX" in kinds:
            messages.append("Contains __MACOSX resource fork entries")
        if "Thumbs.db" in kinds:
            messages.append("Contains Thumbs.db")
        if ".DS_Store" in kinds:
            messages.append("Contains .DS_Store")
        return make_finding(self, Severity.FAIL, messages, offenders)
