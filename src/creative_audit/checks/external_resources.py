"""externalResources — external loads limited to allowlisted hosts or file types.

Profiles: CM360
Priority: recommended
Severity: settings.external_resource_severity

Anchors are navigation, not resource loads, and are not inspected.
"""

from __future__ import annotations

import posixpath
from urllib.parse import urlsplit

from ..models import Finding, FindingOffender, OffenderCategory, ReferenceType, Severity
from .base import CheckContext, Priority, Profile, make_finding


def is_allowed(url: str, hosts: tuple[str, ...], filetypes: tuple[str, ...]) -> bool:
    """True if the URL's host or its file extension is allowlisted.

    Raises:
        ValueError: If the URL cannot be parsed
    """
    parts = urlsplit(url.strip())
    host = (parts.hostname or "").lower()
    ext = posixpath.splitext(parts.path)[1].lower()
    return host in hosts or (bool(ext) and ext in filetypes)


class ExternalResourcesCheck:
    id = "externalResources"
    title = "External Resource Policy"
    description = "External resources should come from allowlisted hosts or file types."
    profiles = frozenset({Profile.CM360})
    priority = Priority.RECOMMENDED
    tags = frozenset({"references", "external"})

    def execute(self, context: CheckContext) -> Finding:
        settings = context.settings
        external = [
            ref for ref in context.references if ref.external and ref.type is not ReferenceType.ANCHOR
        ]
        offenders: list[FindingOffender] = []

        for ref in external:
            try:
                allowed = is_allowed(
                    ref.url, settings.external_host_allowlist, settings.external_filetype_allowlist
                )
            except ValueError:
                detail = f"Unparseable external URL: {ref.url}"
                offenders.append(FindingOffender(ref.from_path, detail, ref.line, OffenderCategory.ENVIRONMENT))
                continue
            if not allowed:
                detail = f"External: {ref.url}"
                offenders.append(FindingOffender(ref.from_path, detail, ref.line, OffenderCategory.ENVIRONMENT))

        if not external:
            return make_finding(self, Severity.PASS, ["No external resources referenced"])

        messages = [f"{len(external)} external reference(s), {len(offenders)} outside allowlist"]
        if not offenders:
            return make_finding(self, Severity.PASS, messages)
        return make_finding(self, settings.severity("external_resource_severity"), messages, offenders)
