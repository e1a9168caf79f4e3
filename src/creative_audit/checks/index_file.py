"""indexFile — index.html at the bundle root.

Profiles: IAB
Priority: required
"""

from __future__ import annotations

from ..models import Finding, Severity
from .base import CheckContext, Priority, Profile, make_finding


class IndexFileCheck:
    id = "indexFile"
    title = "Index File Check"
    description = "IAB: index.html must be present at root level."
    profiles = frozenset({Profile.IAB})
    priority = Priority.REQUIRED
    tags = frozenset({"filename", "structure", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        root_index = [
            p for p in context.files if "/" not in p and p.lower() in ("index.html", "index.htm")
        ]
        if root_index:
            return make_finding(self, Severity.PASS, [f"{root_index[0]} present at root"])

        messages = ["index.html not found at root"]
        if context.entry_name.lower() in ("index.html", "index.htm"):
            messages.append(f"Entry file found at {context.primary_path}; move it to the root")
        else:
            messages.append("Rename entry file to index.html")
        messages.append("Place at root level of ZIP")
        return make_finding(self, Severity.FAIL, messages)
