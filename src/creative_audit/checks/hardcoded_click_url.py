"""hardcodedClickUrl — no absolute clickthrough destinations in code or markup.

Profiles: CM360
Priority: recommended
Severity: settings.hardcoded_nav_severity
"""

from __future__ import annotations

import re

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .click_tags import ANCHOR_RE, URL_RE
from .helpers import code_documents, is_markup, line_at

# First match wins per line.
_PATTERNS = tuple(
    (label, re.compile(p, re.IGNORECASE))
    for label, p in (
        ("window.open", r"""window\.open\s*\(\s*['"]https?://"""),
        ("location.assign", r"""location\.(?:href|replace)\s*=\s*['"]https?://"""),
        ("top.location", r"""top\.location(?:\.href)?\s*=\s*['"]https?://"""),
        ("parent.location", r"""parent\.location(?:\.href)?\s*=\s*['"]https?://"""),
        ("clickTag assign", r"""\bclicktag\s*=\s*['"]https?://"""),
    )
)


class HardcodedClickUrlCheck:
    id = "hardcodedClickUrl"
    title = "Hard-Coded Clickthrough URL"
    description = (
        "Absolute clickthrough destinations embedded in code or markup; "
        "the ad server must provide them through macros."
    )
    profiles = frozenset({Profile.CM360})
    priority = Priority.RECOMMENDED
    tags = frozenset({"clickthrough", "cm360"})

    def execute(self, context: CheckContext) -> Finding:
        offenders: list[FindingOffender] = []

        for path in code_documents(context.files):
            text = context.text_of(path)
            for number, line in enumerate(text.splitlines(), start=1):
                for label, pattern in _PATTERNS:
                    if pattern.search(line):
                        url = URL_RE.search(line)
                        offenders.append(
                            FindingOffender(
                                path,
                                f"{label} -> {url.group(1) if url else 'URL'}",
                                number,
                                OffenderCategory.CODE,
                            )
                        )
                        break
            if is_markup(path):
                for m in ANCHOR_RE.finditer(text):
                    offenders.append(
                        FindingOffender(
                            path, f"anchor -> {m.group(0)[:120]}", line_at(text, m.start()), OffenderCategory.CODE
                        )
                    )

        if not offenders:
            return make_finding(self, Severity.PASS, ["No hard-coded absolute clickthrough destinations found"])

        count = len(offenders)
        return make_finding(
            self,
            context.settings.severity("hardcoded_nav_severity"),
            [
                f"{count} hard-coded clickthrough destination{'s' if count > 1 else ''} detected "
                "(must be ad server provided)"
            ],
            offenders,
        )
