"""clickTags — the creative exits through the ad server's clickTag.

Profiles: CM360
Priority: recommended

HTML and JavaScript files are scanned line by line for a clickTag
declaration (``settings.click_tag_patterns``), navigation through the
clickTag variable, and navigation to a literal http(s) URL. Anchors with an
absolute href count as literal navigation as well.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import NamedTuple

from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import code_documents, is_markup, line_at

_ASSIGN_RE = re.compile(r"""\bclicktag\s*=\s*["']([^"']+)["']""", re.IGNORECASE)

_USAGE_RES = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"window\.open\s*\(\s*(?:window\.)?clickTag",
        r"location\.href\s*=\s*(?:window\.)?clickTag",
        r"location\.assign\s*\(\s*(?:window\.)?clickTag",
        r"location\.replace\s*\(\s*(?:window\.)?clickTag",
        r"top\.location\s*=\s*(?:window\.)?clickTag",
        r"parent\.location\s*=\s*(?:window\.)?clickTag",
    )
)

_LITERAL_NAV_RES = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"""window\.open\s*\(\s*["']https?://[^"']+["']""",
        r"""location\.href\s*=\s*["']https?://[^"']+["']""",
        r"""location\.assign\s*\(\s*["']https?://[^"']+["']""",
        r"""location\.replace\s*\(\s*["']https?://[^"']+["']""",
        r"""top\.location(?:\.href)?\s*=\s*["']https?://[^"']+["']""",
        r"""parent\.location(?:\.href)?\s*=\s*["']https?://[^"']+["']""",
    )
)

ANCHOR_RE = re.compile(r"""<a[^>]+href=["'](https?://[^"']+)["'][^>]*>""", re.IGNORECASE)
URL_RE = re.compile(r"""(https?://[^\s"']+)""", re.IGNORECASE)

SNIPPET_CHARS = 200


class ClickHit(NamedTuple):
    path: str
    line: int
    snippet: str
    url: str = ""


@dataclass
class ClickScan:
    declared: bool = False
    assignments: list[ClickHit] = field(default_factory=list)
    usages: list[ClickHit] = field(default_factory=list)
    literal_urls: list[ClickHit] = field(default_factory=list)


def scan_click_code(context: CheckContext) -> ClickScan:
    """Collect clickTag declarations, clickTag navigation and literal-URL navigation."""
    declarations = [re.compile(p) for p in context.settings.click_tag_patterns]
    scan = ClickScan()

    for path in code_documents(context.files):
        text = context.text_of(path)
        for number, line in enumerate(text.splitlines(), start=1):
            snippet = line[:SNIPPET_CHARS]
            if any(p.search(line) for p in declarations):
                scan.declared = True
            for m in _ASSIGN_RE.finditer(line):
                scan.declared = True
                scan.assignments.append(ClickHit(path, number, snippet, m.group(1)))
            if any(p.search(line) for p in _USAGE_RES):
                scan.usages.append(ClickHit(path, number, snippet))
            if any(p.search(line) for p in _LITERAL_NAV_RES):
                url = URL_RE.search(line)
                scan.literal_urls.append(ClickHit(path, number, snippet, url.group(1) if url else "unknown"))

        if is_markup(path):
            for m in ANCHOR_RE.finditer(text):
                scan.literal_urls.append(
                    ClickHit(path, line_at(text, m.start()), m.group(0)[:SNIPPET_CHARS], m.group(1))
                )

    return scan


def _shorten(text: str, limit: int) -> str:
    return text if len(text) <= limit else f"{text[:limit]}..."


class ClickTagsCheck:
    id = "clickTags"
    title = "Click Tags / Exit"
    description = "Clickthrough must go through a clickTag variable supplied by the ad server."
    profiles = frozenset({Profile.CM360})
    priority = Priority.RECOMMENDED
    tags = frozenset({"clickthrough", "cm360"})

    def execute(self, context: CheckContext) -> Finding:
        scan = scan_click_code(context)
        used = bool(scan.usages)
        literal = bool(scan.literal_urls)

        if scan.declared and used and not literal:
            messages = ["clickTag detected and used for redirect"]
            if scan.assignments:
                url = scan.assignments[0].url.strip()
                if url:
                    messages.append(f'URL temporarily set to "{_shorten(url, 50)}"')
            offenders = [
                FindingOffender(
                    hit.path, f"clickTag usage: {hit.snippet.strip()[:100]}", hit.line, OffenderCategory.CODE
                )
                for hit in scan.usages
            ]
            return make_finding(self, Severity.PASS, messages, offenders)

        if not scan.declared:
            messages = ["clickTag not detected"]
        elif used:
            messages = ["clickTag detected and used, but also has hardcoded URLs"]
        elif literal:
            messages = ["clickTag detected but not used for redirect"]
        else:
            messages = ["clickTag detected but not used"]

        if not literal:
            messages.append("No redirect mechanism found")
            return make_finding(self, Severity.FAIL, messages)

        unique_urls = list(dict.fromkeys(hit.url for hit in scan.literal_urls))[:3]
        messages.extend(f'Clickthrough URL is hardcoded to "{_shorten(url, 60)}"' for url in unique_urls)
        offenders = [
            FindingOffender(
                hit.path, f"Hardcoded URL: {hit.snippet.strip()[:100]}", hit.line, OffenderCategory.CODE
            )
            for hit in scan.literal_urls
        ]
        return make_finding(self, Severity.FAIL, messages, offenders)
