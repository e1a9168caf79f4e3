"""invalidMarkup — HTML, SVG and CSS that fail basic syntax checks.

Profiles: CM360, IAB
Priority: recommended

HTML is checked for tag balance, SVG must be well-formed XML, CSS must
have matching braces outside comments. The scan runs in a worker thread so
it doesn't hold up the other checks.
"""

from __future__ import annotations

import asyncio
import xml.etree.ElementTree as ET

from ..logging_config import get_logger
from ..models import Finding, FindingOffender, OffenderCategory, Severity
from ..parsing import brace_counts, parse_html
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import extension, is_system_artifact

logger = get_logger(__name__)

_HTML_EXTENSIONS = (".html", ".htm")


def html_problems(text: str, path: str) -> list[FindingOffender]:
    doc = parse_html(text, path)
    return [
        FindingOffender(path, problem.message, problem.line, OffenderCategory.CODE)
        for problem in doc.problems
    ]


def svg_problems(text: str, path: str) -> list[FindingOffender]:
    try:
        ET.fromstring(text.encode("utf-8"))
    except ET.ParseError as e:
        line = e.position[0] if getattr(e, "position", None) else None
        return [FindingOffender(path, f"SVG parser error: {e}", line, OffenderCategory.CODE)]
    return []


def css_problems(text: str, path: str) -> list[FindingOffender]:
    opens, closes = brace_counts(text)
    if opens == closes:
        return []
    return [
        FindingOffender(path, f"Unmatched braces {{{opens} vs }}{closes}", None, OffenderCategory.CODE)
    ]


def scan_markup(context: CheckContext) -> list[FindingOffender]:
    offenders: list[FindingOffender] = []
    for path in context.files:
        if is_system_artifact(path):
            continue
        ext = extension(path)
        if ext in _HTML_EXTENSIONS:
            offenders.extend(html_problems(context.text_of(path), path))
        elif ext == ".svg":
            offenders.extend(svg_problems(context.text_of(path), path))
        elif ext == ".css":
            offenders.extend(css_problems(context.text_of(path), path))
    return offenders


class InvalidMarkupCheck:
    id = "invalidMarkup"
    title = "Invalid Markup"
    description = "HTML, SVG and CSS files should parse cleanly."
    profiles = frozenset({Profile.CM360, Profile.IAB})
    priority = Priority.RECOMMENDED
    tags = frozenset({"validation", "markup"})

    async def execute(self, context: CheckContext) -> Finding:
        offenders = await asyncio.to_thread(scan_markup, context)
        if not offenders:
            return make_finding(
                self,
                Severity.PASS,
                ["No syntax issues detected", "All HTML/CSS/SVG files appear valid"],
            )

        files = len({o.path for o in offenders})
        logger.debug(f"{files} file(s) with markup issues in {context.bundle.name}")
        return make_finding(
            self,
            Severity.WARN,
            [
                f"{files} file(s) with syntax issues (heuristic)",
                "Run validators or linters for detailed diagnostics",
            ],
            offenders,
        )
