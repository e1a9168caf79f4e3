"""minified — JS and CSS shipped minified.

Profiles: IAB
Priority: recommended

Heuristic: a file counts as minified when it has at least one very long
line, or more than ``minified_dense_count`` long lines that are almost
entirely non-whitespace.
"""

from __future__ import annotations

import re

from ..config import ThresholdConfig
from ..models import Finding, FindingOffender, OffenderCategory, Severity
from .base import CheckContext, Priority, Profile, make_finding
from .helpers import extension, is_system_artifact

_WHITESPACE_RE = re.compile(r"\s+")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


def looks_minified(text: str, thresholds: ThresholdConfig) -> bool:
    lines = _LINE_SPLIT_RE.split(text)
    if any(len(line) > thresholds.minified_long_line for line in lines):
        return True

    dense = 0
    for line in lines:
        if len(line) <= thresholds.minified_dense_line:
            continue
        if len(_WHITESPACE_RE.sub("", line)) / len(line) > thresholds.minified_density:
            dense += 1
    return dense > thresholds.minified_dense_count


class MinifiedCheck:
    id = "minified"
    title = "CSS/JS Minified"
    description = "IAB: JavaScript and CSS files should be minified."
    profiles = frozenset({Profile.IAB})
    priority = Priority.RECOMMENDED
    tags = frozenset({"minification", "performance", "filesize", "iab"})

    def execute(self, context: CheckContext) -> Finding:
        thresholds = context.settings.thresholds
        counts = {".js": [0, 0], ".css": [0, 0]}  # [minified, total]
        offenders: list[FindingOffender] = []

        for path in context.files:
            ext = extension(path)
            if ext not in counts or is_system_artifact(path):
                continue
            if context.bundle.size_of(path) == 0:
                continue

            counts[ext][1] += 1
            if looks_minified(context.text_of(path), thresholds):
                counts[ext][0] += 1
            else:
                offenders.append(
                    FindingOffender(path, "not minified (heuristic)", None, OffenderCategory.CODE)
                )

        js_min, js_total = counts[".js"]
        css_min, css_total = counts[".css"]
        messages = [f"JS minified: {js_min}/{js_total}", f"CSS minified: {css_min}/{css_total}"]
        if not offenders:
            return make_finding(self, Severity.PASS, messages)

        messages.append("Non-minified files detected")
        messages.append("Use a build tool to minify scripts and stylesheets")
        return make_finding(self, Severity.FAIL, messages, offenders)
