"""Regex heuristics over CSS text.

Each heuristic is a pure function of the CSS source so it can be tested in
isolation:

- ``detect_css_size``: largest ``width``/``height`` pixel pair
- ``extract_urls``: ``url(...)`` targets
- ``extract_imports``: ``@import`` targets
"""

from __future__ import annotations

import re
from typing import Literal, Optional

from ..models import AdSize, DetectedSize, SizeSource, SizeSourceMethod
from .size import normalize_snippet, pick_largest

CssContext = Literal["inline-style", "css-rule", "css-file"]

MIN_DIMENSION_PX = 10

# Lookbehind keeps max-width, min-height, line-height and friends out.
_WIDTH_RE = re.compile(r"(?<![\w-])width\s*:\s*(\d{2,4})px", re.IGNORECASE)
_HEIGHT_RE = re.compile(r"(?<![\w-])height\s*:\s*(\d{2,4})px", re.IGNORECASE)
_MEDIA_RE = re.compile(r"@media[^{}]*\{[^}]*\}", re.IGNORECASE)
_BLOCK_RE = re.compile(r"\{[^{}]*\}")
_URL_RE = re.compile(r"url\(([^)]+)\)", re.IGNORECASE)
_IMPORT_RE = re.compile(
    r"@import\s+(?:url\(\s*([^)]+?)\s*\)|([\"'])(.*?)\2)",
    re.IGNORECASE,
)
_IMPORT_PREFIX_RE = re.compile(r"@import\s*$", re.IGNORECASE)
_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)


def _unquote(value: str) -> str:
    value = value.strip()
    if value[:1] in ("'", '"'):
        value = value[1:]
    if value[-1:] in ("'", '"'):
        value = value[:-1]
    return value.strip()


def _line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def size_candidate(
    source: str, method: SizeSourceMethod, path: Optional[str] = None
) -> Optional[DetectedSize]:
    """A candidate needs both a width and a height of at least 10px."""
    width_match = _WIDTH_RE.search(source)
    height_match = _HEIGHT_RE.search(source)
    if not width_match or not height_match:
        return None
    width = int(width_match.group(1))
    height = int(height_match.group(1))
    if width < MIN_DIMENSION_PX or height < MIN_DIMENSION_PX:
        return None
    return DetectedSize(
        size=AdSize(width, height),
        source=SizeSource(method, normalize_snippet(source), path),
    )


def detect_css_size(
    css_text: str, context: CssContext, path: Optional[str] = None
) -> Optional[DetectedSize]:
    """Best size candidate in one CSS source.

    ``@media`` blocks are considered first, then ordinary rule blocks. The
    whole text is tried only when no block produced a candidate.
    """
    if not css_text:
        return None

    block_method = SizeSourceMethod.CSS_FILE if context == "css-file" else SizeSourceMethod.CSS_RULE
    candidates = [
        size_candidate(m.group(0), SizeSourceMethod.CSS_MEDIA, path)
        for m in _MEDIA_RE.finditer(css_text)
    ]
    candidates += [
        size_candidate(m.group(0), block_method, path) for m in _BLOCK_RE.finditer(css_text)
    ]

    best = pick_largest(candidates)
    if best is not None:
        return best

    fallback_method = {
        "inline-style": SizeSourceMethod.INLINE_STYLE,
        "css-file": SizeSourceMethod.CSS_FILE,
    }.get(context, SizeSourceMethod.CSS_RULE)
    return size_candidate(css_text, fallback_method, path)


def extract_urls(css_text: str) -> list[tuple[str, int]]:
    """``url(...)`` targets as ``(url, line)`` pairs.

    ``@import url(...)`` is left to :func:`extract_imports`.
    """
    results: list[tuple[str, int]] = []
    for m in _URL_RE.finditer(css_text):
        if _IMPORT_PREFIX_RE.search(css_text, max(0, m.start() - 16), m.start()):
            continue
        raw = _unquote(m.group(1))
        if not raw:
            continue
        results.append((raw, _line_at(css_text, m.start())))
    return results


def extract_imports(css_text: str) -> list[tuple[str, int]]:
    """``@import`` targets as ``(url, line)`` pairs."""
    results: list[tuple[str, int]] = []
    for m in _IMPORT_RE.finditer(strip_comments(css_text)):
        raw = _unquote(m.group(1) if m.group(1) is not None else m.group(3))
        if raw:
            results.append((raw, _line_at(css_text, m.start())))
    return results


def _blank(match: re.Match) -> str:
    # Keep offsets (and so line numbers) stable.
    return re.sub(r"[^\n]", " ", match.group(0))


def strip_comments(css_text: str) -> str:
    """CSS with comments blanked out, line numbers preserved."""
    return _COMMENT_RE.sub(_blank, css_text)


def brace_counts(css_text: str) -> tuple[int, int]:
    """``(opening, closing)`` brace counts outside comments."""
    text = strip_comments(css_text)
    return text.count("{"), text.count("}")
