"""Reference collection from HTML elements and CSS text."""

from __future__ import annotations

from typing import Optional

from ..models import Reference, ReferenceType
from .css import extract_imports, extract_urls
from .document import HtmlDocument
from .resolver import is_external, is_secure

# (tag, attribute) -> reference type
ELEMENT_SOURCES: dict[tuple[str, str], ReferenceType] = {
    ("img", "src"): ReferenceType.IMAGE,
    ("gwd-image", "source"): ReferenceType.IMAGE,
    ("video", "src"): ReferenceType.MEDIA,
    ("audio", "src"): ReferenceType.MEDIA,
    ("source", "src"): ReferenceType.MEDIA,
    ("script", "src"): ReferenceType.SCRIPT,
    ("a", "href"): ReferenceType.ANCHOR,
}


def make_reference(
    from_path: str,
    ref_type: ReferenceType,
    url: str,
    line: Optional[int] = None,
    column: Optional[int] = None,
) -> Reference:
    """Unresolved reference with externality derived from the scheme."""
    url = url.strip()
    return Reference(
        from_path=from_path,
        type=ref_type,
        url=url,
        external=is_external(url),
        secure=is_secure(url),
        line=line,
        column=column,
    )


def _is_stylesheet_link(rel: Optional[str]) -> bool:
    return rel is not None and "stylesheet" in rel.lower().split()


def collect_html_references(doc: HtmlDocument, path: str) -> list[Reference]:
    """Every loadable resource an HTML document names, in document order."""
    refs: list[Reference] = []
    for el in doc.elements:
        for (tag, attr), ref_type in ELEMENT_SOURCES.items():
            if el.tag == tag:
                value = el.get(attr)
                if value and value.strip():
                    refs.append(make_reference(path, ref_type, value, el.line, el.column))

        if el.tag == "link" and _is_stylesheet_link(el.get("rel")):
            href = el.get("href")
            if href and href.strip():
                refs.append(make_reference(path, ReferenceType.STYLESHEET, href, el.line, el.column))

        style = el.get("style")
        if style:
            for url, _ in extract_urls(style):
                refs.append(make_reference(path, ReferenceType.FONT, url, el.line, el.column))
    return refs


def collect_css_references(css_text: str, from_path: str, first_line: int = 1) -> list[Reference]:
    """``url(...)`` targets (typed font) and ``@import`` targets (typed css).

    ``first_line`` is the line of the CSS text within its origin file, for
    ``<style>`` blocks embedded in HTML.
    """
    refs = [
        make_reference(from_path, ReferenceType.STYLESHEET, url, first_line + line - 1)
        for url, line in extract_imports(css_text)
    ]
    refs += [
        make_reference(from_path, ReferenceType.FONT, url, first_line + line - 1)
        for url, line in extract_urls(css_text)
    ]
    return refs
