"""Document parsing: size detection, reference collection and path resolution."""

from .css import brace_counts, detect_css_size, extract_imports, extract_urls, strip_comments
from .document import Element, HtmlDocument, MarkupProblem, parse_html
from .manifest import collect_manifest_references
from .parser import CssSource, ParseResult, parse_primary
from .references import collect_css_references, collect_html_references, make_reference
from .resolver import is_external, is_secure, resolve_local, resolve_reference
from .size import detect_meta_size, normalize_snippet, pick_largest

__all__ = [
    "CssSource",
    "Element",
    "HtmlDocument",
    "MarkupProblem",
    "ParseResult",
    "brace_counts",
    "collect_css_references",
    "collect_html_references",
    "collect_manifest_references",
    "detect_css_size",
    "detect_meta_size",
    "extract_imports",
    "extract_urls",
    "is_external",
    "is_secure",
    "make_reference",
    "normalize_snippet",
    "parse_html",
    "parse_primary",
    "pick_largest",
    "resolve_local",
    "resolve_reference",
    "strip_comments",
]
