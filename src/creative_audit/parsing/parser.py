"""Primary document parsing: creative size and reference list.

Stage order:
    1. Tokenize the primary HTML document
    2. Metadata size (ad.size meta, WxH meta, gwd-admetadata)
    3. HTML element references
    4. CSS sources: <style> blocks, style attributes, linked stylesheets
       (followed transitively through @import, each file once)
    5. Manifest scan of the primary document and linked scripts
    6. CSS size detection, only when step 2 found nothing
    7. Path resolution against the bundle
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..bundle.models import Bundle
from ..exceptions import ParsingError
from ..exceptions.taxonomy import AuditError, ErrorCode
from ..logging_config import get_logger
from ..models import AdSize, Reference, ReferenceType, SizeSource
from .css import CssContext, detect_css_size
from .document import parse_html
from .manifest import collect_manifest_references
from .references import collect_css_references, collect_html_references
from .resolver import resolve_reference
from .size import detect_meta_size, pick_largest

logger = get_logger(__name__)


@dataclass(frozen=True)
class CssSource:
    """One block of CSS text considered for size detection."""

    path: str
    context: CssContext
    text: str
    line: int = 1


@dataclass(frozen=True)
class ParseResult:
    ad_size: Optional[AdSize] = None
    ad_size_source: Optional[SizeSource] = None
    references: tuple[Reference, ...] = ()
    css_sources: tuple[CssSource, ...] = ()
    errors: tuple[str, ...] = ()


class _ParseState:
    def __init__(self, bundle: Bundle, primary_path: str):
        self.bundle = bundle
        self.primary_path = primary_path
        self.references: list[Reference] = []
        self.css_sources: list[CssSource] = []
        self.errors: list[str] = []

    def decode(self, path: str, kind: str) -> str:
        """Text of ``path``; undecodable bytes are replaced and recorded."""
        data = self.bundle.files[path]
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            error = ParsingError(path, kind, f"invalid UTF-8 at byte {e.start}")
            self.errors.append(str(error))
            audit_error = AuditError(
                message=str(error),
                code=ErrorCode.CA200,
                context={"path": path, "kind": kind},
                recovery_hint="Save the file as UTF-8",
            )
            logger.warning(str(audit_error), extra={"audit_error": audit_error.to_json()})
            return self.bundle.read_text(path)

    def local_target(self, ref: Reference) -> Optional[str]:
        """Canonical bundle path of ``ref``, matched the same way as the final resolution."""
        resolved = resolve_reference(self.bundle, ref)
        return resolved.normalized if resolved.in_zip else None


def parse_primary(bundle: Bundle, primary_path: str) -> ParseResult:
    """Parse the primary document and everything it links.

    Never raises on malformed content; problems are logged and returned in
    ``errors`` alongside whatever could be salvaged.
    """
    state = _ParseState(bundle, primary_path)
    html = state.decode(primary_path, "html")
    doc = parse_html(html, primary_path)

    detected = detect_meta_size(doc, primary_path)
    state.references.extend(collect_html_references(doc, primary_path))

    for style in doc.find_all("style"):
        if style.text.strip():
            state.css_sources.append(CssSource(primary_path, "css-rule", style.text, style.line))
            state.references.extend(collect_css_references(style.text, primary_path, style.line))
    for el in doc.with_attribute("style"):
        text = el.get("style") or ""
        if text.strip():
            state.css_sources.append(CssSource(primary_path, "inline-style", text, el.line))

    _follow_stylesheets(state)

    state.references.extend(collect_manifest_references(html, primary_path))
    _scan_scripts(state)

    ad_size: Optional[AdSize] = None
    ad_size_source: Optional[SizeSource] = None
    if detected is None:
        detected = pick_largest(
            detect_css_size(source.text, source.context, source.path)
            for source in state.css_sources
        )
    if detected is not None:
        ad_size, ad_size_source = detected.size, detected.source
        logger.debug(f"Ad size {ad_size} via {ad_size_source.method.value}")

    references = tuple(resolve_reference(bundle, ref) for ref in state.references)
    return ParseResult(
        ad_size=ad_size,
        ad_size_source=ad_size_source,
        references=references,
        css_sources=tuple(state.css_sources),
        errors=tuple(state.errors),
    )


def _follow_stylesheets(state: _ParseState) -> None:
    visited: set[str] = set()
    queue = [r for r in state.references if r.type is ReferenceType.STYLESHEET]
    while queue:
        ref = queue.pop(0)
        target = state.local_target(ref)
        if target is None or target in visited:
            continue
        visited.add(target)

        css_text = state.decode(target, "css")
        state.css_sources.append(CssSource(target, "css-file", css_text))
        found = collect_css_references(css_text, target)
        state.references.extend(found)
        queue.extend(r for r in found if r.type is ReferenceType.STYLESHEET)


def _scan_scripts(state: _ParseState) -> None:
    visited: set[str] = set()
    scripts = [r for r in state.references if r.type is ReferenceType.SCRIPT]
    for ref in scripts:
        target = state.local_target(ref)
        if target is None or target in visited:
            continue
        visited.add(target)
        state.references.extend(collect_manifest_references(state.decode(target, "js"), target))
