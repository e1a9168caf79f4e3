"""Best-effort scan for CreateJS-style preload manifests.

Two shapes are recognised::

    manifest: [{src: "images/bg.jpg?123", id: "bg"}]
    manifest: [{src: adObj.hero_image, id: "hero"}]   // hero_image: "img/hero.png"

The second is dereferenced by finding ``hero_image: "..."`` elsewhere in the
same text. Manifest loads are assumed to be images.
"""

from __future__ import annotations

import re

from ..models import Reference, ReferenceType
from .references import make_reference

_DIRECT_SRC_RE = re.compile(r"\{\s*src\s*:\s*[\"']([^\"'?]+)(?:\?[^\"']*)?[\"']", re.IGNORECASE)
_MANIFEST_RE = re.compile(r"manifest\s*:\s*\[", re.IGNORECASE)
_IDENT_SRC_RE = re.compile(
    r"\bsrc\s*:\s*((?:[A-Za-z_$][\w$]*\.)*)([A-Za-z_$][\w$]*)\s*[,}]",
)


def _line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _looks_like_path(value: str) -> bool:
    return "/" in value or "." in value


def collect_manifest_references(text: str, path: str) -> list[Reference]:
    refs: list[Reference] = []

    for m in _DIRECT_SRC_RE.finditer(text):
        value = m.group(1).strip()
        if value and _looks_like_path(value):
            refs.append(make_reference(path, ReferenceType.IMAGE, value, _line_at(text, m.start())))

    for manifest in _MANIFEST_RE.finditer(text):
        end = text.find("]", manifest.end())
        body_end = end if end != -1 else len(text)
        for entry in _IDENT_SRC_RE.finditer(text, manifest.end(), body_end):
            name = entry.group(2)
            value = _dereference(text, name)
            if value:
                refs.append(
                    make_reference(path, ReferenceType.IMAGE, value, _line_at(text, entry.start()))
                )

    return refs


def _dereference(text: str, name: str) -> str:
    """Literal assigned to ``name: "..."`` anywhere in ``text``, or ''."""
    if name.lower() in ("src", "id", "type"):
        return ""
    pattern = re.compile(
        r"(?<![\w$])" + re.escape(name) + r"\s*:\s*[\"']([^\"']+)[\"']", re.IGNORECASE
    )
    m = pattern.search(text)
    return m.group(1).strip() if m else ""
