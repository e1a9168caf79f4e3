"""Path resolver: reference URL -> canonical bundle path."""

from __future__ import annotations

import posixpath
import re
from dataclasses import replace
from typing import Optional
from urllib.parse import unquote

from ..bundle.models import Bundle
from ..models import Reference

_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_EXTERNAL_RE = re.compile(r"^(?:https?:|//)", re.IGNORECASE)


def is_external(url: str) -> bool:
    """``http:``/``https:`` or protocol-relative."""
    return bool(_EXTERNAL_RE.match(url.strip()))


def is_secure(url: str) -> bool:
    return url.strip().lower().startswith("https:")


def strip_query(url: str) -> str:
    return re.split(r"[?#]", url, maxsplit=1)[0]


def normalize_segments(path: str) -> str:
    """Drop empty and ``.`` segments; ``..`` pops, never above the root."""
    parts: list[str] = []
    for part in path.split("/"):
        if not part or part == ".":
            continue
        if part == "..":
            if parts:
                parts.pop()
            continue
        parts.append(part)
    return "/".join(parts)


def resolve_local(origin: str, url: str) -> Optional[str]:
    """Resolve ``url`` against the directory of ``origin``.

    Returns None for external, protocol-relative, ``data:``, ``javascript:``
    and other scheme URLs, and for empty or fragment-only URLs.
    """
    url = url.strip().replace("\\", "/")
    if not url or url.startswith("#"):
        return None
    if url.startswith("//") or _SCHEME_RE.match(url):
        return None

    url = strip_query(url)
    if not url:
        return None

    if url.startswith("/"):
        # Root-relative means bundle root.
        return normalize_segments(url.lstrip("/")) or None

    if url.startswith("./"):
        url = url[2:]
    origin_dir = posixpath.dirname(origin)
    combined = f"{origin_dir}/{url}" if origin_dir else url
    return normalize_segments(combined) or None


def resolve_reference(bundle: Bundle, ref: Reference) -> Reference:
    """Return ``ref`` with ``normalized`` and ``in_zip`` filled in.

    Lookup is case-insensitive and retried on the percent-decoded path; on a
    hit ``normalized`` takes the bundle's canonical casing.
    """
    if ref.external:
        return replace(ref, normalized=None, in_zip=False)

    resolved = resolve_local(ref.from_path, ref.url)
    if resolved is None:
        return replace(ref, normalized=None, in_zip=False)

    canonical = bundle.lookup(resolved)
    if canonical is None:
        decoded = unquote(resolved)
        if decoded != resolved:
            canonical = bundle.lookup(decoded)

    if canonical is not None:
        return replace(ref, normalized=canonical, in_zip=True)
    return replace(ref, normalized=resolved, in_zip=False)
