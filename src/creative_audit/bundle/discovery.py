"""Primary document discovery.

Priority order:
    1. ``index.html`` / ``index.htm`` at any depth (shallowest, then shortest)
    2. an HTML file whose stem matches the bundle's declared creative name
    3. exactly one HTML file declaring ``<meta name="ad.size">``
    4. the sole HTML file, if there is exactly one
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from ..exceptions import DiscoveryError
from ..logging_config import get_logger
from ..models import PrimaryAsset
from .models import Bundle

logger = get_logger(__name__)

_HTML_RE = re.compile(r"\.html?$", re.IGNORECASE)
_INDEX_NAMES = ("index.html", "index.htm")
_AD_SIZE_META_RE = re.compile(r"<meta[^>]+name\s*=\s*[\"']ad\.size[\"']", re.IGNORECASE)


@dataclass(frozen=True)
class DiscoveryResult:
    primary: Optional[PrimaryAsset]
    html_candidates: tuple[str, ...] = ()
    messages: tuple[str, ...] = field(default_factory=tuple)


def _depth_key(path: str) -> tuple[int, int, str]:
    return (path.count("/"), len(path), path)


def is_html(path: str) -> bool:
    return bool(_HTML_RE.search(path))


def is_index_file(path: str) -> bool:
    return posixpath.basename(path).lower() in _INDEX_NAMES


def choose_fallback(candidates: Iterable[str]) -> Optional[str]:
    """Pick one path: index files first, then shallowest, then shortest."""
    candidates = list(candidates)
    if not candidates:
        return None
    index_files = [p for p in candidates if is_index_file(p)]
    pool = index_files or candidates
    return min(pool, key=_depth_key)


def discover_primary(bundle: Bundle) -> DiscoveryResult:
    html_files = sorted(p for p in bundle.files if is_html(p))
    messages: list[str] = []

    if not html_files:
        messages.append("No HTML files present")
        return DiscoveryResult(primary=None, html_candidates=(), messages=tuple(messages))

    index_files = [p for p in html_files if is_index_file(p)]
    if index_files:
        chosen = min(index_files, key=_depth_key)
        if len(index_files) > 1:
            messages.append(f"Multiple index files; chose {chosen}")
        return _found(chosen, html_files, messages)

    declared = bundle.declared_name.lower()
    if declared:
        named = [p for p in html_files if _stem(p).lower() == declared]
        if named:
            return _found(min(named, key=_depth_key), html_files, messages)

    ad_size_files = [p for p in html_files if _AD_SIZE_META_RE.search(bundle.read_text(p))]
    if len(ad_size_files) == 1:
        return _found(ad_size_files[0], html_files, messages)
    if len(ad_size_files) > 1:
        chosen = min(ad_size_files, key=_depth_key)
        messages.append(f"Multiple HTML files with ad.size meta; chose {chosen}")
        return _found(chosen, html_files, messages)

    if len(html_files) == 1:
        return _found(html_files[0], html_files, messages)

    messages.append(f"{len(html_files)} HTML files and no entry point could be chosen")
    return DiscoveryResult(primary=None, html_candidates=tuple(html_files), messages=tuple(messages))


def require_primary(bundle: Bundle, candidates: Optional[Sequence[str]] = None) -> DiscoveryResult:
    """Discover the primary document or raise.

    When the strict rules find nothing and the caller supplies ``candidates``,
    the fallback tie-break is applied to them.

    Raises:
        DiscoveryError: If no primary document can be chosen
    """
    result = discover_primary(bundle)
    if result.primary is not None:
        return result

    if candidates:
        present = [bundle.lookup(c) for c in candidates]
        chosen = choose_fallback(p for p in present if p is not None)
        if chosen is not None:
            messages = result.messages + (f"Chose fallback {chosen}",)
            return DiscoveryResult(PrimaryAsset(path=chosen), result.html_candidates, messages)

    logger.warning(f"No primary document in {bundle.name}")
    raise DiscoveryError(bundle.name, result.html_candidates)


def _stem(path: str) -> str:
    base = posixpath.basename(path)
    return base.rsplit(".", 1)[0]


def _found(path: str, html_files: list[str], messages: list[str]) -> DiscoveryResult:
    logger.debug(f"Primary document: {path}")
    return DiscoveryResult(
        primary=PrimaryAsset(path=path),
        html_candidates=tuple(html_files),
        messages=tuple(messages),
    )
