"""Declared creative size detection from document metadata."""

from __future__ import annotations

import json
import math
import re
from typing import Iterable, Optional

from ..exceptions.taxonomy import AuditError, ErrorCode
from ..logging_config import get_logger
from ..models import AdSize, DetectedSize, SizeSource, SizeSourceMethod
from .document import HtmlDocument

logger = get_logger(__name__)

SNIPPET_MAX = 160

_AD_SIZE_CONTENT_RE = re.compile(r"width\s*=\s*(\d+)\s*,\s*height\s*=\s*(\d+)", re.IGNORECASE)
_DIMENSION_NAME_RE = re.compile(r"^(\d{2,4})\s*x\s*(\d{2,4})$", re.IGNORECASE)


def normalize_snippet(text: Optional[str], max_length: int = SNIPPET_MAX) -> Optional[str]:
    """Collapse whitespace and cap length for display."""
    if not text:
        return None
    collapsed = " ".join(text.split())
    if not collapsed:
        return None
    if len(collapsed) > max_length:
        return collapsed[:max_length] + "…"
    return collapsed


def pick_largest(candidates: Iterable[Optional[DetectedSize]]) -> Optional[DetectedSize]:
    """Largest area wins; on a tie the earlier candidate is kept."""
    best: Optional[DetectedSize] = None
    for candidate in candidates:
        if candidate is None:
            continue
        if best is None or candidate.size.area > best.size.area:
            best = candidate
    return best


def detect_meta_size(doc: HtmlDocument, path: str) -> Optional[DetectedSize]:
    """Size declared by metadata, in priority order.

    1. ``<meta name="ad.size" content="width=W,height=H">``
    2. ``<meta name="WxH">``
    3. ``<script type="text/gwd-admetadata">`` JSON ``creativeProperties``
    """
    for meta in doc.find_all("meta", "name"):
        if (meta.get("name") or "").strip().lower() != "ad.size":
            continue
        content = meta.get("content") or ""
        m = _AD_SIZE_CONTENT_RE.search(content)
        if m:
            return _meta_size(int(m.group(1)), int(m.group(2)), meta.snippet or content, path)
        # First ad.size meta decides, even when malformed.
        logger.debug(f"Unparseable ad.size content in {path}: {content!r}")
        break

    for meta in doc.find_all("meta", "name"):
        m = _DIMENSION_NAME_RE.match((meta.get("name") or "").strip())
        if m:
            width, height = int(m.group(1)), int(m.group(2))
            if width > 0 and height > 0:
                return _meta_size(width, height, meta.snippet, path)

    return _gwd_admetadata_size(doc, path)


def _meta_size(width: int, height: int, snippet: str, path: str) -> DetectedSize:
    return DetectedSize(
        size=AdSize(width, height),
        source=SizeSource(SizeSourceMethod.META, normalize_snippet(snippet), path),
    )


def _gwd_admetadata_size(doc: HtmlDocument, path: str) -> Optional[DetectedSize]:
    node = next(
        (
            el
            for el in doc.find_all("script", "type")
            if (el.get("type") or "").strip().lower() == "text/gwd-admetadata"
        ),
        None,
    )
    if node is None:
        return None
    raw = node.text.strip()
    if not raw:
        return None

    try:
        data = json.loads(raw)
    except ValueError as e:
        audit_error = AuditError(
            message=f"Invalid gwd-admetadata JSON in {path}: {e}",
            code=ErrorCode.CA202,
            context={"path": path},
        )
        logger.warning(str(audit_error), extra={"audit_error": audit_error.to_json()})
        return None

    props = data.get("creativeProperties") if isinstance(data, dict) else None
    if not isinstance(props, dict):
        return None

    width = _number(props.get("maxWidth"), props.get("minWidth"))
    height = _number(props.get("maxHeight"), props.get("minHeight"))
    if width is None or height is None:
        return None
    if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
        return None

    return DetectedSize(
        size=AdSize(round(width), round(height)),
        source=SizeSource(SizeSourceMethod.GWD_ADMETADATA, normalize_snippet(raw), path),
    )


def _number(*values) -> Optional[float]:
    """First value that is not None, as a float."""
    for value in values:
        if value is None:
            continue
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None
    return None
