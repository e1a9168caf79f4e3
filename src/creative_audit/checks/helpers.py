"""Shared helpers for checks and for summary counts.

``orphan_paths`` and ``missing_references`` are used both by their checks
and by the engine when it fills ``summary.orphan_count`` and
``summary.missing_asset_count``, so both always agree.
"""

from __future__ import annotations

import posixpath
from typing import Iterable

from ..models import Reference

SYSTEM_ARTIFACT_NAMES = frozenset({".ds_store", "thumbs.db"})
MACOSX_PREFIX = "__macosx/"


def extension(path: str) -> str:
    """Lowercased extension including the dot, or ''."""
    return posixpath.splitext(path)[1].lower()


def is_system_artifact(path: str) -> bool:
    lower = path.lower()
    return lower.startswith(MACOSX_PREFIX) or posixpath.basename(lower) in SYSTEM_ARTIFACT_NAMES


def missing_references(references: Iterable[Reference]) -> list[Reference]:
    """Local references whose target is not in the bundle."""
    return [ref for ref in references if ref.is_local and not ref.in_zip]


def orphan_paths(files: Iterable[str], primary_path: str, references: Iterable[Reference]) -> list[str]:
    """Bundle files nothing references, excluding the primary document.

    System artifacts are reported by their own check and are not orphans.
    """
    referenced = {
        ref.normalized.lower()
        for ref in references
        if ref.in_zip and ref.normalized is not None
    }
    return [
        path
        for path in sorted(files)
        if path != primary_path
        and path.lower() not in referenced
        and not is_system_artifact(path)
    ]


def is_markup(path: str) -> bool:
    return extension(path) in (".html", ".htm")


def code_documents(files: Iterable[str]) -> list[str]:
    """HTML and JavaScript files, the ones that can carry click-through code."""
    return [
        path
        for path in files
        if extension(path) in (".html", ".htm", ".js") and not is_system_artifact(path)
    ]


def line_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1
