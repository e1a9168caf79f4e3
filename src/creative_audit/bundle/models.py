"""In-memory representation of an uploaded creative package."""

from __future__ import annotations

import hashlib
import posixpath
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

ARCHIVE_EXTENSIONS = (".zip", ".adz")


def normalize_entry_path(path: str) -> str:
    """Canonical form of an archive entry name: forward slashes, no leading '/'."""
    path = path.replace("\\", "/")
    while path.startswith("/"):
        path = path[1:]
    while path.startswith("./"):
        path = path[2:]
    return path


@dataclass(frozen=True)
class Bundle:
    """The decoded file map of one uploaded package.

    ``files`` maps canonical (case-sensitive) paths to bytes and
    ``lower_case_index`` maps each lowercased path to its canonical path. Both
    are read-only views; construct bundles with :meth:`from_files`.
    """

    id: str
    name: str
    byte_length: int
    files: Mapping[str, bytes]
    lower_case_index: Mapping[str, str]
    mode: str = "zip"

    @classmethod
    def from_files(
        cls,
        name: str,
        files: Mapping[str, bytes],
        byte_length: Optional[int] = None,
        bundle_id: Optional[str] = None,
        mode: str = "zip",
    ) -> "Bundle":
        normalized: dict[str, bytes] = {}
        for raw_path, data in files.items():
            path = normalize_entry_path(raw_path)
            if not path or path.endswith("/"):
                continue
            normalized[path] = bytes(data)

        index: dict[str, str] = {}
        # First path in sorted order wins a case collision.
        for path in sorted(normalized):
            index.setdefault(path.lower(), path)

        if byte_length is None:
            byte_length = sum(len(data) for data in normalized.values())
        if bundle_id is None:
            bundle_id = _content_digest(normalized)

        return cls(
            id=bundle_id,
            name=name,
            byte_length=byte_length,
            files=MappingProxyType(normalized),
            lower_case_index=MappingProxyType(index),
            mode=mode,
        )

    @property
    def paths(self) -> tuple[str, ...]:
        return tuple(sorted(self.files))

    @property
    def declared_name(self) -> str:
        """Upload name without directories or archive extension."""
        base = posixpath.basename(self.name.replace("\\", "/"))
        lower = base.lower()
        for ext in ARCHIVE_EXTENSIONS:
            if lower.endswith(ext):
                return base[: -len(ext)]
        return base

    def lookup(self, path: str) -> Optional[str]:
        """Case-insensitive lookup returning the canonical path."""
        return self.lower_case_index.get(path.lower())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.lookup(path) is not None

    def size_of(self, path: str) -> int:
        return len(self.files[path])

    def read_text(self, path: str) -> str:
        """Decode a file as UTF-8; a BOM is dropped and invalid bytes replaced."""
        canonical = self.lookup(path) or path
        return self.files[canonical].decode("utf-8-sig", errors="replace")


def _content_digest(files: Mapping[str, bytes]) -> str:
    digest = hashlib.sha256()
    for path in sorted(files):
        digest.update(path.encode("utf-8"))
        digest.update(b"\0")
        digest.update(files[path])
    return digest.hexdigest()[:16]
