"""Gzip transfer-size estimation.

Delivery platforms measure creative weight as gzip-compressed transfer size,
so budgets are compared against ``gzip`` output rather than raw bytes.
"""

import gzip
import zlib
from typing import Iterable

from ..bundle.models import Bundle
from ..exceptions.taxonomy import AuditError, ErrorCode
from ..logging_config import get_logger

logger = get_logger(__name__)

GZIP_LEVEL = 6  # zlib default


def gzip_size(content: bytes, level: int = GZIP_LEVEL) -> int:
    """Length of ``content`` after gzip compression."""
    return len(gzip.compress(content, compresslevel=level, mtime=0))


class CompressedSizeCache:
    """
    Per-pipeline memo of compressed size by bundle path.

    Owned by one analysis pass and discarded with it. Compression failures
    fall back to the raw length.
    """

    def __init__(self, bundle: Bundle, level: int = GZIP_LEVEL):
        self.bundle = bundle
        self.level = level
        self._sizes: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._sizes)

    def size_of(self, path: str) -> int:
        cached = self._sizes.get(path)
        if cached is not None:
            return cached

        data = self.bundle.files[path]
        try:
            size = gzip_size(data, self.level)
        except (zlib.error, OSError, ValueError) as e:
            err = AuditError(
                message=f"Compression failed for {path}, using raw size",
                code=ErrorCode.CA400,
                context={"path": path, "reason": str(e)},
            )
            logger.warning(str(err), extra={"audit_error": err.to_json()})
            size = len(data)

        self._sizes[path] = size
        return size

    def total(self, paths: Iterable[str]) -> int:
        return sum(self.size_of(p) for p in paths)
