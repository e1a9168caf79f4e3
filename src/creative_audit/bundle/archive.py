"""
Input adapter: read uploaded packages from disk into bundles.

Supports ZIP/ADZ archives and unpacked creative folders.
"""

import hashlib
import zipfile
from pathlib import Path
from typing import Union

from ..exceptions import ArchiveError, InvalidPathError
from ..logging_config import get_logger
from .models import ARCHIVE_EXTENSIONS, Bundle

logger = get_logger(__name__)

# Total uncompressed size accepted from one archive.
MAX_EXTRACTED_BYTES = 512 * 1024 * 1024


def read_archive(path: Union[str, Path], max_extracted_bytes: int = MAX_EXTRACTED_BYTES) -> Bundle:
    """
    Read a ZIP/ADZ file into a bundle.

    Args:
        path: Archive file
        max_extracted_bytes: Limit on the summed uncompressed entry sizes

    Returns:
        Bundle whose ``byte_length`` is the archive file size

    Raises:
        InvalidPathError: If the file does not exist
        ArchiveError: If the archive is corrupt, unreadable or inflates past the limit
    """
    path = Path(path)
    if not path.is_file():
        raise InvalidPathError(path, "Archive does not exist")

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ArchiveError(path, f"OS error: {e}")

    files: dict[str, bytes] = {}
    extracted = 0
    try:
        with zipfile.ZipFile(path) as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue
                # Declared sizes are checked before inflating anything.
                extracted += info.file_size
                if extracted > max_extracted_bytes:
                    raise ArchiveError(
                        path,
                        f"Entry {info.filename} brings the uncompressed size to {extracted} bytes, "
                        f"over the {max_extracted_bytes} byte limit",
                    )
                files[info.filename] = zf.read(info)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, RuntimeError) as e:
        raise ArchiveError(path, str(e))

    logger.debug(f"Read {len(files)} entries from {path.name}")
    return Bundle.from_files(
        name=path.name,
        files=files,
        byte_length=len(raw),
        bundle_id=hashlib.sha256(raw).hexdigest()[:16],
        mode="zip",
    )


def read_directory(path: Union[str, Path]) -> Bundle:
    """Read an unpacked creative folder into a bundle."""
    root = Path(path)
    if not root.is_dir():
        raise InvalidPathError(root, "Not a directory")

    files: dict[str, bytes] = {}
    for file_path in sorted(root.rglob("*")):
        if file_path.is_symlink() or not file_path.is_file():
            continue
        rel = file_path.relative_to(root).as_posix()
        try:
            files[rel] = file_path.read_bytes()
        except OSError as e:
            raise ArchiveError(file_path, f"OS error: {e}")

    logger.debug(f"Read {len(files)} files from folder {root.name}")
    return Bundle.from_files(name=root.name, files=files, mode="directory")


def load_bundle(path: Union[str, Path], max_extracted_bytes: int = MAX_EXTRACTED_BYTES) -> Bundle:
    """Dispatch on archive file vs folder."""
    path = Path(path)
    if path.is_dir():
        return read_directory(path)
    if path.suffix.lower() not in ARCHIVE_EXTENSIONS:
        logger.warning(f"{path.name} does not have a .zip/.adz extension, reading as ZIP")
    return read_archive(path, max_extracted_bytes)
