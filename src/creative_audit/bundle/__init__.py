"""Bundle model, archive input adapter and primary discovery."""

from .archive import load_bundle, read_archive, read_directory
from .discovery import (
    DiscoveryResult,
    choose_fallback,
    discover_primary,
    is_html,
    is_index_file,
    require_primary,
)
from .models import Bundle

__all__ = [
    "Bundle",
    "DiscoveryResult",
    "choose_fallback",
    "discover_primary",
    "is_html",
    "is_index_file",
    "load_bundle",
    "read_archive",
    "read_directory",
    "require_primary",
]
