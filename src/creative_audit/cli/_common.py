"""Shared CLI helpers."""

from pathlib import Path
from typing import List, Optional

from rich.console import Console

from ..config import AuditSettings, load_settings

console = Console()


def resolve_settings(
    config: Optional[Path] = None,
    profiles: Optional[List[str]] = None,
    workers: Optional[int] = None,
    verbose: bool = False,
    quiet: bool = False,
) -> AuditSettings:
    """Build settings from CLI options."""
    overrides = {}
    if profiles:
        overrides["profiles"] = tuple(profiles)
    if workers is not None:
        overrides["workers"] = workers
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_settings(config_file=config, **overrides)
