"""
Logging configuration for creative-audit.

Terminal logs go to stderr through rich so stdout stays clean for json/csv
output. Per-bundle messages carry the bundle name as a prefix, and converted
check failures carry a structured ``audit_error`` payload that the file log
writes out in full.
"""

import json
import logging
from typing import Any, MutableMapping, Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "creative_audit"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AuditErrorFormatter(logging.Formatter):
    """File formatter that appends a record's ``audit_error`` payload as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        payload = getattr(record, "audit_error", None)
        if payload:
            text = f"{text} | {json.dumps(payload, sort_keys=True, default=str)}"
        return text


class BundleLoggerAdapter(logging.LoggerAdapter):
    """Prefix every message with the bundle it concerns."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[{self.extra['bundle']}] {msg}", kwargs


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure logging for a CLI run.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Suppress all but ERROR level logging
        log_file: Optional file path to append logs to

    Returns:
        The creative_audit root logger
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            # Messages embed file paths and URLs with brackets.
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(AuditErrorFormatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        handlers.append(file_handler)

    # force: the CLI may be invoked more than once in one process.
    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``creative_audit`` namespace."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def get_bundle_logger(name: str, bundle_name: str) -> BundleLoggerAdapter:
    return BundleLoggerAdapter(get_logger(name), {"bundle": bundle_name})
