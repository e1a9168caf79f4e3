"""fileLimits — file count and upload size caps.

Profiles: CM360
Priority: required
"""

from __future__ import annotations

from ..models import Finding, Severity
from .base import CheckContext, Priority, Profile, make_finding


class FileLimitsCheck:
    id = "fileLimits"
    title = "File Count and Upload Size"
    description = "CM360: at most 100 files and 10 MB compressed upload size."
    profiles = frozenset({Profile.CM360})
    priority = Priority.REQUIRED
    tags = frozenset({"limits", "size", "cm360"})

    def execute(self, context: CheckContext) -> Finding:
        thresholds = context.settings.thresholds
        file_count = len(context.files)
        zip_bytes = context.partial.metrics.zipped_bytes or context.bundle.byte_length
        max_bytes = thresholds.max_upload_bytes

        messages = [
            f"Files: {file_count} / {thresholds.max_file_count}",
            f"Zip size: {zip_bytes / 1024:.1f} KB / {max_bytes / 1024:.1f} KB",
        ]
        over_count = file_count > thresholds.max_file_count
        over_size = zip_bytes > max_bytes
        if over_count:
            messages.append(f"File count exceeds limit by {file_count - thresholds.max_file_count} files")
        if over_size:
            messages.append(f"ZIP size exceeds limit by {(zip_bytes - max_bytes) / 1024:.1f} KB")

        severity = Severity.FAIL if over_count or over_size else Severity.PASS
        return make_finding(self, severity, messages)
