"""
Creative Audit - Static compliance auditing for HTML5 ad bundles

Audits zipped HTML5 creatives against CM360 and IAB rules: primary
document discovery, ad size detection, asset reference resolution,
load-phase weight accounting and a pluggable set of compliance checks.
"""

__version__ = "0.1.0"

from .bundle import Bundle, load_bundle
from .config import AuditSettings, ThresholdConfig, load_settings
from .engine import AuditEngine, BundleOutcome, audit_bundle
from .models import BundleResult, Finding, RuntimeMetrics, Severity

__all__ = [
    "audit_bundle",  # Main entry point
    "AuditEngine",  # Multi-bundle and runtime patching
    "AuditSettings",
    "Bundle",
    "BundleOutcome",
    "BundleResult",
    "Finding",
    "RuntimeMetrics",
    "Severity",
    "ThresholdConfig",
    "load_bundle",
    "load_settings",
]
