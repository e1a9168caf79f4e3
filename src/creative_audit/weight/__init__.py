"""Load-phase classification and compressed-weight accounting."""

from .compression import CompressedSizeCache, gzip_size
from .phases import Phase, classify_phase, compute_load_phase_metrics, external_host

__all__ = [
    "CompressedSizeCache",
    "Phase",
    "classify_phase",
    "compute_load_phase_metrics",
    "external_host",
    "gzip_size",
]
