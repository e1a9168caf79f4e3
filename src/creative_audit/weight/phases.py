"""Load-phase classification and weight/request accounting.

The rule table biases toward subload. Initial weight is checked against the
strictest budget, so under-counting it is the worse error.

    origin           css      js       font     img      other
    primary doc      initial  initial  initial  subload  subload
    stylesheet       initial  initial  initial  subload  subload
    script           subload  subload  subload  subload  subload
    anything else    subload  subload  subload  subload  subload
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional
from urllib.parse import urlsplit

from ..bundle.models import Bundle
from ..logging_config import get_logger
from ..models import LoadPhaseMetrics, Reference, ReferenceType
from .compression import CompressedSizeCache

logger = get_logger(__name__)


class Phase(Enum):
    INITIAL = "initial"
    SUBLOAD = "subload"


# Shared by the primary document and stylesheets.
_DOCUMENT_RULES = {
    ReferenceType.STYLESHEET: Phase.INITIAL,
    ReferenceType.SCRIPT: Phase.INITIAL,
    ReferenceType.FONT: Phase.INITIAL,
    ReferenceType.IMAGE: Phase.SUBLOAD,
}


def classify_phase(ref: Reference, primary_path: str) -> Phase:
    origin = ref.from_path
    if origin == primary_path:
        return _DOCUMENT_RULES.get(ref.type, Phase.SUBLOAD)
    lower = origin.lower()
    if lower.endswith(".css"):
        return _DOCUMENT_RULES.get(ref.type, Phase.SUBLOAD)
    # Scripts and everything else.
    return Phase.SUBLOAD


def external_host(url: str) -> Optional[str]:
    try:
        host = urlsplit(url.strip()).hostname
    except ValueError:
        return None
    return host.lower() if host else None


def _external_key(url: str) -> str:
    return url.strip().split("#", 1)[0]


def compute_load_phase_metrics(
    references: Iterable[Reference],
    bundle: Bundle,
    primary_path: str,
    sizes: Optional[CompressedSizeCache] = None,
) -> LoadPhaseMetrics:
    """Bucket assets into phases and total their weight and requests.

    The primary document is always initial. An asset reached from both
    phases counts once, as initial. External references count as requests
    and hosts but never as bytes. Anchors are navigation and are skipped.
    """
    if sizes is None:
        sizes = CompressedSizeCache(bundle)

    initial_assets: set[str] = {primary_path}
    subload_assets: set[str] = set()
    initial_external: set[str] = set()
    subload_external: set[str] = set()
    initial_hosts: set[str] = set()
    total_hosts: set[str] = set()

    for ref in references:
        if ref.type is ReferenceType.ANCHOR:
            continue
        phase = classify_phase(ref, primary_path)

        if ref.external:
            host = external_host(ref.url)
            if host is None:
                continue
            total_hosts.add(host)
            key = _external_key(ref.url)
            if phase is Phase.INITIAL:
                initial_hosts.add(host)
                initial_external.add(key)
            else:
                subload_external.add(key)
            continue

        if not ref.in_zip or ref.normalized is None:
            continue
        if phase is Phase.INITIAL:
            initial_assets.add(ref.normalized)
        else:
            subload_assets.add(ref.normalized)

    subload_assets -= initial_assets
    subload_external -= initial_external

    initial_requests = len(initial_assets) + len(initial_external)
    subload_requests = len(subload_assets) + len(subload_external)

    metrics = LoadPhaseMetrics(
        initial_bytes=sizes.total(initial_assets),
        subload_bytes=sizes.total(subload_assets),
        initial_bytes_uncompressed=sum(bundle.size_of(p) for p in initial_assets),
        subload_bytes_uncompressed=sum(bundle.size_of(p) for p in subload_assets),
        total_bytes=sum(len(data) for data in bundle.files.values()),
        total_bytes_compressed=sizes.total(bundle.files),
        zipped_bytes=bundle.byte_length,
        initial_requests=initial_requests,
        subload_requests=subload_requests,
        total_requests=initial_requests + subload_requests,
        initial_hosts=len(initial_hosts),
        total_hosts=len(total_hosts),
        initial_assets=tuple(sorted(initial_assets)),
        subload_assets=tuple(sorted(subload_assets)),
    )
    logger.debug(
        f"Load phases for {bundle.name}: initial {metrics.initial_requests} req / "
        f"{metrics.initial_bytes} B, subload {metrics.subload_requests} req / "
        f"{metrics.subload_bytes} B"
    )
    return metrics
