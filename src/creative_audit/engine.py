"""AuditEngine — runs one bundle through discovery, parsing, load phases and checks."""

from __future__ import annotations

import asyncio
import concurrent.futures
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Union

from .aggregation import apply_runtime_metrics, summarize
from .bundle import Bundle, load_bundle, require_primary
from .checks import CheckContext, CheckRegistry, default_registry, run_checks
from .checks.helpers import missing_references, orphan_paths
from .config import AuditSettings
from .exceptions import ArchiveError, CreativeAuditError, DiscoveryError, InvalidPathError
from .exceptions.taxonomy import AuditError, ErrorCode
from .logging_config import get_bundle_logger, get_logger
from .models import BundleResult, PrimaryAsset, RuntimeMetrics
from .parsing import parse_primary
from .weight import CompressedSizeCache, compute_load_phase_metrics

logger = get_logger(__name__)

BundleInput = Union[Bundle, str, Path]
ProgressCallback = Optional[Callable[[str], None]]


@dataclass(frozen=True)
class BundleOutcome:
    """Result of one bundle in a batch: either ``result`` or ``error`` is set."""

    bundle_name: str
    result: Optional[BundleResult] = None
    error: Optional[CreativeAuditError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _error_code(error: CreativeAuditError) -> ErrorCode:
    if isinstance(error, DiscoveryError):
        return ErrorCode.CA101
    if isinstance(error, (ArchiveError, InvalidPathError)):
        return ErrorCode.CA100
    return ErrorCode.CA800


class AuditEngine:
    """Orchestrate an audit: discover -> parse -> resolve -> classify -> check -> aggregate."""

    def __init__(
        self,
        settings: Optional[AuditSettings] = None,
        registry: Optional[CheckRegistry] = None,
    ):
        self.settings = settings or AuditSettings()
        self.registry = registry if registry is not None else default_registry()

    def analyze(
        self,
        bundle: Bundle,
        candidates: Optional[Sequence[str]] = None,
        on_progress: ProgressCallback = None,
    ) -> BundleResult:
        """Audit one bundle.

        Raises:
            DiscoveryError: If no primary document can be chosen
        """
        return asyncio.run(self.analyze_async(bundle, candidates, on_progress))

    async def analyze_async(
        self,
        bundle: Bundle,
        candidates: Optional[Sequence[str]] = None,
        on_progress: ProgressCallback = None,
    ) -> BundleResult:
        def _progress(msg: str) -> None:
            if on_progress is not None:
                on_progress(msg)

        log = get_bundle_logger(__name__, bundle.name)

        # Phase 1: Discovery
        _progress(f"Discovering primary document in {bundle.name}...")
        discovery = require_primary(bundle, candidates)
        primary_path = discovery.primary.path
        for message in discovery.messages:
            log.info(message)

        # Phase 2: Parse and resolve
        _progress(f"Parsing {primary_path}...")
        parsed = parse_primary(bundle, primary_path)
        for error in parsed.errors:
            log.debug(error)

        # Phase 3: Load phases (fresh compression memo per pass)
        sizes = CompressedSizeCache(bundle)
        metrics = compute_load_phase_metrics(parsed.references, bundle, primary_path, sizes)

        partial = BundleResult(
            bundle_id=bundle.id,
            bundle_name=bundle.name,
            primary=PrimaryAsset(primary_path, parsed.ad_size, parsed.ad_size_source),
            ad_size=parsed.ad_size,
            ad_size_source=parsed.ad_size_source,
            references=parsed.references,
            required_ids=self.registry.required_ids(self.settings.profiles),
            metrics=metrics,
        )

        # Phase 4: Checks
        _progress(f"Running checks on {bundle.name}...")
        context = self.build_context(bundle, partial)
        findings = tuple(await run_checks(self.registry, context, self.settings.profiles))

        # Phase 5: Aggregate
        summary = summarize(
            findings,
            partial.required_ids,
            orphan_count=len(orphan_paths(context.files, primary_path, parsed.references)),
            missing_asset_count=len(missing_references(parsed.references)),
        )
        log.info(
            f"Audited: {summary.status.value} "
            f"({summary.fails} fail, {summary.warns} warn, {summary.pending} pending)"
        )
        return replace(partial, findings=findings, summary=summary)

    def build_context(
        self,
        bundle: Bundle,
        partial: BundleResult,
        runtime: Optional[RuntimeMetrics] = None,
    ) -> CheckContext:
        primary_path = partial.primary.path if partial.primary else ""
        return CheckContext(
            bundle=bundle,
            files=bundle.paths,
            primary_path=primary_path,
            html_text=bundle.read_text(primary_path) if primary_path else "",
            references=partial.references,
            settings=self.settings,
            partial=partial,
            runtime=runtime,
        )

    def apply_runtime(self, result: BundleResult, bundle: Bundle, runtime: RuntimeMetrics) -> BundleResult:
        """Re-run the runtime checks of ``result`` with ``runtime`` attached."""
        return apply_runtime_metrics(
            result,
            runtime,
            lambda partial, rt: self.build_context(bundle, partial, rt),
            self.registry,
        )

    def analyze_many(
        self,
        bundles: Iterable[BundleInput],
        workers: Optional[int] = None,
        on_progress: ProgressCallback = None,
    ) -> list[BundleOutcome]:
        """Audit independent bundles in a thread pool, outcomes in input order.

        Archive, path and discovery errors are captured per bundle.
        """
        bundles = list(bundles)
        workers = workers or self.settings.workers
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(lambda b: self._outcome(b, on_progress), bundles))

    def _outcome(self, item: BundleInput, on_progress: ProgressCallback) -> BundleOutcome:
        name = item.name if isinstance(item, Bundle) else Path(item).name
        try:
            bundle = item if isinstance(item, Bundle) else load_bundle(item)
            return BundleOutcome(name, result=self.analyze(bundle, on_progress=on_progress))
        except CreativeAuditError as e:
            audit_error = AuditError(
                message=f"Audit of {name} failed: {e}",
                code=_error_code(e),
                context={"bundle": name, **e.details},
                recoverable=False,
            )
            logger.warning(str(audit_error), extra={"audit_error": audit_error.to_json()})
            return BundleOutcome(name, error=e)


def audit_bundle(bundle: BundleInput, settings: Optional[AuditSettings] = None) -> BundleResult:
    """Audit a single bundle, archive or directory with default checks."""
    if not isinstance(bundle, Bundle):
        bundle = load_bundle(bundle)
    return AuditEngine(settings).analyze(bundle)
