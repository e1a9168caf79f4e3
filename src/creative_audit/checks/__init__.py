"""Check implementations: each reads a CheckContext and returns one Finding.

Static checks (17) run on every audit. Runtime checks (tagged ``runtime``)
report PENDING until runtime metrics are applied to the result.
"""

from .asset_references import AssetReferencesCheck
from .base import RUNTIME_TAG, Check, CheckContext, Priority, Profile, applies_to, make_finding
from .click_tags import ClickTagsCheck
from .external_resources import ExternalResourcesCheck
from .file_limits import FileLimitsCheck
from .gwd_environment import GwdEnvironmentCheck
from .hardcoded_click_url import HardcodedClickUrlCheck
from .https_only import HttpsOnlyCheck
from .iab_requests import IabRequestsCheck
from .iab_weight import IabWeightCheck
from .index_file import IndexFileCheck
from .invalid_markup import InvalidMarkupCheck
from .minified import MinifiedCheck
from .orphan_assets import OrphanAssetsCheck
from .packaging import PackagingCheck
from .primary_asset import PrimaryAssetCheck
from .registry import CheckRegistry
from .relative_paths import RelativePathsCheck
from .runner import run_check, run_checks, run_checks_sync
from .system_artifacts import SystemArtifactsCheck
from .time_to_render import TimeToRenderCheck
from .timing import TimingCheck


def get_default_checks() -> list:
    """Return all default checks in report order.

    1. Packaging and entry point
    2. References
    3. Click-through and environment
    4. IAB weight and performance
    5. Markup validation
    6. Runtime (PENDING until metrics are applied)
    """
    return [
        # Packaging and entry point
        PrimaryAssetCheck(),
        IndexFileCheck(),
        PackagingCheck(),
        FileLimitsCheck(),
        SystemArtifactsCheck(),
        # References
        AssetReferencesCheck(),
        OrphanAssetsCheck(),
        HttpsOnlyCheck(),
        ExternalResourcesCheck(),
        RelativePathsCheck(),
        # Click-through and environment
        ClickTagsCheck(),
        HardcodedClickUrlCheck(),
        GwdEnvironmentCheck(),
        # IAB weight and performance
        IabWeightCheck(),
        IabRequestsCheck(),
        MinifiedCheck(),
        # Validation
        InvalidMarkupCheck(),
        # Runtime
        TimeToRenderCheck(),
        TimingCheck(),
    ]


def default_registry() -> CheckRegistry:
    return CheckRegistry(get_default_checks())


__all__ = [
    "RUNTIME_TAG",
    "AssetReferencesCheck",
    "Check",
    "CheckContext",
    "CheckRegistry",
    "ClickTagsCheck",
    "ExternalResourcesCheck",
    "FileLimitsCheck",
    "GwdEnvironmentCheck",
    "HardcodedClickUrlCheck",
    "HttpsOnlyCheck",
    "IabRequestsCheck",
    "IabWeightCheck",
    "IndexFileCheck",
    "InvalidMarkupCheck",
    "MinifiedCheck",
    "OrphanAssetsCheck",
    "PackagingCheck",
    "PrimaryAssetCheck",
    "Priority",
    "Profile",
    "RelativePathsCheck",
    "SystemArtifactsCheck",
    "TimeToRenderCheck",
    "TimingCheck",
    "applies_to",
    "default_registry",
    "get_default_checks",
    "make_finding",
    "run_check",
    "run_checks",
    "run_checks_sync",
]
