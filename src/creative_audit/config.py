"""Configuration loading and management for creative-audit.

Configuration sources are merged in priority order:
    1. Defaults (defined in AuditSettings)
    2. Global config (~/.creative-audit.toml)
    3. Project config (./creative-audit.toml)
    4. Explicit config file
    5. Environment variables (CREATIVE_AUDIT_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> settings = load_settings(profiles=["IAB"])
    >>> settings.profiles
    ('IAB',)
    >>> settings.thresholds.initial_load_kb
    150
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .models import Severity

Verbosity = Literal["quiet", "normal", "verbose"]

KNOWN_PROFILES = ("CM360", "IAB")


@dataclass(frozen=True)
class ThresholdConfig:
    """Budgets and heuristic cut-offs used by the checks.

    Attributes:
        Weight budgets (kilobytes, 1 KB = 1024 bytes, gzip-compressed):
            initial_load_kb: Initial-load budget
            subsequent_load_kb: Subload budget
            max_zipped_kb: Advisory cap on the uploaded archive size

        Requests:
            initial_request_cap: Maximum initial-load requests
            request_warn_ratio: Fraction of the cap above which a WARN is raised

        Upload limits:
            max_file_count: Maximum files in the bundle
            max_upload_mb: Maximum upload size in megabytes

        Runtime:
            render_target_ms: Render-start target for the runtime check

        Output:
            offender_cap: Offenders kept per finding before truncation

        Minification heuristic:
            minified_long_line: A line at least this long marks the file minified
            minified_dense_line: Line length counted as "dense"
            minified_density: Non-whitespace ratio required for a dense line
            minified_dense_count: Dense lines required to mark the file minified
    """

    # === Weight ===
    initial_load_kb: int = 150
    subsequent_load_kb: int = 1000
    max_zipped_kb: int = 200

    # === Requests ===
    initial_request_cap: int = 15
    request_warn_ratio: float = 0.8

    # === Upload limits ===
    max_file_count: int = 100
    max_upload_mb: float = 10.0

    # === Runtime ===
    render_target_ms: int = 500

    # === Output ===
    offender_cap: int = 100

    # === Minification ===
    minified_long_line: int = 2000
    minified_dense_line: int = 200
    minified_density: float = 0.98
    minified_dense_count: int = 20

    def __post_init__(self) -> None:
        """Validate threshold configuration."""
        positive_fields = [
            "initial_load_kb",
            "subsequent_load_kb",
            "max_zipped_kb",
            "initial_request_cap",
            "max_file_count",
            "render_target_ms",
            "offender_cap",
            "minified_long_line",
            "minified_dense_line",
            "minified_dense_count",
        ]
        for field_name in positive_fields:
            value = getattr(self, field_name)
            if value < 1:
                raise ValueError(f"{field_name} must be at least 1")

        if self.max_upload_mb <= 0:
            raise ValueError("max_upload_mb must be positive")
        if not 0.0 < self.request_warn_ratio <= 1.0:
            raise ValueError("request_warn_ratio must be in (0.0, 1.0]")
        if not 0.0 < self.minified_density <= 1.0:
            raise ValueError("minified_density must be in (0.0, 1.0]")

    @property
    def initial_load_bytes(self) -> int:
        return self.initial_load_kb * 1024

    @property
    def subsequent_load_bytes(self) -> int:
        return self.subsequent_load_kb * 1024

    @property
    def max_zipped_bytes(self) -> int:
        return self.max_zipped_kb * 1024

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)


DEFAULT_THRESHOLDS = ThresholdConfig()


@dataclass(frozen=True)
class AuditSettings:
    """Settings for one audit run.

    Attributes:
        Profile selection:
            profiles: Active rule profiles (CM360, IAB)

        Packaging:
            disallow_nested_zips: Fail bundles containing .zip/.adz entries
            dangerous_extensions: Extensions that fail the packaging check

        External resources:
            external_host_allowlist: Hosts external references may use
            external_filetype_allowlist: Extensions allowed from any host

        Click-through:
            click_tag_patterns: Regular expressions that mark a clickTag declaration

        Severities:
            missing_asset_severity: Severity for references to absent files
            orphan_severity: Severity for unreferenced files
            http_severity: Severity for insecure external references
            external_resource_severity: Severity for non-allowlisted externals
            hardcoded_nav_severity: Severity for hard-coded clickthrough URLs

        Execution:
            workers: Worker threads for multi-bundle runs (None = auto)
            verbosity: Logging verbosity level
    """

    profiles: tuple[str, ...] = KNOWN_PROFILES

    disallow_nested_zips: bool = True
    dangerous_extensions: tuple[str, ...] = (".exe", ".bat", ".cmd", ".sh", ".msi")

    external_host_allowlist: tuple[str, ...] = ("fonts.googleapis.com", "fonts.gstatic.com")
    external_filetype_allowlist: tuple[str, ...] = (".woff", ".woff2", ".ttf")

    click_tag_patterns: tuple[str, ...] = (
        r"\bwindow\.clickTag\b",
        r"\bclickTag\b",
        r"\bclickTAG\b",
        r"\bEnabler\.(exit|exitOverride)\b",
    )

    missing_asset_severity: str = "FAIL"
    orphan_severity: str = "WARN"
    http_severity: str = "FAIL"
    external_resource_severity: str = "WARN"
    hardcoded_nav_severity: str = "WARN"

    workers: Optional[int] = None
    verbosity: Verbosity = "normal"

    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)

    def __post_init__(self) -> None:
        """Normalize sequence fields and validate values."""
        for name in (
            "profiles",
            "dangerous_extensions",
            "external_host_allowlist",
            "external_filetype_allowlist",
            "click_tag_patterns",
        ):
            value = getattr(self, name)
            if isinstance(value, str):
                value = [v for v in value.split(",") if v.strip()]
            object.__setattr__(self, name, tuple(v.strip() for v in value))

        profiles = tuple(p.upper() for p in self.profiles)
        unknown = [p for p in profiles if p not in KNOWN_PROFILES]
        if unknown:
            raise InvalidConfigError("profiles", ", ".join(unknown), "unknown profile")
        if not profiles:
            raise InvalidConfigError("profiles", "", "at least one profile is required")
        object.__setattr__(self, "profiles", profiles)

        for name in ("dangerous_extensions", "external_filetype_allowlist"):
            exts = tuple(
                (e if e.startswith(".") else f".{e}").lower() for e in getattr(self, name)
            )
            object.__setattr__(self, name, exts)
        object.__setattr__(
            self, "external_host_allowlist", tuple(h.lower() for h in self.external_host_allowlist)
        )

        for name in (
            "missing_asset_severity",
            "orphan_severity",
            "http_severity",
            "external_resource_severity",
            "hardcoded_nav_severity",
        ):
            value = getattr(self, name)
            try:
                severity = Severity.parse(value)
            except ValueError:
                raise InvalidConfigError(name, value, "expected PASS, WARN or FAIL") from None
            if not severity.is_terminal:
                raise InvalidConfigError(name, value, "expected PASS, WARN or FAIL")
            object.__setattr__(self, name, severity.value)

        for pattern in self.click_tag_patterns:
            try:
                re.compile(pattern)
            except re.error as e:
                raise InvalidConfigError(
                    "click_tag_patterns", pattern, f"invalid regular expression: {e}"
                ) from None

        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")

    def severity(self, name: str) -> Severity:
        """Return a configured severity field as a ``Severity``."""
        return Severity(getattr(self, name))


def load_settings(config_file: Optional[Path] = None, **overrides) -> AuditSettings:
    """Load settings with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated AuditSettings instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict = {}

    global_config = Path.home() / ".creative-audit.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "creative-audit.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    # [thresholds] table from TOML
    thresholds = merged.pop("thresholds", None)
    if thresholds is not None:
        if isinstance(thresholds, dict):
            try:
                merged["thresholds"] = ThresholdConfig(**thresholds)
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid [thresholds] config: {e}") from e
        elif isinstance(thresholds, ThresholdConfig):
            merged["thresholds"] = thresholds
        else:
            raise InvalidConfigError("thresholds", thresholds, "expected a table")

    try:
        return AuditSettings(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _load_env_vars() -> dict[str, Any]:
    """Load settings from CREATIVE_AUDIT_* environment variables.

    Scalar fields map directly (``CREATIVE_AUDIT_ORPHAN_SEVERITY=FAIL``);
    tuple fields take comma-separated values
    (``CREATIVE_AUDIT_PROFILES=IAB``).
    """
    type_hints = get_type_hints(AuditSettings)
    result: dict[str, Any] = {}

    for field_name in AuditSettings.__dataclass_fields__:
        env_key = f"CREATIVE_AUDIT_{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e)) from e
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    origin = getattr(type_hint, "__origin__", None)

    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return tuple(v.strip() for v in value.split(",") if v.strip())

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file, wrapping syntax errors in ConfigurationError."""
    try:
        import tomllib
    except ModuleNotFoundError:
        # Python 3.9-3.10
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e
