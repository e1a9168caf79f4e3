"""End-to-end tests for the audit engine."""

import logging

from creative_audit import audit_bundle
from creative_audit.checks import CheckRegistry, get_default_checks
from creative_audit.checks.base import Priority, Profile
from creative_audit.config import AuditSettings
from creative_audit.engine import AuditEngine
from creative_audit.exceptions import ArchiveError, DiscoveryError
from creative_audit.models import AdSize, Severity, SizeSourceMethod

ALL_IDS = [
    "primaryAsset",
    "indexFile",
    "packaging",
    "fileLimits",
    "systemArtifacts",
    "assetReferences",
    "orphanAssets",
    "httpsOnly",
    "externalResources",
    "relativePaths",
    "clickTags",
    "hardcodedClickUrl",
    "gwdEnvironment",
    "iabWeight",
    "iabRequests",
    "minified",
    "invalidMarkup",
    "timeToRender",
    "timing",
]


class ExplodingCheck:
    id = "exploding"
    title = "Exploding"
    description = "Always raises."
    profiles = frozenset({Profile.CM360})
    priority = Priority.REQUIRED
    tags = frozenset()

    def execute(self, context):
        raise RuntimeError("boom")


class TestAnalyze:
    def test_simple_bundle(self, simple_bundle):
        result = AuditEngine().analyze(simple_bundle)
        assert result.bundle_name == "banner_300x250.zip"
        assert result.primary.path == "index.html"
        assert result.ad_size == AdSize(300, 250)
        assert result.ad_size_source.method is SizeSourceMethod.META
        assert [f.id for f in result.findings] == ALL_IDS
        assert result.summary.status is Severity.PASS
        assert result.summary.pending == 2
        assert result.summary.missing_asset_count == 0
        assert result.summary.orphan_count == 0

    def test_stylesheet_images_counted_initial(self, simple_bundle):
        result = AuditEngine().analyze(simple_bundle)
        assert "img/bg.png" in result.metrics.initial_assets
        assert result.metrics.subload_assets == ("img/logo.png",)

    def test_every_finding_carries_metadata(self, simple_bundle):
        result = AuditEngine().analyze(simple_bundle)
        for finding in result.findings:
            assert finding.title
            assert finding.profiles

    def test_profile_selection(self, simple_bundle):
        result = AuditEngine(AuditSettings(profiles=("CM360",))).analyze(simple_bundle)
        ids = {f.id for f in result.findings}
        assert "externalResources" in ids
        assert "iabRequests" not in ids
        assert "minified" not in ids

    def test_missing_asset_fails_bundle(self, make_bundle, simple_files):
        files = dict(simple_files)
        del files["img/bg.png"]
        result = AuditEngine().analyze(make_bundle(files))
        assert result.summary.status is Severity.FAIL
        assert result.summary.missing_asset_count == 1
        assert result.finding("assetReferences").severity is Severity.FAIL

    def test_raising_check_is_isolated(self, simple_bundle):
        registry = CheckRegistry(get_default_checks() + [ExplodingCheck()])
        result = AuditEngine(registry=registry).analyze(simple_bundle)
        exploded = [f for f in result.findings if f.id == "exploding"]
        assert len(exploded) == 1
        assert exploded[0].severity is Severity.FAIL
        assert exploded[0].messages == ("Check could not complete: RuntimeError: boom",)
        assert result.summary.status is Severity.FAIL
        assert len(result.findings) == len(ALL_IDS) + 1

    def test_progress_callback(self, simple_bundle):
        seen = []
        AuditEngine().analyze(simple_bundle, on_progress=seen.append)
        assert seen[0].startswith("Discovering primary document")


class TestAnalyzeMany:
    def test_outcomes_in_input_order(self, simple_bundle, make_bundle):
        empty = make_bundle({"readme.txt": "nothing here"}, name="empty.zip")
        outcomes = AuditEngine().analyze_many([simple_bundle, empty], workers=2)
        assert [o.bundle_name for o in outcomes] == ["banner_300x250.zip", "empty.zip"]
        assert outcomes[0].ok
        assert not outcomes[1].ok
        assert isinstance(outcomes[1].error, DiscoveryError)

    def test_failure_logged_with_error_code(self, make_bundle, caplog):
        caplog.set_level(logging.WARNING, logger="creative_audit")
        empty = make_bundle({"readme.txt": "nothing here"}, name="empty.zip")
        AuditEngine().analyze_many([empty])
        record = next(r for r in caplog.records if hasattr(r, "audit_error"))
        assert record.audit_error["error_code"] == "CA101"
        assert record.audit_error["context"]["bundle"] == "empty.zip"

    def test_unreadable_archive_captured(self, tmp_path):
        broken = tmp_path / "broken.zip"
        broken.write_bytes(b"not a zip")
        (outcome,) = AuditEngine().analyze_many([broken])
        assert isinstance(outcome.error, ArchiveError)
        assert outcome.result is None


class TestAuditBundle:
    def test_from_zip_path(self, simple_zip):
        result = audit_bundle(simple_zip)
        assert result.bundle_name == "banner_300x250.zip"
        assert result.summary.status is Severity.PASS
        assert result.metrics.zipped_bytes == simple_zip.stat().st_size

    def test_from_directory(self, tmp_path, simple_files):
        root = tmp_path / "creative"
        for path, data in simple_files.items():
            target = root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(data, str):
                target.write_text(data)
            else:
                target.write_bytes(data)
        result = audit_bundle(root)
        assert result.primary.path == "index.html"
        assert result.finding("packaging").severity is not Severity.PASS


class TestBuildContext:
    def test_text_memo_is_per_context(self, simple_bundle, make_context):
        first = make_context(simple_bundle)
        second = make_context(simple_bundle)
        assert first.text_of("style.css") is first.text_of("style.css")
        assert "url(img/bg.png)" in second.text_of("style.css")
        assert first._texts is not second._texts
        assert first.bundle == second.bundle
