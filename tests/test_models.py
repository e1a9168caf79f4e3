"""Tests for result models and the severity order."""

import pytest

from creative_audit.models import (
    AdSize,
    BundleResult,
    BundleResultSummary,
    Finding,
    FindingOffender,
    LoadPhaseMetrics,
    Reference,
    ReferenceType,
    RuntimeMetrics,
    Severity,
    worst,
    worst_of,
)


class TestSeverityOrder:
    """worst() over PASS < WARN < FAIL with PENDING absorbed."""

    def test_total_order(self):
        assert worst(Severity.PASS, Severity.WARN) is Severity.WARN
        assert worst(Severity.WARN, Severity.FAIL) is Severity.FAIL
        assert worst(Severity.FAIL, Severity.PASS) is Severity.FAIL

    def test_idempotent(self):
        for severity in Severity:
            assert worst(severity, severity) is severity

    def test_commutative_on_terminal(self):
        terminal = [Severity.PASS, Severity.WARN, Severity.FAIL]
        for a in terminal:
            for b in terminal:
                assert worst(a, b) is worst(b, a)

    def test_pending_absorbed(self):
        assert worst(Severity.PENDING, Severity.PASS) is Severity.PASS
        assert worst(Severity.WARN, Severity.PENDING) is Severity.WARN

    def test_fold_never_yields_pending_from_terminal(self):
        assert worst_of([Severity.PASS, Severity.PASS]) is Severity.PASS
        assert worst_of([]) is Severity.PASS
        assert worst_of([Severity.PENDING, Severity.WARN]) is Severity.WARN

    def test_pending_has_no_rank(self):
        assert Severity.PENDING.rank is None
        assert not Severity.PENDING.is_terminal
        assert Severity.FAIL.rank > Severity.WARN.rank > Severity.PASS.rank

    def test_parse(self):
        assert Severity.parse(" warn ") is Severity.WARN
        assert Severity.parse(Severity.FAIL) is Severity.FAIL
        with pytest.raises(ValueError, match="Unknown severity"):
            Severity.parse("LOUD")


class TestReference:
    def test_in_zip_requires_normalized(self):
        with pytest.raises(ValueError):
            Reference("index.html", ReferenceType.IMAGE, "a.png", in_zip=True)

    def test_in_zip_and_external_exclusive(self):
        with pytest.raises(ValueError):
            Reference(
                "index.html",
                ReferenceType.IMAGE,
                "https://x/a.png",
                normalized="a.png",
                in_zip=True,
                external=True,
            )

    def test_is_local(self):
        assert Reference("index.html", ReferenceType.IMAGE, "a.png", "a.png").is_local
        assert not Reference("index.html", ReferenceType.IMAGE, "https://x/a.png", external=True).is_local
        assert not Reference("index.html", ReferenceType.IMAGE, "data:image/gif;base64,R0").is_local

    def test_to_dict_uses_from_key(self):
        ref = Reference("index.html", ReferenceType.SCRIPT, "main.js", "main.js", in_zip=True, line=3)
        data = ref.to_dict()
        assert data["from"] == "index.html"
        assert data["type"] == "js"
        assert data["in_zip"] is True
        assert data["line"] == 3


class TestFinding:
    def test_sequences_become_tuples(self):
        finding = Finding(
            id="x",
            title="X",
            severity="warn",
            messages=["a", "b"],
            offenders=[FindingOffender("a.js")],
        )
        assert finding.messages == ("a", "b")
        assert isinstance(finding.offenders, tuple)
        assert finding.severity is Severity.WARN


class TestBundleResult:
    def test_to_dict_flattens_metrics(self):
        result = BundleResult(
            bundle_id="abc",
            bundle_name="banner.zip",
            ad_size=AdSize(300, 250),
            metrics=LoadPhaseMetrics(initial_bytes=10, subload_bytes=20, initial_requests=2),
            summary=BundleResultSummary(status=Severity.WARN),
        )
        data = result.to_dict()
        assert data["initial_bytes"] == 10
        assert data["subload_bytes"] == 20
        assert data["subsequent_bytes"] == 20
        assert data["ad_size"] == {"width": 300, "height": 250}
        assert data["summary"]["status"] == "WARN"

    def test_finding_lookup(self):
        finding = Finding("iabWeight", "IAB Weight", Severity.PASS)
        result = BundleResult("abc", "b.zip", findings=(finding,))
        assert result.finding("iabWeight") is finding
        assert result.finding("missing") is None


class TestRuntimeMetrics:
    def test_from_dict_ignores_unknown_keys(self):
        runtime = RuntimeMetrics.from_dict({"visual_start": 320.5, "frames": 60, "bogus": 1})
        assert runtime.visual_start == 320.5
        assert runtime.frames == 60
        assert runtime.to_dict()["dom_content_loaded"] is None
