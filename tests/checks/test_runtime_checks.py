"""Tests for runtime-dependent checks before and after metrics arrive."""

import math

from creative_audit.checks import TimeToRenderCheck, TimingCheck
from creative_audit.engine import AuditEngine
from creative_audit.models import RuntimeMetrics, Severity


class TestTimeToRenderCheck:
    def test_pending_without_runtime(self, make_context, simple_bundle):
        finding = TimeToRenderCheck().execute(make_context(simple_bundle))
        assert finding.severity is Severity.PENDING
        assert finding.messages == ("Awaiting runtime metrics", "Target: < 500 ms")

    def test_fast_render(self, make_context, simple_bundle):
        context = make_context(simple_bundle, runtime=RuntimeMetrics(visual_start=120.4))
        finding = TimeToRenderCheck().execute(context)
        assert finding.severity is Severity.PASS
        assert finding.messages == ("Render start ~120 ms", "Target: < 500 ms", "Fast visual start")

    def test_slow_render(self, make_context, simple_bundle):
        context = make_context(simple_bundle, runtime=RuntimeMetrics(visual_start=800))
        finding = TimeToRenderCheck().execute(context)
        assert finding.severity is Severity.WARN
        assert "Slow render (300ms over target)" in finding.messages

    def test_not_captured(self, make_context, simple_bundle):
        context = make_context(simple_bundle, runtime=RuntimeMetrics(visual_start=math.nan))
        finding = TimeToRenderCheck().execute(context)
        assert finding.severity is Severity.WARN
        assert finding.messages[0] == "Not captured"


class TestTimingCheck:
    def test_pending_without_runtime(self, make_context, simple_bundle):
        assert TimingCheck().execute(make_context(simple_bundle)).severity is Severity.PENDING

    def test_reports_captured_values(self, make_context, simple_bundle):
        runtime = RuntimeMetrics(source="preview", dom_content_loaded=42.6, visual_start=None, frames=30)
        finding = TimingCheck().execute(make_context(simple_bundle, runtime=runtime))
        assert finding.severity is Severity.PASS
        assert finding.messages == (
            "DOMContentLoaded 43 ms",
            "Time to Render not captured",
            "Frames observed 30",
            "Source: preview",
        )


class TestApplyRuntime:
    def test_runtime_patches_pending_findings(self, simple_bundle):
        engine = AuditEngine()
        result = engine.analyze(simple_bundle)
        by_id = {f.id: f for f in result.findings}
        assert by_id["timeToRender"].severity is Severity.PENDING
        assert result.summary.pending == 2

        patched = engine.apply_runtime(result, simple_bundle, RuntimeMetrics(visual_start=200))
        by_id = {f.id: f for f in patched.findings}
        assert by_id["timeToRender"].severity is Severity.PASS
        assert by_id["timing"].severity is Severity.PASS
        assert patched.summary.pending == 0
        assert patched.runtime.visual_start == 200
        assert [f.id for f in patched.findings] == [f.id for f in result.findings]

    def test_runtime_checks_never_move_status(self, simple_bundle):
        engine = AuditEngine()
        result = engine.analyze(simple_bundle)
        patched = engine.apply_runtime(result, simple_bundle, RuntimeMetrics(visual_start=5000))
        assert {f.id: f for f in patched.findings}["timeToRender"].severity is Severity.WARN
        assert patched.summary.status is result.summary.status
