"""Tests for the formatters package."""

import csv
import io
import json

import pytest
from rich.console import Console

from creative_audit.engine import AuditEngine, BundleOutcome
from creative_audit.exceptions import DiscoveryError
from creative_audit.formatters import (
    CsvFormatter,
    JsonFormatter,
    RichFormatter,
    get_formatter,
)
from creative_audit.formatters.csv_formatter import HEADER


@pytest.fixture
def outcomes(simple_bundle):
    result = AuditEngine().analyze(simple_bundle)
    failed = BundleOutcome("broken.zip", error=DiscoveryError("broken.zip", ["a.html", "b.html"]))
    return [BundleOutcome(result.bundle_name, result=result), failed]


class TestGetFormatter:
    def test_known_formatters(self):
        for name in ("rich", "json", "csv"):
            assert get_formatter(name) is not None

    def test_unknown_formatter(self):
        with pytest.raises(ValueError, match="Unknown formatter"):
            get_formatter("xml")


class TestJsonFormatter:
    def test_format_returns_valid_json(self, outcomes):
        data = json.loads(JsonFormatter().format(outcomes))
        assert isinstance(data, list)
        assert len(data) == 2

        ok = data[0]
        assert ok["bundle_name"] == "banner_300x250.zip"
        assert ok["summary"]["status"] == "PASS"
        assert ok["ad_size"] == {"width": 300, "height": 250}
        assert "initial_bytes" in ok
        assert [f["id"] for f in ok["findings"]][:2] == ["primaryAsset", "indexFile"]

    def test_error_outcome(self, outcomes):
        data = json.loads(JsonFormatter().format(outcomes))
        error = data[1]["error"]
        assert data[1]["bundle_name"] == "broken.zip"
        assert error["type"] == "DiscoveryError"
        assert error["details"]["candidates"] == "a.html, b.html"


class TestCsvFormatter:
    def test_rows(self, outcomes):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(outcomes))))
        assert rows[0] == HEADER
        checks = [r[1] for r in rows[1:] if r[0] == "banner_300x250.zip"]
        assert "primaryAsset" in checks
        # Two non-minified files, one row each.
        assert checks.count("minified") == 2

    def test_error_row(self, outcomes):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(outcomes))))
        assert rows[-1][:3] == ["broken.zip", "error", "FAIL"]

    def test_messages_joined(self, outcomes):
        rows = list(csv.reader(io.StringIO(CsvFormatter().format(outcomes))))
        timing = next(r for r in rows if r[1] == "timeToRender")
        assert timing[3] == "Awaiting runtime metrics | Target: < 500 ms"
        assert timing[4:] == ["", "", ""]


class TestRichFormatter:
    def test_renders_summary_and_errors(self, outcomes):
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        RichFormatter(console=console).render(outcomes)
        text = buffer.getvalue()
        assert "banner_300x250.zip" in text
        assert "Status: PASS" in text
        assert "minified" in text
        assert "No primary HTML document found in broken.zip" in text

    def test_format_returns_empty_string(self, outcomes):
        console = Console(file=io.StringIO(), width=200)
        assert RichFormatter(console=console).format(outcomes) == ""
