"""Tests for the structured error taxonomy."""

import pytest

from creative_audit.exceptions import (
    ArchiveError,
    CheckExecutionError,
    CreativeAuditError,
    DiscoveryError,
    DuplicateCheckError,
    InvalidConfigError,
)
from creative_audit.exceptions.taxonomy import AuditError, ErrorCode


class TestErrorCode:
    """Test ErrorCode enum."""

    def test_bundle_error_codes(self):
        """Bundle errors are CA1xx."""
        assert ErrorCode.CA100.value == "CA100"  # Archive unreadable
        assert ErrorCode.CA101.value == "CA101"  # No primary document

    def test_check_error_codes(self):
        """Check errors are CA7xx."""
        assert ErrorCode.CA700.value == "CA700"
        assert ErrorCode.CA701.value == "CA701"

    def test_codes_unique(self):
        values = [c.value for c in ErrorCode]
        assert len(values) == len(set(values))


class TestAuditError:
    """Test AuditError formatting and structured output."""

    def test_str_includes_code(self):
        err = AuditError(message="Compression failed", code=ErrorCode.CA400)
        assert str(err) == "[CA400] Compression failed"

    def test_to_json(self):
        err = AuditError(
            message="Check raised",
            code=ErrorCode.CA700,
            context={"check": "iabWeight"},
            recovery_hint="Report it",
        )
        data = err.to_json()
        assert data["error_code"] == "CA700"
        assert data["context"] == {"check": "iabWeight"}
        assert data["recoverable"] is True
        assert data["recovery_hint"] == "Report it"

    def test_is_raisable(self):
        with pytest.raises(AuditError):
            raise AuditError(message="boom", code=ErrorCode.CA800, recoverable=False)


class TestHierarchy:
    """All domain errors share the CreativeAuditError base."""

    @pytest.mark.parametrize(
        "error",
        [
            ArchiveError("a.zip", "bad header"),
            DiscoveryError("a.zip", ("a.html", "b.html")),
            CheckExecutionError("minified", "ZeroDivisionError"),
            InvalidConfigError("profiles", "DV360", "unknown profile"),
            DuplicateCheckError("minified"),
        ],
    )
    def test_base_class(self, error):
        assert isinstance(error, CreativeAuditError)
        assert str(error)

    def test_details_rendered(self):
        err = InvalidConfigError("profiles", "DV360", "unknown profile")
        assert "reason=unknown profile" in str(err)

    def test_discovery_keeps_candidates(self):
        err = DiscoveryError("a.zip", ("a.html", "b.html"))
        assert err.candidates == ["a.html", "b.html"]

    def test_to_dict(self):
        err = ArchiveError("a.zip", "bad header")
        assert err.to_dict() == {
            "type": "ArchiveError",
            "message": "Cannot read creative package: a.zip",
            "details": {"path": "a.zip", "reason": "bad header"},
        }
