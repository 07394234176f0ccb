"""Tests for error kinds, diagnostics and scan results."""

import pytest

from streaming_xml_tokenizer.shared import (
    DiagnosticSeverity,
    ErrorKind,
    ParseDiagnostic,
    ScanResult,
    ScanStatistics,
    XMLSyntaxError,
)


class TestErrorKind:
    """Tests for the ErrorKind enumeration."""

    def test_messages(self):
        """Test the user-facing messages."""
        assert ErrorKind.UNMATCHED_TAG.message == "Unbalanced Tag"
        assert ErrorKind.INCOMPLETE_DOCUMENT.message == "Incomplete XML Document"
        assert ErrorKind.DECL_NOT_AT_START.message == "XMLDecl not at start of document"

    def test_format_with_tag_name(self):
        """Test message formatting for tag errors."""
        assert ErrorKind.UNMATCHED_TAG.format("a") == "Unbalanced Tag (/a)"
        assert ErrorKind.END_TAG_ATTRIBUTES_INVALID.format("b") == "End Tag Attributes Invalid (/b)"
        assert ErrorKind.MALFORMED_XML.format() == "Error Parsing XML"

    def test_fatal_kinds(self):
        """Test which kinds stop the scan."""
        non_fatal = {
            ErrorKind.DECL_NOT_AT_START,
            ErrorKind.DECL_ATTR_ERROR,
            ErrorKind.END_TAG_ATTRIBUTES_INVALID,
            ErrorKind.UNMATCHED_TAG,
        }
        for kind in ErrorKind:
            assert kind.fatal is (kind not in non_fatal), kind


class TestParseDiagnostic:
    """Tests for ParseDiagnostic."""

    def test_creation(self):
        """Test diagnostic creation and severity."""
        diagnostic = ParseDiagnostic(ErrorKind.UNMATCHED_TAG, "Unbalanced Tag (/a)", 7)

        assert diagnostic.position == 7
        assert diagnostic.details == {}
        assert diagnostic.severity is DiagnosticSeverity.ERROR
        assert not diagnostic.is_fatal

    def test_fatal_severity(self):
        """Test severity of fatal kinds."""
        diagnostic = ParseDiagnostic(ErrorKind.COMMENT_ERROR, "Error Parsing Comment", 1)
        assert diagnostic.severity is DiagnosticSeverity.FATAL

    def test_validation(self):
        """Test diagnostic validation."""
        with pytest.raises(ValueError, match="message cannot be empty"):
            ParseDiagnostic(ErrorKind.MALFORMED_XML, "", 1)
        with pytest.raises(ValueError, match="position must be >= 1"):
            ParseDiagnostic(ErrorKind.MALFORMED_XML, "Error Parsing XML", 0)


class TestScanStatistics:
    """Tests for ScanStatistics."""

    def test_event_counting(self):
        """Test the event distribution."""
        statistics = ScanStatistics()
        statistics.count_event("start_tag")
        statistics.count_event("start_tag")
        statistics.count_event("text")

        assert statistics.event_counts == {"start_tag": 2, "text": 1}
        assert statistics.total_events == 3

    def test_rates(self):
        """Test derived throughput figures."""
        statistics = ScanStatistics(characters_processed=500, processing_time_ms=100.0)
        statistics.count_event("text")

        assert statistics.characters_per_second == 5000.0
        assert statistics.events_per_second == 10.0

    def test_zero_time(self):
        """Test division guards."""
        statistics = ScanStatistics(characters_processed=10)
        assert statistics.characters_per_second == 0.0
        assert statistics.events_per_second == 0.0


class TestScanResult:
    """Tests for ScanResult."""

    def test_success_without_errors(self):
        """Test an error-free result."""
        result = ScanResult()
        assert result.success is True
        assert result.error_count == 0
        assert result.fatal_error is None

    def test_errors_and_fatal_error(self):
        """Test lookup helpers."""
        unmatched = ParseDiagnostic(ErrorKind.UNMATCHED_TAG, "Unbalanced Tag (/a)", 4)
        incomplete = ParseDiagnostic(ErrorKind.INCOMPLETE_DOCUMENT, "Incomplete XML Document", 9)
        result = ScanResult(errors=[unmatched, incomplete], aborted=True)

        assert result.success is False
        assert result.error_count == 2
        assert result.fatal_error is incomplete
        assert result.errors_of_kind(ErrorKind.UNMATCHED_TAG) == [unmatched]


class TestXMLSyntaxError:
    """Tests for the strict-mode exception."""

    def test_carries_diagnostic(self):
        """Test exception attributes."""
        diagnostic = ParseDiagnostic(ErrorKind.DTD_ERROR, "Error Parsing DTD", 3)
        error = XMLSyntaxError(diagnostic)

        assert error.diagnostic is diagnostic
        assert error.kind is ErrorKind.DTD_ERROR
        assert error.position == 3
        assert str(error) == "Error Parsing DTD at position 3"
