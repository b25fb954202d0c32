"""Tests for the exception hierarchy."""

from pathlib import Path

from qualityhub.exceptions import (
    APIError,
    ConfigurationError,
    HistoryError,
    HistoryWriteError,
    InvalidConfigError,
    MalformedReportError,
    NoReportsFoundError,
    ParseError,
    QualityHubError,
    ReportNotFoundError,
    UploadError,
)


class TestHierarchy:
    def test_everything_is_a_qualityhub_error(self):
        for cls in (ParseError, HistoryError, ConfigurationError):
            assert issubclass(cls, QualityHubError)

    def test_parse_errors(self):
        assert issubclass(ReportNotFoundError, ParseError)
        assert issubclass(NoReportsFoundError, ReportNotFoundError)
        assert issubclass(MalformedReportError, ParseError)

    def test_specific_errors(self):
        assert issubclass(HistoryWriteError, HistoryError)
        assert issubclass(InvalidConfigError, ConfigurationError)


class TestMessages:
    def test_details_appended(self):
        err = MalformedReportError(Path("jacoco.xml"), "invalid XML")
        assert str(err) == "Malformed report: jacoco.xml (path=jacoco.xml, reason=invalid XML)"
        assert err.reason == "invalid XML"

    def test_plain_message(self):
        assert str(QualityHubError("boom")) == "boom"

    def test_no_reports_message(self):
        err = NoReportsFoundError(Path("build"), "TEST-*.xml")
        assert err.message == "No reports matching TEST-*.xml found in: build"
        assert err.directory == Path("build")

    def test_invalid_config(self):
        err = InvalidConfigError("output_format", "html", "must be one of rich, markdown, json")
        assert "output_format" in str(err)
        assert err.key == "output_format"


class TestDetailsAndHints:
    def test_none_details_dropped_and_values_stringified(self):
        err = QualityHubError("boom", details={"status": None, "count": 3})
        assert err.details == {"count": "3"}
        assert str(err) == "boom (count=3)"

    def test_no_hint_by_default(self):
        assert QualityHubError("boom").hint is None
        assert QualityHubError("boom", hint="try again").hint == "try again"

    def test_no_reports_hint_names_pattern(self):
        assert "TEST-*.xml" in NoReportsFoundError(Path("build"), "TEST-*.xml").hint

    def test_upload_error(self):
        err = UploadError("http://hub", "refused")
        assert isinstance(err, APIError)
        assert str(err) == "Upload to http://hub failed (reason=refused)"
        assert "api_endpoint" in err.hint
