"""Tests for the multi-suite JUnit XML parser."""

import pytest

from qualityhub.exceptions import MalformedReportError, NoReportsFoundError, ReportNotFoundError
from qualityhub.parsers import JUnitParser

SUITE_A = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="com.acme.BillingTest" tests="10" failures="1" errors="0" skipped="1" time="2.5">
  <testcase name="charges" classname="com.acme.BillingTest" time="0.1"/>
  <testcase name="refunds" classname="com.acme.BillingTest" time="0.2">
    <flakyFailure message="timeout"/>
  </testcase>
</testsuite>
"""

SUITE_B = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="com.acme.LedgerTest" tests="5" failures="0" errors="0" skipped="0" time="1.0">
  <testcase name="balances" classname="com.acme.LedgerTest"/>
</testsuite>
"""

SUITES = """<?xml version="1.0" encoding="UTF-8"?>
<testsuites>
  <testsuite name="Api" tests="4" failures="1" errors="1" time="0.25">
    <testcase name="get" flaky-failure="true"/>
  </testsuite>
  <testsuite name="Db" tests="2" time="0.25"/>
</testsuites>
"""


class TestJUnitParser:
    def test_accumulates_across_files(self, tmp_path, empty_env):
        (tmp_path / "TEST-a.xml").write_text(SUITE_A)
        (tmp_path / "TEST-b.xml").write_text(SUITE_B)
        (tmp_path / "other.xml").write_text("<not-a-report/>")
        record = JUnitParser(env=empty_env).parse(tmp_path)
        tests = record.tests
        assert tests.total == 15
        assert tests.failed == 1
        assert tests.skipped == 1
        assert tests.passed == 13
        assert tests.duration_ms == 3500
        assert tests.flaky_tests == ["com.acme.BillingTest.refunds"]
        assert record.coverage.lines == 0
        assert record.metadata.adapters == ["junit"]

    def test_testsuites_root_and_errors_count_as_failed(self, tmp_path, empty_env):
        (tmp_path / "TEST-all.xml").write_text(SUITES)
        tests = JUnitParser(env=empty_env).parse(tmp_path).tests
        assert tests.total == 6
        assert tests.failed == 2
        assert tests.passed == 4
        assert tests.duration_ms == 500
        assert tests.flaky_tests == ["Api.get"]

    def test_no_flaky_is_none(self, tmp_path, empty_env):
        (tmp_path / "TEST-b.xml").write_text(SUITE_B)
        assert JUnitParser(env=empty_env).parse(tmp_path).tests.flaky_tests is None

    def test_no_reports(self, tmp_path, empty_env):
        (tmp_path / "results.xml").write_text(SUITE_B)
        with pytest.raises(NoReportsFoundError) as exc:
            JUnitParser(env=empty_env).parse(tmp_path)
        assert exc.value.pattern == "TEST-*.xml"

    def test_missing_directory(self, tmp_path, empty_env):
        with pytest.raises(ReportNotFoundError):
            JUnitParser(env=empty_env).parse(tmp_path / "missing")

    def test_malformed_file_named(self, tmp_path, empty_env):
        (tmp_path / "TEST-a.xml").write_text(SUITE_A)
        (tmp_path / "TEST-broken.xml").write_text("<testsuite tests=")
        with pytest.raises(MalformedReportError) as exc:
            JUnitParser(env=empty_env).parse(tmp_path)
        assert exc.value.path.name == "TEST-broken.xml"

    def test_bad_attribute(self, tmp_path, empty_env):
        (tmp_path / "TEST-a.xml").write_text('<testsuite name="x" tests="ten"/>')
        with pytest.raises(MalformedReportError):
            JUnitParser(env=empty_env).parse(tmp_path)

    def test_external_entity_rejected(self, tmp_path, empty_env):
        (tmp_path / "TEST-xxe.xml").write_text(
            '<?xml version="1.0"?>'
            '<!DOCTYPE testsuite [<!ENTITY secret SYSTEM "file:///etc/passwd">]>'
            '<testsuite name="&secret;" tests="1"/>'
        )
        with pytest.raises(MalformedReportError) as exc:
            JUnitParser(env=empty_env).parse(tmp_path)
        assert exc.value.path.name == "TEST-xxe.xml"
