"""Tests for the JaCoCo XML coverage parser."""

import pytest

from qualityhub.exceptions import MalformedReportError, ReportNotFoundError
from qualityhub.parsers import JacocoParser
from qualityhub.parsers.jacoco import coverage_pct

REPORT = """<?xml version="1.0" encoding="UTF-8"?>
<report name="billing">
  <package name="com/acme">
    <counter type="LINE" missed="500" covered="1"/>
  </package>
  <counter type="INSTRUCTION" missed="250" covered="750"/>
  <counter type="BRANCH" missed="30" covered="70"/>
  <counter type="LINE" missed="20" covered="80"/>
  <counter type="COMPLEXITY" missed="5" covered="5"/>
  <counter type="METHOD" missed="0" covered="0"/>
</report>
"""


class TestCoveragePct:
    def test_ratio(self):
        assert coverage_pct(80, 20) == pytest.approx(80.0)

    def test_zero_total_is_zero(self):
        assert coverage_pct(0, 0) == 0


class TestJacocoParser:
    def test_report_level_counters(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text(REPORT)
        record = JacocoParser(env=empty_env).parse(path)
        assert record.coverage.lines == pytest.approx(80.0)
        assert record.coverage.branches == pytest.approx(70.0)
        assert record.coverage.functions == 0
        assert record.coverage.statements == pytest.approx(75.0)
        assert record.tests.total == 0
        assert record.tests.passed == 0
        assert record.metadata.adapters == ["jacoco"]

    def test_missing_counters_are_zero(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text('<report name="empty"/>')
        record = JacocoParser(env=empty_env).parse(path)
        assert record.coverage.lines == 0
        assert record.coverage.branches == 0

    def test_missing_file(self, tmp_path, empty_env):
        with pytest.raises(ReportNotFoundError):
            JacocoParser(env=empty_env).parse(tmp_path / "nope.xml")

    def test_invalid_xml(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text("<report><counter")
        with pytest.raises(MalformedReportError, match="jacoco.xml"):
            JacocoParser(env=empty_env).parse(path)

    def test_wrong_root(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text("<coverage/>")
        with pytest.raises(MalformedReportError):
            JacocoParser(env=empty_env).parse(path)

    def test_non_integer_counter(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text('<report><counter type="LINE" missed="x" covered="1"/></report>')
        with pytest.raises(MalformedReportError):
            JacocoParser(env=empty_env).parse(path)

    def test_doctype_is_accepted(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text(
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            '<!DOCTYPE report PUBLIC "-//JACOCO//DTD Report 1.1//EN" "report.dtd">'
            '<report name="svc"><counter type="LINE" missed="1" covered="3"/></report>'
        )
        assert JacocoParser(env=empty_env).parse(path).coverage.lines == pytest.approx(75.0)

    def test_entity_expansion_rejected(self, tmp_path, empty_env):
        path = tmp_path / "jacoco.xml"
        path.write_text(
            '<?xml version="1.0"?>'
            '<!DOCTYPE report [<!ENTITY lol "lol"><!ENTITY lol2 "&lol;&lol;">]>'
            '<report name="&lol2;"/>'
        )
        with pytest.raises(MalformedReportError, match="jacoco.xml"):
            JacocoParser(env=empty_env).parse(path)
