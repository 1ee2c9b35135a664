"""Unit tests for ctm.testreport.xunit."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from ctm.errors import ReportReadError
from ctm.testreport.models import TestResult as _TestResult
from ctm.testreport.xunit import (
    case_result,
    parse_xunit_document,
    read_xunit_reports,
    suite_skip_count,
)

SINGLE_SUITE = """<?xml version="1.0" encoding="UTF-8"?>
<testsuite name="com.acme.AppTest" tests="4" skipped="1" failures="1" errors="1">
  <testcase name="testApp" classname="com.acme.AppTest" time="0.01"/>
  <testcase name="testFails" classname="com.acme.AppTest">
    <failure message="expected:&lt;1&gt; but was:&lt;2&gt;"/>
  </testcase>
  <testcase name="testBreaks" classname="com.acme.AppTest">
    <error type="java.lang.NullPointerException"/>
  </testcase>
  <testcase name="testLater" classname="com.acme.AppTest">
    <skipped/>
  </testcase>
</testsuite>
"""

WRAPPED_SUITES = """
<testsuites>
  <testsuite name="pytest" skips="2">
    <testcase classname="tests.test_cart.TestCart" name="test_add"/>
  </testsuite>
  <testsuite name="empty" tests="0"/>
</testsuites>
"""


class TestCaseResult:
    """Tests for mapping <testcase> children to results."""

    @pytest.mark.parametrize(
        ("xml", "expected"),
        [
            ("<testcase/>", _TestResult.SUCCESS),
            ("<testcase><failure/></testcase>", _TestResult.FAILURE),
            ("<testcase><error/></testcase>", _TestResult.ERROR),
            ("<testcase><skipped/></testcase>", _TestResult.SKIPPED),
            ("<testcase><skipped/><failure/></testcase>", _TestResult.FAILURE),
            ("<testcase><system-out>x</system-out></testcase>", _TestResult.SUCCESS),
        ],
    )
    def test_result(self, xml: str, expected: _TestResult) -> None:
        assert case_result(ET.fromstring(xml)) is expected


def test_suite_skip_count() -> None:
    assert suite_skip_count(ET.fromstring('<testsuite skipped="3"/>')) == 3
    assert suite_skip_count(ET.fromstring('<testsuite skips="2"/>')) == 2
    assert suite_skip_count(ET.fromstring('<testsuite skipped="n/a"/>')) == 0
    assert suite_skip_count(ET.fromstring("<testsuite/>")) == 0


class TestParseXunitDocument:
    """Tests for parse_xunit_document."""

    def test_single_suite(self) -> None:
        suites = parse_xunit_document("TEST-app.xml", SINGLE_SUITE.encode())

        assert len(suites) == 1
        suite = suites[0]
        assert suite.name == "com.acme.AppTest"
        assert suite.skipped == 1
        assert [(c.method_name, c.result) for c in suite.test_cases] == [
            ("testApp", _TestResult.SUCCESS),
            ("testFails", _TestResult.FAILURE),
            ("testBreaks", _TestResult.ERROR),
            ("testLater", _TestResult.SKIPPED),
        ]
        assert {c.report_file for c in suite.test_cases} == {"TEST-app.xml"}

    def test_wrapped_suites_include_empty(self) -> None:
        suites = parse_xunit_document("pytest.xml", WRAPPED_SUITES)

        assert [s.name for s in suites] == ["pytest", "empty"]
        assert suites[0].skipped == 2
        assert suites[0].test_cases[0].class_name == "tests.test_cart.TestCart"
        assert suites[1].test_cases == ()

    def test_malformed_document(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert parse_xunit_document("bad.xml", "<testsuite><testcase") == []
        assert "xunit_report_malformed" in capsys.readouterr().out

    def test_unrelated_document(self) -> None:
        assert parse_xunit_document("pom.xml", "<project><modelVersion/></project>") == []


class TestReadXunitReports:
    """Tests for reading a report directory."""

    def test_reads_xml_files_recursively(self, tmp_path: Path) -> None:
        (tmp_path / "nested").mkdir()
        (tmp_path / "TEST-app.xml").write_text(SINGLE_SUITE)
        (tmp_path / "nested" / "pytest.xml").write_text(WRAPPED_SUITES)
        (tmp_path / "report.txt").write_text("not a report")

        suites = read_xunit_reports(tmp_path)

        assert [s.name for s in suites] == ["com.acme.AppTest", "pytest", "empty"]

    def test_unreadable_report(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "TEST-app.xml").write_text(SINGLE_SUITE)

        def _fail(self: Path) -> bytes:
            raise PermissionError("denied")

        monkeypatch.setattr(Path, "read_bytes", _fail)

        with pytest.raises(ReportReadError, match="Cannot read test report"):
            read_xunit_reports(tmp_path)
