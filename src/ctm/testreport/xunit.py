"""xUnit XML test report reader.

Accepts the two common document shapes: a single ``<testsuite>`` root, or a
``<testsuites>`` wrapper holding several suites. JUnit/Surefire, pytest,
Karma and Gauge all write one of these.

Example:
    >>> suites = read_xunit_reports(Path("target/surefire-reports"))
    >>> suites[0].test_cases[0].result
    <TestResult.SUCCESS: 0>
"""

from __future__ import annotations

import os
import xml.etree.ElementTree as ET
from pathlib import Path

import structlog

from ctm.errors import ReportReadError
from ctm.testreport.models import ExecutedTestCase, TestResult, TestSuite

logger = structlog.get_logger(__name__)

REPORT_EXTENSION = ".xml"


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _children(element: ET.Element, name: str) -> list[ET.Element]:
    return [child for child in element if _local_name(child.tag) == name]


def _has_child(element: ET.Element, name: str) -> bool:
    return any(_local_name(child.tag) == name for child in element)


def suite_skip_count(element: ET.Element) -> int:
    """Skip count of a suite from its ``skipped`` or (pytest) ``skips`` attribute."""
    for attribute in ("skipped", "skips"):
        value = element.get(attribute)
        if value:
            try:
                return max(int(value), 0)
            except ValueError:
                return 0
    return 0


def case_result(element: ET.Element) -> TestResult:
    """Outcome of a ``<testcase>`` element from its child elements."""
    if _has_child(element, "failure"):
        return TestResult.FAILURE
    if _has_child(element, "error"):
        return TestResult.ERROR
    if _has_child(element, "skipped"):
        return TestResult.SKIPPED
    return TestResult.SUCCESS


def _to_test_suite(report_file: str, element: ET.Element) -> TestSuite:
    cases = tuple(
        ExecutedTestCase(
            report_file=report_file,
            class_name=case.get("classname", ""),
            method_name=case.get("name", ""),
            result=case_result(case),
        )
        for case in _children(element, "testcase")
    )
    return TestSuite(
        name=element.get("name", ""),
        test_cases=cases,
        skipped=suite_skip_count(element),
    )


def parse_xunit_document(report_file: str, content: str | bytes) -> list[TestSuite]:
    """Parse one xUnit document into test suites.

    Malformed documents and documents with neither shape yield no suites.
    Suites inside a ``<testsuites>`` wrapper are returned even when empty;
    callers drop them.

    Args:
        report_file: Report path recorded on every test case.
        content: XML document.

    Returns:
        Test suites in document order.
    """
    try:
        root = ET.fromstring(content.lstrip())
    except ET.ParseError as e:
        logger.warning("xunit_report_malformed", report_file=report_file, error=str(e))
        return []

    if _has_child(root, "testcase"):
        return [_to_test_suite(report_file, root)]

    suites = _children(root, "testsuite")
    if suites:
        return [_to_test_suite(report_file, suite) for suite in suites]

    logger.info("no_test_cases_found", report_file=report_file)
    return []


def read_xunit_reports(root: Path | str) -> list[TestSuite]:
    """Read every ``.xml`` report below a directory.

    Raises:
        ReportReadError: If a report file cannot be read.
    """
    suites: list[TestSuite] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1] != REPORT_EXTENSION:
                continue
            path = os.path.join(dirpath, filename)
            logger.info("parsing_test_report", path=path)
            try:
                content = Path(path).read_bytes()
            except OSError as e:
                raise ReportReadError(path, internal_details=str(e)) from e
            suites.extend(parse_xunit_document(path, content))
    return suites


__all__ = [
    "REPORT_EXTENSION",
    "case_result",
    "parse_xunit_document",
    "read_xunit_reports",
    "suite_skip_count",
]
