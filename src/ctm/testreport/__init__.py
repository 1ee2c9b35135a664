"""Executed test results read from test reports."""

from __future__ import annotations

from ctm.testreport.models import ExecutedTestCase, TestResult, TestSuite
from ctm.testreport.xunit import parse_xunit_document, read_xunit_reports

__all__ = [
    "ExecutedTestCase",
    "TestResult",
    "TestSuite",
    "parse_xunit_document",
    "read_xunit_reports",
]
