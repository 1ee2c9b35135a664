"""Data models for executed tests read from test reports.

This module defines:
- TestResult: Outcome of one executed test case
- ExecutedTestCase: One test case run found in a report
- TestSuite: A named group of executed test cases
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class TestResult(IntEnum):
    """Outcome of an executed test case."""

    SUCCESS = 0
    FAILURE = 1
    ERROR = 2
    SKIPPED = 3


class ExecutedTestCase(BaseModel):
    """A single test case run as recorded in a test report.

    Attributes:
        report_file: Path of the report file the case was read from.
        class_name: Fully qualified class (or suite) name of the test.
        method_name: Test method (or scenario) name.
        result: Outcome of the run.
    """

    model_config = ConfigDict(frozen=True)

    report_file: str = Field(default="", description="Report file the case was read from")
    class_name: str = Field(default="", description="Class name of the executed test")
    method_name: str = Field(default="", description="Method name of the executed test")
    result: TestResult = Field(default=TestResult.SUCCESS, description="Test outcome")


class TestSuite(BaseModel):
    """A named collection of executed test cases.

    Attributes:
        name: Suite name from the report.
        test_cases: Executed cases in report order.
        skipped: Suite-level skip count (``skipped`` or ``skips`` attribute).
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Suite name")
    test_cases: tuple[ExecutedTestCase, ...] = Field(
        default=(), description="Executed test cases"
    )
    skipped: int = Field(default=0, ge=0, description="Suite-level skip count")


__all__ = ["ExecutedTestCase", "TestResult", "TestSuite"]
