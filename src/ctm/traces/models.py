"""Data models for reconciled traces.

This module defines:
- TraceTest: One executed test that verifies a backlog item
- Trace: A backlog item with all executed tests tracing to it
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ctm.mapping.models import BacklogReference
from ctm.testreport.models import TestResult


class TraceTest(BaseModel):
    """An executed test linked to a backlog item.

    Attributes:
        source_file: Link to the test's source file (may be empty).
        report_file: Report file the result was read from.
        class_name: Class name as executed.
        method_name: Method name as executed.
        result: Outcome of the run.
    """

    model_config = ConfigDict(frozen=True)

    source_file: str = ""
    report_file: str = ""
    class_name: str = ""
    method_name: str = ""
    result: TestResult = TestResult.SUCCESS

    @property
    def full_name(self) -> str:
        if self.method_name:
            return f"{self.class_name}.{self.method_name}"
        return self.class_name

    @property
    def passed(self) -> bool:
        return self.result is TestResult.SUCCESS

    @property
    def skipped(self) -> bool:
        return self.result is TestResult.SKIPPED


class Trace(BaseModel):
    """A backlog item and the executed tests tracing to it.

    A trace without tests is a placeholder: the item is referenced (in code
    or by a delivery) but no executed test verifies it.
    """

    model_config = ConfigDict(frozen=True)

    backlog_item: BacklogReference
    trace_tests: tuple[TraceTest, ...] = Field(default=())

    @property
    def is_missing(self) -> bool:
        return not self.trace_tests

    @property
    def successful(self) -> bool:
        """True if the item has tests and every one of them passed."""
        return bool(self.trace_tests) and all(test.passed for test in self.trace_tests)


__all__ = ["Trace", "TraceTest"]
