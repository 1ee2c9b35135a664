"""Reconcile test backlog entries with executed test cases."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import structlog

from ctm.mapping.models import BacklogReference, TestBacklogEntry
from ctm.testreport.models import TestSuite
from ctm.traces.models import Trace, TraceTest

logger = structlog.get_logger(__name__)


def deduplicate_suites(suites: Iterable[TestSuite]) -> list[TestSuite]:
    """Drop empty suites and suites already read from another report.

    Two suites are duplicates when they share the name, the number of test
    cases and the report file of their first test case.
    """
    kept: list[TestSuite] = []
    for suite in suites:
        if not suite.test_cases:
            logger.info("empty_test_suite_skipped", suite=suite.name)
            continue
        duplicate = any(
            existing.name == suite.name
            and len(existing.test_cases) == len(suite.test_cases)
            and existing.test_cases[0].report_file == suite.test_cases[0].report_file
            for existing in kept
        )
        if duplicate:
            logger.debug("duplicate_test_suite_skipped", suite=suite.name)
            continue
        kept.append(suite)
    return kept


def build_traces(
    test_suites: Sequence[TestSuite],
    entries: Sequence[TestBacklogEntry],
) -> list[Trace]:
    """Fold matching executed tests into one trace per backlog item.

    Every entry is compared with every executed test case. Each match adds
    a trace test to the trace of each backlog item the entry references.

    Args:
        test_suites: Executed test suites.
        entries: Test backlog entries from scanning or a mapping file.

    Returns:
        Traces sorted by (tracker, identifier).

    Example:
        >>> traces = build_traces(suites, entries)
        >>> [trace.backlog_item.id for trace in traces]
        ['acme/app#4', 'ACME-1']
    """
    collected: dict[BacklogReference, list[TraceTest]] = {}

    for entry in entries:
        for suite in test_suites:
            for case in suite.test_cases:
                if not entry.matches(case):
                    continue
                trace_test = TraceTest(
                    source_file=entry.test.file_url,
                    report_file=case.report_file,
                    class_name=case.class_name,
                    method_name=case.method_name,
                    result=case.result,
                )
                for reference in entry.backlog_references:
                    collected.setdefault(reference, []).append(trace_test)

    traces = [
        Trace(backlog_item=reference, trace_tests=tuple(tests))
        for reference, tests in collected.items()
    ]
    traces.sort(key=lambda trace: trace.backlog_item.sort_key)
    return traces


def count_successful_traces(traces: Iterable[Trace]) -> int:
    """Number of traces with tests that all passed."""
    return sum(1 for trace in traces if trace.successful)


__all__ = ["build_traces", "count_successful_traces", "deduplicate_suites"]
