"""JSON traceability report.

The report is an object keyed by backlog identifier::

    {
        "ACME-1": {
            "link": "https://jira.acme.corp/browse/ACME-1",
            "test_cases": [
                {
                    "test_fullname": "com.acme.AppTest.testLogin",
                    "test_name": "testLogin",
                    "test_class": "com.acme.AppTest",
                    "test_source": "https://github.com/acme/app/blob/main/AppTest.java",
                    "passed": true,
                    "skipped": false
                }
            ]
        }
    }

``test_source`` is omitted when the source link is unknown.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import structlog

from ctm.config import CtmConfig
from ctm.reporting.links import issue_url
from ctm.traces.models import Trace, TraceTest

logger = structlog.get_logger(__name__)


def _test_case(test: TraceTest) -> dict[str, Any]:
    record: dict[str, Any] = {
        "test_fullname": test.full_name,
        "test_name": test.method_name,
        "test_class": test.class_name,
    }
    if test.source_file:
        record["test_source"] = test.source_file
    record["passed"] = test.passed
    record["skipped"] = test.skipped
    return record


def build_json_report(traces: Iterable[Trace], config: CtmConfig) -> dict[str, Any]:
    """Report content as a dictionary keyed by backlog identifier."""
    return {
        trace.backlog_item.id: {
            "link": issue_url(trace.backlog_item, config),
            "test_cases": [_test_case(test) for test in trace.trace_tests],
        }
        for trace in traces
    }


def render_json_report(traces: Iterable[Trace], config: CtmConfig) -> str:
    return json.dumps(build_json_report(traces, config), indent=4) + "\n"


def write_json_report(path: Path | str, traces: Iterable[Trace], config: CtmConfig) -> Path:
    """Write the JSON report and return its path."""
    path = Path(path)
    path.write_text(render_json_report(traces, config), encoding="utf-8")
    logger.info("json_report_written", path=str(path))
    return path


__all__ = ["build_json_report", "render_json_report", "write_json_report"]
