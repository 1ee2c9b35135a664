"""Markdown traceability summary.

Renders a GitHub flavored table with one row per backlog item, suitable as
the README of a traceability repository or a pull request comment.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

import structlog

from ctm.config import CtmConfig
from ctm.reporting.links import issue_url, results_url
from ctm.reporting.templating import create_environment
from ctm.testreport.models import TestResult
from ctm.traces.models import Trace, TraceTest

logger = structlog.get_logger(__name__)

PASSED = ":heavy_check_mark:"
FAILED = ":x:"
MISSING = ":heavy_exclamation_mark:"

MARKDOWN_TEMPLATE = """\
# Traceability Summary Report
{% if version %}
## Delivery Version: {{ version }}
{% endif %}

Backlog Item | Test result{% if verbose %} | Test classes{% endif %}

------------ | -----------{% if verbose %} | -----------{% endif %}

{% for row in rows %}
[{{ row.name }}]({{ row.link }}) | {{ row.result }}{% if verbose %} | {{ row.tests }}{% endif %}

{% endfor %}

{% if not rows %}
### No issues traced to automated tests yet.

{% endif %}
##### _Report generated {{ timestamp }}_
"""


def _emoji(test: TraceTest) -> str:
    if test.passed:
        return PASSED
    if test.result in (TestResult.FAILURE, TestResult.ERROR):
        return FAILED
    return ""


def _row_result(trace: Trace, config: CtmConfig) -> str:
    if trace.is_missing:
        return MISSING
    failed = any(test.result in (TestResult.FAILURE, TestResult.ERROR) for test in trace.trace_tests)
    passed = any(test.passed for test in trace.trace_tests)
    if not failed and not passed:
        return ""
    emoji = FAILED if failed else PASSED
    if config.traceability_repo.git.repository:
        return f"[{emoji}]({results_url(trace.backlog_item, config)})"
    return emoji


def _row_tests(trace: Trace) -> str:
    if trace.is_missing:
        return "Missing"
    parts: list[str] = []
    for test in trace.trace_tests:
        name = f"{test.class_name} - {test.method_name}" if test.method_name else test.class_name
        if test.source_file:
            name = f"[{name}]({test.source_file})"
        parts.append(f" * {name} => {_emoji(test)}<br>")
    return "".join(parts)


def render_markdown_report(
    traces: Sequence[Trace],
    config: CtmConfig,
    *,
    verbose: bool = True,
    snapshot: datetime | None = None,
) -> str:
    """Render traces as a Markdown summary.

    Args:
        traces: Traces to list.
        config: Run configuration, used for links and the delivery version.
        verbose: Add a column listing each test and its outcome.
        snapshot: Generation timestamp; defaults to now (UTC).
    """
    snapshot = snapshot or datetime.now(timezone.utc)
    rows = [
        {
            "name": trace.backlog_item.display_name,
            "link": issue_url(trace.backlog_item, config),
            "result": _row_result(trace, config),
            "tests": _row_tests(trace),
        }
        for trace in traces
    ]
    template = create_environment(autoescape=False).from_string(MARKDOWN_TEMPLATE)
    return template.render(
        rows=rows,
        verbose=verbose,
        version=config.delivery.version,
        timestamp=snapshot.strftime("%a, %d %b %Y %H:%M:%S UTC"),
    )


def write_markdown_report(
    path: Path | str,
    traces: Sequence[Trace],
    config: CtmConfig,
    *,
    verbose: bool = True,
) -> Path:
    """Write the Markdown summary and return its path."""
    path = Path(path)
    path.write_text(render_markdown_report(traces, config, verbose=verbose), encoding="utf-8")
    logger.info("markdown_report_written", path=str(path), traces=len(traces))
    return path


__all__ = [
    "FAILED",
    "MARKDOWN_TEMPLATE",
    "MISSING",
    "PASSED",
    "render_markdown_report",
    "write_markdown_report",
]
