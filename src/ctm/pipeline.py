"""End-to-end traceability run.

A run collects the test backlog (from a mapping file or by scanning source
trees), reads the executed test reports, builds one trace per backlog item,
restricts the traces to a delivery when one is configured, publishes result
links to the trackers and writes the reports.

Example:
    >>> config = CtmConfig.from_file("ctm.yaml")
    >>> result = run(config)
    >>> result.successful_traces, len(result.traces)
    (12, 14)
"""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from ctm.config import SUPPORTED_REPORT_TYPES, CtmConfig
from ctm.integrations import CommentCache, LinkPublisher
from ctm.mapping import collect_test_backlog, parse_backlog_references
from ctm.observability import timed
from ctm.reporting import write_html_report, write_json_report, write_markdown_report
from ctm.testreport import TestSuite, read_xunit_reports
from ctm.traces import (
    Trace,
    build_traces,
    count_successful_traces,
    deduplicate_suites,
    filter_delivery_traces,
    merge_delivery_placeholders,
)
from ctm.traces.export import write_requirements_mapping

logger = structlog.get_logger(__name__)

REPORT_PREFIX = "ctm_report_"
FULL_REPORT_NAME = "all"
DELIVERY_REPORT_NAME = "delivery"
MAPPING_SUFFIX = "-traceability-mapping.json"


class RunResult(BaseModel):
    """Outcome of a traceability run.

    Attributes:
        traces: All traces, including delivery placeholders.
        delivery_traces: Traces of the configured delivery (empty without one).
        successful_traces: Number of traces whose tests all passed.
        reports: Paths of every file written.
    """

    model_config = ConfigDict(frozen=True)

    traces: tuple[Trace, ...] = Field(default=())
    delivery_traces: tuple[Trace, ...] = Field(default=())
    successful_traces: int = 0
    reports: tuple[Path, ...] = Field(default=())

    @property
    def failed_traces(self) -> int:
        return len(self.traces) - self.successful_traces


def read_test_reports(config: CtmConfig) -> list[TestSuite]:
    """Read every configured report directory of a supported type."""
    suites: list[TestSuite] = []
    for report in config.test_report:
        if not report.is_supported:
            logger.error(
                "unsupported_report_type",
                type=report.type,
                local=report.local,
                supported=list(SUPPORTED_REPORT_TYPES),
            )
            continue
        with timed("read_test_reports", directory=report.local):
            suites.extend(read_xunit_reports(report.local))
    return suites


def write_reports(
    output_dir: Path,
    name: str,
    traces: list[Trace],
    config: CtmConfig,
    *,
    full_report: bool,
    export_mapping: bool,
) -> list[Path]:
    """Write the HTML, JSON and Markdown reports named ``ctm_report_<name>``."""
    base = f"{REPORT_PREFIX}{name}"
    written = [
        write_html_report(output_dir / f"{base}.html", traces, config, full_report=full_report),
        write_json_report(output_dir / f"{base}.json", traces, config),
        write_markdown_report(output_dir / f"{base}.md", traces, config),
    ]
    if export_mapping:
        written.append(write_requirements_mapping(output_dir / f"{base}{MAPPING_SUFFIX}", traces))
    return written


def run(config: CtmConfig, *, export_mapping: bool = False) -> RunResult:
    """Run a traceability analysis and write its reports.

    Args:
        config: Validated run configuration.
        export_mapping: Also write the traces as requirements mapping files.

    Returns:
        The traces and the paths of the written reports.

    Raises:
        ConfigurationError: If a configured path is missing.
        CtmError: If a source, report or mapping file cannot be read.
    """
    with timed("traceability_run"):
        config.validate_paths()
        output_dir = Path(config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        Path(config.work_dir).mkdir(parents=True, exist_ok=True)

        entries = collect_test_backlog(config)
        suites = deduplicate_suites(read_test_reports(config))

        with timed("build_traces", entries=len(entries), suites=len(suites)):
            traces = build_traces(suites, entries)
        if not traces:
            logger.warning("no_traces_found", entries=len(entries), suites=len(suites))

        delivery_traces: list[Trace] = []
        if config.delivery.backlog_items:
            requested = parse_backlog_references(config.delivery.backlog_items)
            delivery_traces = filter_delivery_traces(traces, requested)
            traces = merge_delivery_placeholders(traces, delivery_traces)

        publisher = LinkPublisher(config, CommentCache.in_work_dir(config.work_dir))
        with timed("publish_links"):
            publisher.publish(traces)

        reports = write_reports(
            output_dir,
            FULL_REPORT_NAME,
            traces,
            config,
            full_report=True,
            export_mapping=export_mapping,
        )
        if config.delivery.backlog_items:
            reports.extend(
                write_reports(
                    output_dir,
                    config.delivery.version or DELIVERY_REPORT_NAME,
                    delivery_traces,
                    config,
                    full_report=False,
                    export_mapping=export_mapping,
                )
            )

        successful = count_successful_traces(traces)
        logger.info(
            "traceability_summary",
            traces=len(traces),
            successful=successful,
            not_successful=len(traces) - successful,
        )

    return RunResult(
        traces=tuple(traces),
        delivery_traces=tuple(delivery_traces),
        successful_traces=successful,
        reports=tuple(reports),
    )


__all__ = [
    "DELIVERY_REPORT_NAME",
    "FULL_REPORT_NAME",
    "MAPPING_SUFFIX",
    "REPORT_PREFIX",
    "RunResult",
    "read_test_reports",
    "run",
    "write_reports",
]
