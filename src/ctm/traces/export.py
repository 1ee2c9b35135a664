"""Export traces as a requirements mapping file.

The export uses the mapping file format, so a run over annotated sources can
produce the mapping file for a project that cannot carry markers.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from ctm.mapping.mapping_file import MAPPING_FILE_ADAPTER, METHOD_SUFFIX, MappingFileEntry
from ctm.mapping.models import TrackerSource
from ctm.traces.models import Trace

logger = structlog.get_logger(__name__)


def build_requirements_mapping(traces: Iterable[Trace]) -> list[MappingFileEntry]:
    """Group backlog items by the test that verifies them.

    Tests appear in order of first appearance. Items from unknown trackers
    are left out.

    Example:
        >>> [entry.source_reference for entry in build_requirements_mapping(traces)]
        ['Class1.WithMultipleRequirements()', 'Class1.SingleRequirement()']
    """
    jira: dict[str, list[str]] = {}
    github: dict[str, list[str]] = {}

    for trace in traces:
        reference = trace.backlog_item
        for test in trace.trace_tests:
            source_reference = (
                f"{test.class_name}.{test.method_name}{METHOD_SUFFIX}"
                if test.method_name
                else test.class_name
            )
            jira_keys = jira.setdefault(source_reference, [])
            github_keys = github.setdefault(source_reference, [])
            if reference.source is TrackerSource.JIRA and reference.id not in jira_keys:
                jira_keys.append(reference.id)
            elif reference.source is TrackerSource.GITHUB and reference.id not in github_keys:
                github_keys.append(reference.id)

    return [
        MappingFileEntry(
            source_reference=source_reference,
            jira_keys=jira[source_reference],
            github_keys=github[source_reference],
        )
        for source_reference in jira
    ]


def write_requirements_mapping(path: Path | str, traces: Iterable[Trace]) -> Path:
    """Write the requirements mapping of traces to a JSON file."""
    path = Path(path)
    entries = build_requirements_mapping(traces)
    path.write_bytes(
        MAPPING_FILE_ADAPTER.dump_json(entries, indent=2, exclude_none=True, by_alias=True)
    )
    logger.info("requirements_mapping_written", path=str(path), entries=len(entries))
    return path


__all__ = ["build_requirements_mapping", "write_requirements_mapping"]
