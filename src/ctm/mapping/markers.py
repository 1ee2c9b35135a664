"""Backlog reference markers found in test source code.

A marker is a comment like ``Trace(Jira:PROJ-1, GitHub:org/repo#7)``. The
same parser handles whole marker lines, Gauge requirement tags and the
backlog item lists given on the command line.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import structlog

from ctm.mapping.models import BacklogReference, TrackerSource

logger = structlog.get_logger(__name__)

TRACE_MARKER = re.compile(r"Trace\(((GitHub|Jira):([a-zA-Z0-9\-\/#\_])+\s*,*\s*)+\)")

_WHITESPACE = re.compile(r"\s+")


def has_trace_marker(line: str) -> bool:
    """Return True if the line carries a ``Trace(...)`` marker."""
    return TRACE_MARKER.search(line) is not None


def parse_tracker_source(name: str) -> TrackerSource:
    """Resolve a tracker name, case-insensitively and by substring.

    Example:
        >>> parse_tracker_source("// Trace(jira")
        <TrackerSource.JIRA: 1>
    """
    lowered = name.lower()
    if "github" in lowered:
        return TrackerSource.GITHUB
    if "jira" in lowered:
        return TrackerSource.JIRA
    return TrackerSource.UNKNOWN


def parse_backlog_references(marker: str) -> list[BacklogReference]:
    """Parse comma separated ``<Tracker>:<Identifier>`` segments.

    The input may be the full source line holding the marker. Whitespace is
    removed from identifiers and anything after the last ``)`` is dropped.
    Segments without ``:`` are skipped; unknown trackers are kept with an
    UNKNOWN source.

    Args:
        marker: Raw marker text.

    Returns:
        References in input order.

    Example:
        >>> [r.id for r in parse_backlog_references("// Trace(Jira:A-1, GitHub:o/r#2)")]
        ['A-1', 'o/r#2']
    """
    references: list[BacklogReference] = []
    for segment in marker.split(","):
        tracker, sep, identifier = segment.partition(":")
        if not sep:
            logger.warning("marker_segment_without_tracker", segment=segment.strip())
            continue

        identifier = _WHITESPACE.sub("", identifier)
        if ")" in identifier:
            identifier = identifier[: identifier.rindex(")")]

        source = parse_tracker_source(tracker)
        if source is TrackerSource.UNKNOWN:
            logger.warning("unknown_backlog_tracker", tracker=tracker.strip(), id=identifier)

        references.append(BacklogReference(source=source, id=identifier))
    return references


def format_backlog_references(references: Iterable[BacklogReference]) -> str:
    """Render references in the comma separated marker form."""
    return ", ".join(ref.display_name for ref in references)


__all__ = [
    "TRACE_MARKER",
    "format_backlog_references",
    "has_trace_marker",
    "parse_backlog_references",
    "parse_tracker_source",
]
