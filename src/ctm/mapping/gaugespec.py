"""Gauge specification scanner.

Gauge specs are Markdown: ``# Spec`` opens a specification and ``## Scenario``
one of its scenarios. Backlog references are listed on a line starting with
``Requirements:`` (``Trace:`` is accepted as well) and apply to the heading
right above it::

    # Checkout
    Requirements: Jira:SHOP-12

    ## Pay with card
    Requirements: Jira:SHOP-15, GitHub:acme/shop#7
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ctm.config import SourceCode
from ctm.mapping.markers import parse_backlog_references
from ctm.mapping.models import (
    BacklogReference,
    GaugeParameterizedMatcher,
    TestBacklogEntry,
    TestIdentity,
)
from ctm.mapping.sources import iter_source_files, read_source_lines, source_file_url

logger = structlog.get_logger(__name__)

GAUGE_EXTENSIONS = (".spec",)

REQUIREMENTS_PREFIXES = ("Requirements:", "Trace:")

_HEADLINE = re.compile(r"^(?P<level>#+)\s*(?P<title>.+)$")
_TAGS = re.compile(r"(?:^(?:Requirements|Trace):|[,\s])\s*([^,\s]+)")

SPEC_LEVEL = 1
SCENARIO_LEVEL = 2


@dataclass
class _GaugeItem:
    spec: str
    scenario: str = ""
    references: list[BacklogReference] = field(default_factory=list)


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return (level, title) for a Markdown heading line."""
    match = _HEADLINE.match(line.rstrip("\r\n"))
    if match is None:
        return None
    return len(match.group("level")), match.group("title").strip()


def is_requirements_line(line: str) -> bool:
    return line.startswith(REQUIREMENTS_PREFIXES)


def parse_requirement_tags(line: str) -> list[str]:
    """Split a requirements line into comma or space separated ``Tracker:Id`` tags.

    Example:
        >>> parse_requirement_tags("Requirements: Jira:P-1, GitHub:o/r#2")
        ['Jira:P-1', 'GitHub:o/r#2']
    """
    return _TAGS.findall(line.strip())


def scan_gauge_lines(lines: Iterable[str], file_url: str = "") -> list[TestBacklogEntry]:
    """Extract test backlog entries from one Gauge spec file.

    Only specs and scenarios with at least one backlog reference are
    returned. Requirement lines before the first heading are ignored.
    """
    items: list[_GaugeItem] = []
    last_spec = ""

    for line in lines:
        if line.startswith("#"):
            heading = parse_heading(line)
            if heading is None:
                continue
            level, title = heading
            if level == SPEC_LEVEL:
                items.append(_GaugeItem(spec=title))
                last_spec = title
            elif level == SCENARIO_LEVEL:
                items.append(_GaugeItem(spec=last_spec, scenario=title))
        elif is_requirements_line(line.lstrip()):
            if not items:
                logger.debug("requirements_outside_spec_ignored", line=line.strip())
                continue
            references: list[BacklogReference] = []
            for tag in parse_requirement_tags(line):
                references.extend(parse_backlog_references(tag))
            items[-1].references = references

    return [
        TestBacklogEntry(
            test=TestIdentity(file_url=file_url, class_name=item.spec, method_name=item.scenario),
            backlog_references=tuple(item.references),
            matcher=GaugeParameterizedMatcher(),
        )
        for item in items
        if item.references
    ]


def scan_gauge_specs(source: SourceCode, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Scan every ``.spec`` file under the source tree."""
    entries: list[TestBacklogEntry] = []
    for path in iter_source_files(Path(source.local), GAUGE_EXTENSIONS):
        logger.info("parsing_gauge_spec", path=str(path))
        file_url = source_file_url(path, source, github_base_url)
        entries.extend(scan_gauge_lines(read_source_lines(path), file_url))
    return entries


__all__ = [
    "GAUGE_EXTENSIONS",
    "REQUIREMENTS_PREFIXES",
    "is_requirements_line",
    "parse_heading",
    "parse_requirement_tags",
    "scan_gauge_lines",
    "scan_gauge_specs",
]
