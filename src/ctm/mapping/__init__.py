"""Test-to-backlog mappings: markers, language scanners and mapping files."""

from __future__ import annotations

from ctm.mapping.markers import TRACE_MARKER, parse_backlog_references
from ctm.mapping.models import (
    BacklogReference,
    ExactMatcher,
    GaugeParameterizedMatcher,
    TestBacklogEntry,
    TestIdentity,
    TrackerSource,
)
from ctm.mapping.scanner import collect_test_backlog, scan_source

__all__ = [
    "TRACE_MARKER",
    "BacklogReference",
    "ExactMatcher",
    "GaugeParameterizedMatcher",
    "TestBacklogEntry",
    "TestIdentity",
    "TrackerSource",
    "collect_test_backlog",
    "parse_backlog_references",
    "scan_source",
]
