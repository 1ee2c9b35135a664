"""Traces: backlog items reconciled with executed tests."""

from __future__ import annotations

from ctm.traces.builder import build_traces, count_successful_traces, deduplicate_suites
from ctm.traces.delivery import filter_delivery_traces, merge_delivery_placeholders
from ctm.traces.models import Trace, TraceTest

__all__ = [
    "Trace",
    "TraceTest",
    "build_traces",
    "count_successful_traces",
    "deduplicate_suites",
    "filter_delivery_traces",
    "merge_delivery_placeholders",
]
