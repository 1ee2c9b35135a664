"""Restrict traces to the backlog items of one delivery."""

from __future__ import annotations

from collections.abc import Sequence

from ctm.mapping.models import BacklogReference
from ctm.traces.models import Trace


def filter_delivery_traces(
    traces: Sequence[Trace],
    requested: Sequence[BacklogReference],
) -> list[Trace]:
    """Select the traces of a delivery, adding placeholders for the rest.

    Traces of requested items come first in their existing order. Each
    requested item without a trace then gets an empty placeholder trace, so
    the delivery report shows it as missing.

    Args:
        traces: All traces of the run.
        requested: Backlog items of the delivery.

    Returns:
        Delivery traces.
    """
    wanted = set(requested)
    selected: list[Trace] = []
    seen: set[BacklogReference] = set()

    for trace in traces:
        if trace.backlog_item in wanted and trace.backlog_item not in seen:
            selected.append(trace)
            seen.add(trace.backlog_item)

    for reference in requested:
        if reference not in seen:
            selected.append(Trace(backlog_item=reference))
            seen.add(reference)

    return selected


def merge_delivery_placeholders(
    traces: Sequence[Trace],
    delivery_traces: Sequence[Trace],
) -> list[Trace]:
    """Add delivery traces whose backlog item is absent from all traces.

    Keeps the full report consistent with the delivery report: an item that
    a delivery expects but no test covers shows up as missing in both.
    """
    known = {trace.backlog_item for trace in traces}
    merged = list(traces)
    for trace in delivery_traces:
        if trace.backlog_item not in known:
            merged.append(trace)
            known.add(trace.backlog_item)
    return merged


__all__ = ["filter_delivery_traces", "merge_delivery_placeholders"]
