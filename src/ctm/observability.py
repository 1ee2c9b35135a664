"""Structured logging and OpenTelemetry spans for ctm.

This module provides:
- Structured logging setup via structlog
- A timing span used around each step of a traceability run
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer

TRACER_NAME = "ctm"

logger = structlog.get_logger(__name__)

_tracer: Tracer | None = None


def get_tracer() -> Tracer:
    """Get the OpenTelemetry tracer for ctm.

    Returns:
        OpenTelemetry Tracer instance.
    """
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for ctm.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format. If False, output human-readable.
        add_timestamp: If True, add ISO timestamp to log entries.

    Example:
        >>> configure_logging(log_level="DEBUG")
    """
    processors: list[Any] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level, force=True)


@contextmanager
def timed(operation: str, **attributes: Any) -> Iterator[Span]:
    """Run a block inside a span and log how long it took.

    Args:
        operation: Span and log event prefix (e.g., "scan_sources").
        **attributes: Span attributes, also added to the log events.

    Yields:
        OpenTelemetry Span instance.

    Example:
        >>> with timed("read_test_reports", directory="reports/"):
        ...     suites = read_xunit_reports(Path("reports/"))
    """
    started = time.monotonic()
    with get_tracer().start_as_current_span(operation, attributes=attributes) as span:
        try:
            yield span
        except Exception as exc:
            span.set_status(Status(StatusCode.ERROR, str(exc)))
            span.record_exception(exc)
            logger.error(
                f"{operation}_failed",
                duration_ms=round((time.monotonic() - started) * 1000, 2),
                error=str(exc),
                **attributes,
            )
            raise
        span.set_status(Status(StatusCode.OK))
        logger.info(
            f"{operation}_completed",
            duration_ms=round((time.monotonic() - started) * 1000, 2),
            **attributes,
        )


__all__ = ["TRACER_NAME", "configure_logging", "get_tracer", "timed"]
