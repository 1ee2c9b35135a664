"""ctm - Continuous Traceability Monitor.

Links automated tests to the backlog items (Jira tickets, GitHub issues)
they verify, reconciles those links with xUnit test reports and writes
traceability reports.

Example:
    >>> from ctm.config import CtmConfig
    >>> from ctm.pipeline import run
    >>> result = run(CtmConfig.from_file("ctm.yaml"))
    >>> result.successful_traces
    12
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
