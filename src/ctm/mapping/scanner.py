"""Dispatch from source language to scanner.

Example:
    >>> entries = collect_test_backlog(config)
"""

from __future__ import annotations

from collections.abc import Callable

import structlog

from ctm.config import CtmConfig, SourceCode, SourceLanguage
from ctm.mapping.gaugespec import scan_gauge_specs
from ctm.mapping.java import scan_java
from ctm.mapping.javascript import scan_javascript
from ctm.mapping.mapping_file import read_mapping_file
from ctm.mapping.models import TestBacklogEntry
from ctm.mapping.python import scan_python
from ctm.observability import timed

logger = structlog.get_logger(__name__)

Scanner = Callable[[SourceCode, str], list[TestBacklogEntry]]

SCANNERS: dict[SourceLanguage, Scanner] = {
    SourceLanguage.JAVA: scan_java,
    SourceLanguage.PYTHON: scan_python,
    SourceLanguage.JAVASCRIPT: scan_javascript,
    SourceLanguage.GAUGESPEC: scan_gauge_specs,
}


def scan_source(source: SourceCode, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Scan one source tree with the scanner for its language."""
    scanner = SCANNERS[source.language]
    name = (
        f"{source.git.organization}/{source.git.repository}"
        if source.git.organization
        else source.local
    )
    with timed("scan_sources", language=source.language.value, source=name):
        return scanner(source, github_base_url)


def collect_test_backlog(config: CtmConfig) -> list[TestBacklogEntry]:
    """Gather the test backlog entries of a run.

    A configured mapping file replaces source scanning entirely.
    """
    if config.mapping.local:
        with timed("read_mapping_file", path=config.mapping.local):
            return read_mapping_file(config.mapping.local, config.github.base_url)

    entries: list[TestBacklogEntry] = []
    for source in config.sourcecode:
        entries.extend(scan_source(source, config.github.base_url))
    logger.info("test_backlog_collected", entries=len(entries))
    return entries


__all__ = ["SCANNERS", "Scanner", "collect_test_backlog", "scan_source"]
