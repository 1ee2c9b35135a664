"""JavaScript and TypeScript source scanner.

Recognises ``// Trace(...)`` markers in Mocha/Jasmine/Jest style files.
Nested ``describe`` blocks are joined into one suite name by indentation:
a deeper ``describe`` extends the current name, a shallower or equal one
replaces it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

import structlog

from ctm.config import SourceCode
from ctm.mapping.markers import has_trace_marker, parse_backlog_references
from ctm.mapping.models import BacklogReference, TestBacklogEntry, TestIdentity
from ctm.mapping.sources import (
    is_blank_before,
    iter_source_files,
    read_source_lines,
    source_file_url,
)

logger = structlog.get_logger(__name__)

JAVASCRIPT_EXTENSIONS = (".js", ".ts")

_DESCRIBE_CALL = re.compile(r"""describe\((['"])(.*?)\1\s*,""")
_IT_CALL = re.compile(r"""\bit\((['"])(.*?)\1\s*,""")


@dataclass
class _JavaScriptFileState:
    suite_name: str = ""
    suite_indentation: int = 0
    references: list[BacklogReference] = field(default_factory=list)
    test_names: list[str] = field(default_factory=list)


def describe_name(line: str) -> str | None:
    """Title of the last ``describe(...)`` call on the line, if any."""
    matches = list(_DESCRIBE_CALL.finditer(line))
    if not matches:
        return None
    return matches[-1].group(2)


def it_name(line: str) -> str | None:
    """Title of the ``it(...)`` call on the line, if any."""
    match = _IT_CALL.search(line)
    if match is None or not is_blank_before(line, match.start()):
        return None
    return match.group(2).strip()


def indentation(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def scan_javascript_lines(lines: Iterable[str], file_url: str = "") -> list[TestBacklogEntry]:
    """Extract test backlog entries from the lines of one JavaScript file.

    A marker applies to everything that follows it in the file. A suite seen
    after a marker and before any test is recorded as a whole-suite entry;
    each following ``it`` test is recorded on its own.

    Args:
        lines: File content, one line per item.
        file_url: Link stored on every produced test identity.

    Returns:
        Entries in the order they were found.
    """
    state = _JavaScriptFileState()
    entries: list[TestBacklogEntry] = []

    for line in lines:
        if has_trace_marker(line):
            state.references = parse_backlog_references(line)
            continue

        if "describe(" in line:
            name = describe_name(line)
            if name is not None:
                current = indentation(line)
                if current > state.suite_indentation and state.suite_name:
                    state.suite_name = f"{state.suite_name} {name}"
                else:
                    state.suite_name = name
                state.suite_indentation = current

                if state.references and not state.test_names:
                    entries.append(
                        TestBacklogEntry(
                            test=TestIdentity(file_url=file_url, class_name=state.suite_name),
                            backlog_references=tuple(state.references),
                        )
                    )
            continue

        if not state.suite_name or not state.references:
            continue

        test_name = it_name(line)
        if test_name is None:
            continue
        entries.append(
            TestBacklogEntry(
                test=TestIdentity(
                    file_url=file_url,
                    class_name=state.suite_name,
                    method_name=test_name,
                ),
                backlog_references=tuple(state.references),
            )
        )
        state.test_names.append(test_name)

    return entries


def scan_javascript(source: SourceCode, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Scan every JavaScript and TypeScript file under the source tree."""
    entries: list[TestBacklogEntry] = []
    for path in iter_source_files(Path(source.local), JAVASCRIPT_EXTENSIONS):
        file_url = source_file_url(path, source, github_base_url)
        found = scan_javascript_lines(read_source_lines(path), file_url)
        if found:
            logger.debug("javascript_file_scanned", path=str(path), entries=len(found))
        entries.extend(found)
    return entries


__all__ = [
    "JAVASCRIPT_EXTENSIONS",
    "describe_name",
    "it_name",
    "scan_javascript",
    "scan_javascript_lines",
]
