"""Python source scanner.

Recognises ``# Trace(...)`` markers above unittest/pytest classes and their
``test_`` methods. Class names are qualified with the module name derived
from the file path relative to the source root.
"""

from __future__ import annotations

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
    module_name_for,
    read_source_lines,
    source_file_url,
)

logger = structlog.get_logger(__name__)

PYTHON_EXTENSIONS = (".py",)

TEST_METHOD_PREFIX = "test_"


@dataclass
class _PythonFileState:
    class_name: str = ""
    class_references: list[BacklogReference] = field(default_factory=list)
    method_references: list[BacklogReference] = field(default_factory=list)


def python_class_name(line: str, index: int) -> str:
    """Class name declared after the ``class `` keyword at index.

    Example:
        >>> python_class_name("class TestApp(unittest.TestCase):", 0)
        'TestApp'
    """
    rest = line[index + len("class ") :]
    ends = [pos for pos in (rest.find("("), rest.find(":")) if pos != -1]
    if not ends:
        return ""
    return rest[: min(ends)].strip()


def python_method_name(line: str) -> str:
    """Name of the function defined on the line, or an empty string."""
    start = line.find("def ")
    if start == -1:
        return ""
    rest = line[start + len("def ") :]
    end = rest.find("(")
    if end == -1:
        return ""
    return rest[:end].strip()


def scan_python_lines(
    lines: Iterable[str],
    module_name: str,
    file_url: str = "",
) -> list[TestBacklogEntry]:
    """Extract test backlog entries from the lines of one Python module.

    Args:
        lines: File content, one line per item.
        module_name: Dotted module name used to qualify class names.
        file_url: Link stored on every produced test identity.

    Returns:
        One entry per (test, marker scope) pair.
    """
    state = _PythonFileState()
    entries: list[TestBacklogEntry] = []

    for line in lines:
        if line in ("", "\n"):
            continue

        if has_trace_marker(line):
            if state.class_name:
                state.method_references = parse_backlog_references(line)
            else:
                state.class_references = parse_backlog_references(line)
            continue

        class_index = line.rfind("class ")
        if class_index != -1:
            if not is_blank_before(line, class_index):
                continue
            name = python_class_name(line, class_index)
            if name:
                state.class_name = f"{module_name}.{name}" if module_name else name
            continue

        if not state.class_name or not (state.method_references or state.class_references):
            continue

        method = python_method_name(line)
        if not method.startswith(TEST_METHOD_PREFIX):
            continue

        test = TestIdentity(file_url=file_url, class_name=state.class_name, method_name=method)
        if state.class_references:
            entries.append(
                TestBacklogEntry(test=test, backlog_references=tuple(state.class_references))
            )
        if state.method_references:
            entries.append(
                TestBacklogEntry(test=test, backlog_references=tuple(state.method_references))
            )
        state.method_references = []

    return entries


def scan_python(source: SourceCode, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Scan every Python module under the source tree."""
    root = Path(source.local)
    entries: list[TestBacklogEntry] = []
    for path in iter_source_files(root, PYTHON_EXTENSIONS):
        found = scan_python_lines(
            read_source_lines(path),
            module_name_for(path, root),
            source_file_url(path, source, github_base_url),
        )
        if found:
            logger.debug("python_file_scanned", path=str(path), entries=len(found))
        entries.extend(found)
    return entries


__all__ = [
    "PYTHON_EXTENSIONS",
    "python_class_name",
    "python_method_name",
    "scan_python",
    "scan_python_lines",
]
