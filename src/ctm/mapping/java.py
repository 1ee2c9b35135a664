"""Java source scanner.

Finds ``// Trace(...)`` markers in JUnit sources and ties them to the test
class or test method they annotate. Scanning is line based: a marker above
the class applies to every test of the class; a marker inside the class
applies to the next test method only.

Known approximation: only one level of inner classes is tracked. A second
inner class replaces the first (``Outer$A`` becomes ``Outer$B``).
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

JAVA_EXTENSIONS = (".java",)

_TEST_ANNOTATION = re.compile(r"@Test(?!\w)(\s*\([^)]*\))?")


@dataclass
class _JavaFileState:
    package: str = ""
    class_name: str = ""
    class_references: list[BacklogReference] = field(default_factory=list)
    method_references: list[BacklogReference] = field(default_factory=list)
    test_annotated: bool = False


def java_class_name(line: str, index: int) -> str:
    """Class name declared after the ``class `` keyword at index.

    Generic parameters and an opening brace glued to the name are removed.

    Example:
        >>> java_class_name("public class Box<T>{", 7)
        'Box'
    """
    rest = line[index + len("class ") :].strip()
    name = rest.split(maxsplit=1)[0] if rest else ""
    if "<" in name:
        name = name[: name.rindex("<")]
    if "{" in name:
        name = name[: name.rindex("{")]
    return name


def java_method_name(line: str) -> str:
    """Name of the method declared on the line, or an empty string.

    A declaration is a line holding both ``{`` and ``(``; the name is the last
    token before the first ``(``.
    """
    if "{" not in line or "(" not in line:
        return ""
    tokens = line[: line.index("(")].split()
    return tokens[-1] if tokens else ""


def scan_java_lines(lines: Iterable[str], file_url: str = "") -> list[TestBacklogEntry]:
    """Extract test backlog entries from the lines of one Java file.

    Args:
        lines: File content, one line per item.
        file_url: Link stored on every produced test identity.

    Returns:
        One entry per (test, marker scope) pair.

    Example:
        >>> entries = scan_java_lines([
        ...     "package com.acme;\\n",
        ...     "// Trace(Jira:PROJ-1)\\n",
        ...     "public class AppTest {\\n",
        ...     "    @Test public void m(){}\\n",
        ...     "}\\n",
        ... ])
        >>> entries[0].test.class_name, entries[0].test.method_name
        ('com.acme.AppTest', 'm')
    """
    state = _JavaFileState()
    entries: list[TestBacklogEntry] = []

    for line in lines:
        if line in ("", "\n"):
            continue

        if "@Test" in line:
            state.test_annotated = True
            line = _TEST_ANNOTATION.sub("", line)
            if not line.strip():
                continue

        if has_trace_marker(line):
            if state.class_name:
                state.method_references = parse_backlog_references(line)
            else:
                state.class_references = parse_backlog_references(line)
            continue

        if not state.package and "package " in line:
            declaration = line[line.rindex("package ") + len("package ") :]
            state.package = declaration.split(";", 1)[0].strip()
            continue

        if line.find("}") == 0 and state.class_name:
            state.class_name = ""
            continue

        class_index = line.rfind("class ")
        if class_index != -1 and is_blank_before(line, class_index):
            name = java_class_name(line, class_index)
            if name:
                if state.class_name:
                    outer = state.class_name
                    if "$" in outer:
                        outer = outer[: outer.rindex("$")]
                    state.class_name = f"{outer}${name}"
                else:
                    state.class_name = f"{state.package}.{name}" if state.package else name
                continue

        if not state.class_name or not (state.method_references or state.class_references):
            continue

        method = java_method_name(line)
        if not method:
            continue
        if not state.test_annotated and method.startswith("test"):
            state.test_annotated = True
        if not state.test_annotated:
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
        state.test_annotated = False

    return entries


def scan_java(source: SourceCode, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Scan every Java file under the source tree."""
    entries: list[TestBacklogEntry] = []
    for path in iter_source_files(Path(source.local), JAVA_EXTENSIONS):
        file_url = source_file_url(path, source, github_base_url)
        found = scan_java_lines(read_source_lines(path), file_url)
        if found:
            logger.debug("java_file_scanned", path=str(path), entries=len(found))
        entries.extend(found)
    return entries


__all__ = [
    "JAVA_EXTENSIONS",
    "java_class_name",
    "java_method_name",
    "scan_java",
    "scan_java_lines",
]
