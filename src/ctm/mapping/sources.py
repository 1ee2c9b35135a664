"""Source tree helpers shared by the language scanners.

This module provides:
- iter_source_files: Walk a source tree for files with given extensions
- read_source_lines: Read one source file, failing the run if unreadable
- source_file_url: Link a scanned file to its location on GitHub
- module_name_for: Dotted module name of a file relative to its root
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import structlog

from ctm.config import SourceCode
from ctm.errors import SourceScanError

logger = structlog.get_logger(__name__)

IGNORED_DIRECTORIES = frozenset(
    {"node_modules", ".git", ".venv", "venv", "__pycache__", "site-packages", ".tox"}
)


def is_blank_before(line: str, index: int) -> bool:
    """True if index is at line start or follows whitespace."""
    return index == 0 or line[index - 1].isspace()


def iter_source_files(root: Path, extensions: Iterable[str]) -> Iterator[Path]:
    """Yield files under root whose suffix is one of extensions.

    Vendor and tooling directories are not descended into. Directories that
    cannot be listed are skipped. Files are yielded in sorted order.

    Args:
        root: Directory to walk.
        extensions: Suffixes including the dot, e.g. ``(".js", ".ts")``.

    Yields:
        Paths of matching files, joined onto root.
    """
    suffixes = frozenset(extensions)

    def _on_error(err: OSError) -> None:
        logger.warning("source_directory_skipped", path=err.filename, error=str(err))

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames[:] = sorted(d for d in dirnames if d not in IGNORED_DIRECTORIES)
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1] in suffixes:
                yield Path(dirpath) / filename


def read_source_lines(path: Path) -> list[str]:
    """Read a source file as lines, keeping line endings.

    Raises:
        SourceScanError: If the file cannot be opened or read.
    """
    try:
        with path.open(encoding="utf-8", errors="replace") as f:
            return f.readlines()
    except OSError as e:
        raise SourceScanError(str(path), internal_details=str(e)) from e


def source_file_url(path: Path | str, source: SourceCode, github_base_url: str) -> str:
    """Build the GitHub link of a scanned file.

    Returns an empty string unless the GitHub base URL and the source's
    organization, repository and branch are all known.

    Example:
        >>> source = SourceCode(
        ...     local="subdir/",
        ...     language="java",
        ...     git={"organization": "myorg", "repository": "myrepo", "branch": "master"},
        ... )
        >>> source_file_url("subdir/App.java", source, "https://github.com/")
        'https://github.com/myorg/myrepo/blob/master/App.java'
    """
    if not github_base_url or not source.git.is_complete:
        return ""

    base = github_base_url.rstrip("/")

    file_name = Path(path).as_posix()
    local = Path(source.local).as_posix() if source.local else ""
    if local and local != "." and file_name.startswith(local + "/"):
        file_name = file_name[len(local) :]
    file_name = file_name.lstrip("/")

    params = {
        "base": base,
        "git.org": source.git.organization,
        "git.repository": source.git.repository,
        "git.branch": source.git.branch,
        "fileName": file_name,
    }
    url = source.url_template
    for key, value in params.items():
        url = url.replace("%{" + key + "}", value)
    return url


def module_name_for(path: Path, root: Path) -> str:
    """Dotted module name of a Python file relative to its source root.

    Example:
        >>> module_name_for(Path("/src/pkg/test_app.py"), Path("/src"))
        'pkg.test_app'
    """
    try:
        relative = path.relative_to(root)
    except ValueError:
        relative = path
    return relative.with_suffix("").as_posix().strip("/").replace("/", ".")


__all__ = [
    "IGNORED_DIRECTORIES",
    "is_blank_before",
    "iter_source_files",
    "module_name_for",
    "read_source_lines",
    "source_file_url",
]
