"""Console output for the ctm command.

Status lines (written reports, run summary, errors) go through one Rich
console. Message text is escaped, so report paths and backlog identifiers
are printed literally. Colors are disabled by ``--no-color`` or the
NO_COLOR environment variable.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create the console used for status lines.

    Args:
        no_color: Disable colors. NO_COLOR in the environment has the same effect.
    """
    no_color = no_color or _force_no_color
    return Console(force_terminal=False if no_color else None, no_color=no_color)


console = create_console()


def _status(marker: str, message: str, **kwargs: Any) -> None:
    console.print(f"{marker} {escape(message)}", **kwargs)


def success(message: str, **kwargs: Any) -> None:
    """Print a status line prefixed with a green check mark.

    Example:
        >>> success("Reports written to ./out")
        ✓ Reports written to ./out
    """
    _status("[green]✓[/green]", message, **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print a status line prefixed with a red cross."""
    _status("[red]✗[/red]", message, **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    _status("[yellow]⚠[/yellow]", message, **kwargs)


def info(message: str, **kwargs: Any) -> None:
    console.print(escape(message), **kwargs)


def report_paths(paths: Iterable[Path]) -> None:
    """List written report files, one per line."""
    for path in paths:
        info(f"  {path}")


def run_summary(total: int, failed: int) -> None:
    """Print how many traced backlog items are successfully tested.

    Args:
        total: Number of traced backlog items.
        failed: Number of items with a failed, skipped or missing test.
    """
    if not total:
        warning("No backlog items traced to automated tests")
    elif failed:
        warning(f"{failed} of {total} backlog items are not successfully tested")
    else:
        success(f"All {total} backlog items successfully tested")


def set_no_color(no_color: bool) -> None:
    """Replace the module console, e.g. for ``--no-color``."""
    global console
    console = create_console(no_color=no_color)


__all__ = [
    "create_console",
    "error",
    "info",
    "report_paths",
    "run_summary",
    "set_no_color",
    "success",
    "warning",
]
