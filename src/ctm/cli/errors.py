"""CLI error handling for ctm.

Wraps ctm exceptions into user-friendly messages with exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
from pydantic import ValidationError as PydanticValidationError

from ctm.cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

# Exit codes (0 is success)
EXIT_USER_ERROR = 1  # Invalid configuration, missing file
EXIT_SYSTEM_ERROR = 2  # Unreadable source or report, write failure


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - sourcecode.0.language: Input should be 'java'..."
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        lines.append(f"  - {loc}: {e['msg']}")

    return "\n".join(lines)


def validation_cli_error(err: PydanticValidationError, file_path: str) -> CLIError:
    """Build the CLI error for an invalid configuration or delivery file."""
    return CLIError(f"Invalid configuration in {file_path}:\n{format_pydantic_error(err)}")


__all__ = [
    "EXIT_SYSTEM_ERROR",
    "EXIT_USER_ERROR",
    "CLIError",
    "format_pydantic_error",
    "validation_cli_error",
]
