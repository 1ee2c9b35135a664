"""Custom exception hierarchy for ctm.

This module defines the exception classes that abort a traceability run:
- CtmError: Base exception for all ctm errors
- ConfigurationError: Raised when the configuration or its paths are invalid
- SourceScanError: Raised when a source file cannot be read
- ReportReadError: Raised when a test report file cannot be read
- MappingFileError: Raised when a JSON mapping file is unreadable or invalid

User-facing messages are safe to display. Technical details are logged
through structlog and never shown to the user.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class CtmError(Exception):
    """Base exception for ctm.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details, logged but never shown.

    Example:
        >>> raise CtmError(
        ...     "Traceability run failed",
        ...     internal_details="Permission denied: /src/App.java",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "ctm_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(CtmError):
    """Raised when configuration parsing or validation fails.

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "testreport.0.local").

    Example:
        >>> raise ConfigurationError(
        ...     "Test report directory is empty",
        ...     file_path="ctm.yaml",
        ...     field_path="test_report.0.local",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path


class SourceScanError(CtmError):
    """Raised when a source file found during a scan cannot be read.

    Attributes:
        file_path: The source file that failed.
    """

    def __init__(self, file_path: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Cannot read source file {file_path}",
            internal_details=internal_details,
        )
        self.file_path = file_path


class ReportReadError(CtmError):
    """Raised when a test report file cannot be read.

    Attributes:
        file_path: The report file that failed.
    """

    def __init__(self, file_path: str, *, internal_details: str | None = None) -> None:
        super().__init__(
            f"Cannot read test report {file_path}",
            internal_details=internal_details,
        )
        self.file_path = file_path


class MappingFileError(CtmError):
    """Raised when a JSON mapping file cannot be read or parsed."""

    pass


__all__ = [
    "ConfigurationError",
    "CtmError",
    "MappingFileError",
    "ReportReadError",
    "SourceScanError",
]
