"""JSON mapping files.

A mapping file lists test references and their backlog items explicitly,
for code bases that cannot carry markers::

    [
      {
        "source_reference": "com.acme.AppTest.testLogin()",
        "filelocation": {
          "git": {"organization": "acme", "repository": "app", "branch": "main"},
          "relativePath": "./src/test/java/com/acme/AppTest.java"
        },
        "jira_keys": ["ACME-1"],
        "github_keys": ["acme/app#4"]
      }
    ]

A ``source_reference`` ending in ``()`` names a method; otherwise the whole
class. The same format is produced by the requirements mapping export.
"""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ctm.config import GitCoordinates
from ctm.errors import MappingFileError
from ctm.mapping.models import BacklogReference, TestBacklogEntry, TestIdentity, TrackerSource

logger = structlog.get_logger(__name__)

METHOD_SUFFIX = "()"


class FileLocation(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    git: GitCoordinates = Field(default_factory=GitCoordinates)
    relative_path: str = Field(default="", alias="relativePath")


class MappingFileEntry(BaseModel):
    """One record of a mapping file."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source_reference: str = Field(..., description="Class, or Class.method()")
    filelocation: FileLocation | None = Field(default=None)
    jira_keys: list[str] = Field(default_factory=list)
    github_keys: list[str] = Field(default_factory=list)

    def to_test_identity(self, github_base_url: str = "") -> TestIdentity:
        class_name, method_name = split_source_reference(self.source_reference)
        file_url = ""
        if self.filelocation and self.filelocation.relative_path:
            git = self.filelocation.git
            relative_path = self.filelocation.relative_path.strip(".").strip("/")
            file_url = (
                f"{github_base_url}/{git.organization}/{git.repository}"
                f"/blob/{git.branch}/{relative_path}"
            )
        return TestIdentity(file_url=file_url, class_name=class_name, method_name=method_name)

    def to_backlog_references(self) -> tuple[BacklogReference, ...]:
        jira = [BacklogReference(source=TrackerSource.JIRA, id=key) for key in self.jira_keys]
        github = [
            BacklogReference(source=TrackerSource.GITHUB, id=key) for key in self.github_keys
        ]
        return tuple(jira + github)


MAPPING_FILE_ADAPTER = TypeAdapter(list[MappingFileEntry])


def split_source_reference(reference: str) -> tuple[str, str]:
    """Split ``pkg.Class.method()`` into class and method.

    Example:
        >>> split_source_reference("com.acme.AppTest.testLogin()")
        ('com.acme.AppTest', 'testLogin')
        >>> split_source_reference("com.acme.AppTest")
        ('com.acme.AppTest', '')
    """
    if not reference.endswith(METHOD_SUFFIX):
        return reference, ""
    class_name, _, method = reference[: -len(METHOD_SUFFIX)].rpartition(".")
    return class_name, method


def parse_mapping_content(content: str | bytes, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Convert mapping file content into test backlog entries.

    Raises:
        MappingFileError: If the content is not a valid mapping document.
    """
    try:
        records = MAPPING_FILE_ADAPTER.validate_json(content)
    except PydanticValidationError as e:
        raise MappingFileError(
            "Mapping file is not a valid JSON mapping document",
            internal_details=str(e),
        ) from e

    return [
        TestBacklogEntry(
            test=record.to_test_identity(github_base_url),
            backlog_references=record.to_backlog_references(),
        )
        for record in records
    ]


def read_mapping_file(path: Path | str, github_base_url: str = "") -> list[TestBacklogEntry]:
    """Read test backlog entries from a JSON mapping file.

    Raises:
        MappingFileError: If the file cannot be read or is invalid.
    """
    path = Path(path)
    try:
        content = path.read_bytes()
    except OSError as e:
        raise MappingFileError(
            f"Cannot read mapping file {path}", internal_details=str(e)
        ) from e

    entries = parse_mapping_content(content, github_base_url)
    logger.info("mapping_file_read", path=str(path), entries=len(entries))
    return entries


__all__ = [
    "MAPPING_FILE_ADAPTER",
    "METHOD_SUFFIX",
    "FileLocation",
    "MappingFileEntry",
    "parse_mapping_content",
    "read_mapping_file",
    "split_source_reference",
]
