"""Data models for test-to-backlog mappings.

This module defines:
- TrackerSource: Backlog tracker a reference points to
- BacklogReference: A (tracker, identifier) pair naming one backlog item
- TestIdentity: A test class, optionally narrowed to one method
- ExactMatcher / GaugeParameterizedMatcher: How an identity matches executed tests
- TestBacklogEntry: A test identity plus the backlog items it verifies
"""

from __future__ import annotations

import re
from enum import IntEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ctm.testreport.models import ExecutedTestCase

_INTEGER_SUFFIX = re.compile(r"[+-]?\d+")


class TrackerSource(IntEnum):
    """Backlog tracker of a reference. Values define the trace sort order."""

    UNKNOWN = -1
    GITHUB = 0
    JIRA = 1

    @property
    def label(self) -> str:
        """Name used in markers, delivery lists and report paths."""
        return {
            TrackerSource.GITHUB: "GitHub",
            TrackerSource.JIRA: "Jira",
        }.get(self, "Unknown")


class BacklogReference(BaseModel):
    """A pointer to one backlog item.

    Identity is the pair (source, id). Instances are hashable and can be
    used as dictionary keys.

    Example:
        >>> ref = BacklogReference(source=TrackerSource.GITHUB, id="org/repo#42")
        >>> ref.github_issue
        '42'
    """

    model_config = ConfigDict(frozen=True)

    source: TrackerSource = Field(..., description="Tracker the item lives in")
    id: str = Field(..., description="Tracker-specific identifier")

    @property
    def sort_key(self) -> tuple[int, str]:
        return (int(self.source), self.id)

    @property
    def display_name(self) -> str:
        """Marker form of the reference, e.g. ``Jira:PROJ-1``."""
        return f"{self.source.label}:{self.id}"

    @property
    def traceability_path(self) -> str:
        """Relative directory of this item inside a traceability repository."""
        if self.source is TrackerSource.JIRA:
            return self.id.replace("-", "/")
        if self.source is TrackerSource.GITHUB:
            return self.id.replace("#", "/")
        return self.id

    def _github_parts(self) -> tuple[str, str, str]:
        if self.source is not TrackerSource.GITHUB:
            raise ValueError(f"{self.display_name} is not a GitHub issue")
        org, _, rest = self.id.partition("/")
        repository, _, issue = rest.partition("#")
        return org, repository, issue

    @property
    def github_organization(self) -> str:
        return self._github_parts()[0]

    @property
    def github_repository(self) -> str:
        return self._github_parts()[1]

    @property
    def github_issue(self) -> str:
        return self._github_parts()[2]


class TestIdentity(BaseModel):
    """A test class, or one method of it when ``method_name`` is set.

    Attributes:
        file_url: Link to the source file declaring the test (may be empty).
        class_name: Qualified class, suite or spec name.
        method_name: Method or scenario name; empty means the whole class.
    """

    model_config = ConfigDict(frozen=True)

    file_url: str = Field(default="", description="Link to the declaring source file")
    class_name: str = Field(..., description="Qualified class name")
    method_name: str = Field(default="", description="Method name, empty for whole class")


class ExactMatcher(BaseModel):
    """Match executed tests by class name and, when given, method name."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["exact"] = "exact"

    def matches(self, test: TestIdentity, case: ExecutedTestCase) -> bool:
        if case.class_name != test.class_name:
            return False
        return not test.method_name or case.method_name == test.method_name


class GaugeParameterizedMatcher(BaseModel):
    """Match Gauge scenarios, including data-table runs.

    A table-driven scenario is reported once per row as ``<scenario> <n>``;
    any such run matches the scenario declared in the spec file.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["gauge"] = "gauge"

    def matches(self, test: TestIdentity, case: ExecutedTestCase) -> bool:
        if case.class_name != test.class_name:
            return False
        if not test.method_name or case.method_name == test.method_name:
            return True
        if case.method_name.startswith(test.method_name):
            suffix = case.method_name[len(test.method_name) :].strip()
            return _INTEGER_SUFFIX.fullmatch(suffix) is not None
        return False


TestCaseMatcher = Annotated[
    Union[ExactMatcher, GaugeParameterizedMatcher],
    Field(discriminator="kind"),
]


class TestBacklogEntry(BaseModel):
    """A test identity and the backlog items it verifies.

    Example:
        >>> entry = TestBacklogEntry(
        ...     test=TestIdentity(class_name="com.acme.AppTest", method_name="testApp"),
        ...     backlog_references=(BacklogReference(source=TrackerSource.JIRA, id="ACME-1"),),
        ... )
        >>> entry.matches(ExecutedTestCase(class_name="com.acme.AppTest", method_name="testApp"))
        True
    """

    model_config = ConfigDict(frozen=True)

    test: TestIdentity
    backlog_references: tuple[BacklogReference, ...] = Field(default=())
    matcher: TestCaseMatcher = Field(default_factory=ExactMatcher)

    def matches(self, case: ExecutedTestCase) -> bool:
        """Return True if the executed test case runs this entry's test."""
        return self.matcher.matches(self.test, case)


__all__ = [
    "BacklogReference",
    "ExactMatcher",
    "GaugeParameterizedMatcher",
    "TestBacklogEntry",
    "TestCaseMatcher",
    "TestIdentity",
    "TrackerSource",
]
