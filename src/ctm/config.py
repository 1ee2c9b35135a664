"""Configuration models and loading for ctm.

The configuration file is YAML (JSON files are accepted as YAML). Keys are
matched case-insensitively and underscores are ignored, so ``workDir``,
``workdir`` and ``work_dir`` all set the same field.

Example:
    >>> config = CtmConfig.from_file("ctm.yaml")
    >>> [source.language for source in config.sourcecode]
    [<SourceLanguage.JAVA: 'java'>]
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from ctm.errors import ConfigurationError

logger = structlog.get_logger(__name__)

SUPPORTED_REPORT_TYPES: tuple[str, ...] = ("xunit-xml",)

DEFAULT_URL_TEMPLATE = "%{base}/%{git.org}/%{git.repository}/blob/%{git.branch}/%{fileName}"


def _normalize_key(key: str) -> str:
    return key.replace("_", "").replace("-", "").lower()


class SourceLanguage(str, Enum):
    """Source languages the scanners understand."""

    JAVA = "java"
    PYTHON = "python"
    JAVASCRIPT = "javascript"
    GAUGESPEC = "gaugespec"


class _ConfigModel(BaseModel):
    """Base for configuration sections with relaxed key matching."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _match_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        fields = {_normalize_key(name): name for name in cls.model_fields}
        return {fields.get(_normalize_key(str(key)), key): value for key, value in data.items()}


class GitCoordinates(_ConfigModel):
    """Location of a repository on a GitHub server."""

    organization: str = Field(default="", description="GitHub organization or user")
    repository: str = Field(default="", description="Repository name")
    branch: str = Field(default="", description="Branch name")

    @property
    def is_complete(self) -> bool:
        return bool(self.organization and self.repository and self.branch)


class GitHubConfig(_ConfigModel):
    base_url: str = Field(default="", description="GitHub server URL, e.g. https://github.com")
    access_token: str = Field(default="", description="Token used for API calls")
    create_links_in_backlog_items: bool = Field(
        default=False, description="Comment the test result link on traced GitHub issues"
    )

    @field_validator("base_url")
    @classmethod
    def _trim_slashes(cls, value: str) -> str:
        return value.strip("/")

    @property
    def api_url(self) -> str:
        """REST API root of the configured server."""
        if not self.base_url or self.base_url == "https://github.com":
            return "https://api.github.com"
        return f"{self.base_url}/api/v3"


class BasicAuth(_ConfigModel):
    user: str = ""
    password: str = ""


class JiraConfig(_ConfigModel):
    base_url: str = Field(default="", description="Jira server URL")
    basic_auth: BasicAuth = Field(default_factory=BasicAuth)
    create_links_in_backlog_items: bool = Field(
        default=False, description="Comment the test result link on traced Jira issues"
    )

    @field_validator("base_url")
    @classmethod
    def _trim_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


class SourceCode(_ConfigModel):
    """A source tree to scan for traceability markers.

    Attributes:
        local: Local directory holding the source tree.
        git: Where the tree lives on GitHub, used to link scanned files.
        language: Scanner used for the tree.
        custom_url_template: Overrides the default source file link template.
    """

    local: str = Field(default="", description="Local source directory")
    git: GitCoordinates = Field(default_factory=GitCoordinates)
    language: SourceLanguage = Field(..., description="Source language of the tree")
    custom_url_template: str = Field(default="", description="Source file link template")

    @field_validator("language", mode="before")
    @classmethod
    def _lowercase_language(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @property
    def url_template(self) -> str:
        return self.custom_url_template or DEFAULT_URL_TEMPLATE


class MappingConfig(_ConfigModel):
    local: str = Field(default="", description="JSON mapping file used instead of scanning")


class ReportLocation(_ConfigModel):
    type: str = Field(default="xunit-xml", description="Report format")
    local: str = Field(..., description="Directory holding the reports")

    @property
    def is_supported(self) -> bool:
        return self.type in SUPPORTED_REPORT_TYPES


class TraceabilityRepoConfig(_ConfigModel):
    git: GitCoordinates = Field(default_factory=GitCoordinates)


class DeliveryConfig(_ConfigModel):
    program: str = ""
    version: str = ""
    backlog_items: str = Field(default="", description="Comma separated backlog references")


class LogConfig(_ConfigModel):
    level: str = "INFO"


class EnvironmentSettings(BaseSettings):
    """Credentials read from the environment.

    Environment values take precedence over the configuration file.
    """

    github_token: str | None = Field(default=None, description="GITHUB_TOKEN")
    jira_user: str | None = Field(default=None, description="JIRA_USER")
    jira_password: str | None = Field(default=None, description="JIRA_PASSWORD")


class CtmConfig(_ConfigModel):
    """Top level ctm configuration."""

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    jira: JiraConfig = Field(default_factory=JiraConfig)
    sourcecode: tuple[SourceCode, ...] = Field(default=())
    mapping: MappingConfig = Field(default_factory=MappingConfig)
    test_report: tuple[ReportLocation, ...] = Field(default=())
    traceability_repo: TraceabilityRepoConfig = Field(default_factory=TraceabilityRepoConfig)
    delivery: DeliveryConfig = Field(default_factory=DeliveryConfig)
    work_dir: str = Field(default=".", description="Directory for the comment cache")
    output_dir: str = Field(default=".", description="Directory reports are written to")
    log: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def from_file(cls, path: Path | str) -> CtmConfig:
        """Load and validate a configuration file.

        Args:
            path: Path to a YAML or JSON configuration file.

        Returns:
            Validated configuration with environment credentials applied.

        Raises:
            ConfigurationError: If the file is missing or not valid YAML/JSON.
            pydantic.ValidationError: If the content does not match the schema.
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigurationError("Configuration file not found", file_path=str(path))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                "Unable to read configuration file",
                file_path=str(path),
                internal_details=str(e),
            ) from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Configuration must be a mapping of sections", file_path=str(path)
            )

        config = cls.model_validate(data)
        return config.with_environment(EnvironmentSettings())

    def with_environment(self, env: EnvironmentSettings) -> CtmConfig:
        """Return a copy with credentials from the environment applied."""
        github = self.github
        if env.github_token:
            github = github.model_copy(update={"access_token": env.github_token})

        jira = self.jira
        auth_update: dict[str, str] = {}
        if env.jira_user:
            auth_update["user"] = env.jira_user
        if env.jira_password:
            auth_update["password"] = env.jira_password
        if auth_update:
            jira = jira.model_copy(
                update={"basic_auth": jira.basic_auth.model_copy(update=auth_update)}
            )

        return self.model_copy(update={"github": github, "jira": jira})

    def with_delivery(
        self,
        *,
        program: str | None = None,
        version: str | None = None,
        backlog_items: str | None = None,
    ) -> CtmConfig:
        """Return a copy with the given delivery fields replaced.

        Empty or None values leave the current value untouched.
        """
        update: dict[str, str] = {}
        if program:
            update["program"] = program
        if version:
            update["version"] = version
        if backlog_items:
            update["backlog_items"] = backlog_items
        if not update:
            return self
        return self.model_copy(update={"delivery": self.delivery.model_copy(update=update)})

    def validate_paths(self) -> None:
        """Check that the files and directories a run reads exist.

        Raises:
            ConfigurationError: For a missing mapping file, source tree or
                report directory, or an empty report directory.
        """
        if self.mapping.local:
            if not Path(self.mapping.local).is_file():
                raise ConfigurationError(
                    f"Mapping file does not exist: {self.mapping.local}",
                    field_path="mapping.local",
                )
        else:
            if not self.sourcecode:
                raise ConfigurationError(
                    "Neither a mapping file nor a source code location is configured"
                )
            for index, source in enumerate(self.sourcecode):
                if not source.local or not Path(source.local).is_dir():
                    raise ConfigurationError(
                        f"Source code directory does not exist: {source.local!r}",
                        field_path=f"sourcecode.{index}.local",
                    )

        for index, report in enumerate(self.test_report):
            report_dir = Path(report.local)
            if not report_dir.is_dir():
                raise ConfigurationError(
                    f"Test report directory does not exist: {report.local}",
                    field_path=f"test_report.{index}.local",
                )
            if not any(report_dir.iterdir()):
                raise ConfigurationError(
                    f"Test report directory is empty: {report.local}",
                    field_path=f"test_report.{index}.local",
                )

        if not self.github.base_url:
            logger.warning("github_not_configured", detail="links in reports may be broken")


class DeliveryFile(BaseModel):
    """Delivery manifest naming the backlog items of one delivery.

    Example:
        >>> delivery = DeliveryFile(program="My Program", delivery="1.0", jira_keys=["P-1"])
        >>> delivery.backlog_items
        'Jira:P-1'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    program: str = ""
    delivery: str = ""
    jira_keys: list[str] = Field(default_factory=list)
    github_keys: list[str] = Field(default_factory=list)

    @classmethod
    def from_file(cls, path: Path | str) -> DeliveryFile:
        """Read a delivery JSON file.

        Raises:
            ConfigurationError: If the file is missing or not valid JSON.
        """
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                "Unable to read delivery file",
                file_path=str(path),
                internal_details=str(e),
            ) from e
        return cls.model_validate(data)

    @property
    def backlog_items(self) -> str:
        """Backlog items in marker form, GitHub issues first."""
        from ctm.mapping.markers import format_backlog_references
        from ctm.mapping.models import BacklogReference, TrackerSource

        references = [BacklogReference(source=TrackerSource.GITHUB, id=key) for key in self.github_keys]
        references.extend(BacklogReference(source=TrackerSource.JIRA, id=key) for key in self.jira_keys)
        return format_backlog_references(references)

    def apply_to(self, config: CtmConfig) -> CtmConfig:
        """Overlay this delivery onto a configuration."""
        return config.with_delivery(
            program=self.program.replace(" ", ""),
            version=self.delivery.replace(" ", ""),
            backlog_items=self.backlog_items,
        )


__all__ = [
    "DEFAULT_URL_TEMPLATE",
    "SUPPORTED_REPORT_TYPES",
    "BasicAuth",
    "CtmConfig",
    "DeliveryConfig",
    "DeliveryFile",
    "EnvironmentSettings",
    "GitCoordinates",
    "GitHubConfig",
    "JiraConfig",
    "LogConfig",
    "MappingConfig",
    "SourceCode",
    "SourceLanguage",
    "ReportLocation",
    "TraceabilityRepoConfig",
]
