"""Shared pytest fixtures for ctm tests.

Provides structlog capture, CliRunner fixtures and small builders for
traces, test suites and configurations.
"""

from __future__ import annotations

import textwrap
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

from ctm.config import CtmConfig
from ctm.mapping.models import BacklogReference, TrackerSource
from ctm.testreport.models import TestResult as _TestResult
from ctm.traces.models import Trace, TraceTest


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to print to the current sys.stdout so capsys sees it."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),  # resolves sys.stdout per call
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture(autouse=True)
def clean_credential_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tracker credentials of the developer's shell out of tests."""
    for name in ("GITHUB_TOKEN", "JIRA_USER", "JIRA_PASSWORD"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem."""
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def jira() -> Callable[[str], BacklogReference]:
    def _ref(identifier: str) -> BacklogReference:
        return BacklogReference(source=TrackerSource.JIRA, id=identifier)

    return _ref


@pytest.fixture
def github() -> Callable[[str], BacklogReference]:
    def _ref(identifier: str) -> BacklogReference:
        return BacklogReference(source=TrackerSource.GITHUB, id=identifier)

    return _ref


@pytest.fixture
def make_trace() -> Callable[..., Trace]:
    """Factory for traces with (class, method, result) test tuples."""

    def _make(reference: BacklogReference, *tests: tuple[str, str, _TestResult]) -> Trace:
        return Trace(
            backlog_item=reference,
            trace_tests=tuple(
                TraceTest(
                    source_file=f"https://github.com/acme/app/blob/main/{class_name}.java",
                    report_file="reports/TEST-app.xml",
                    class_name=class_name,
                    method_name=method_name,
                    result=result,
                )
                for class_name, method_name, result in tests
            ),
        )

    return _make


@pytest.fixture
def sample_config_data() -> dict[str, Any]:
    """Minimal configuration with GitHub, Jira and a traceability repository."""
    return {
        "github": {"base_url": "https://github.com"},
        "jira": {"base_url": "https://jira.acme.corp/"},
        "traceability_repo": {
            "git": {"organization": "acme", "repository": "traceability", "branch": "main"}
        },
    }


@pytest.fixture
def sample_config(sample_config_data: dict[str, Any]) -> CtmConfig:
    return CtmConfig.model_validate(sample_config_data)


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Factory writing dedented content to a file below tmp_path."""

    def _write(relative: str, content: str) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path

    return _write
