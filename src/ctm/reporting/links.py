"""Links from backlog references to trackers and the traceability repository."""

from __future__ import annotations

from ctm.config import CtmConfig
from ctm.mapping.models import BacklogReference, TrackerSource

NO_LINK = "No link available"


def issue_url(reference: BacklogReference, config: CtmConfig) -> str:
    """Web URL of the backlog item in its tracker.

    Example:
        >>> issue_url(BacklogReference(source=TrackerSource.JIRA, id="P-1"), config)
        'https://jira.acme.corp/browse/P-1'
    """
    if reference.source is TrackerSource.GITHUB:
        return (
            f"{config.github.base_url}/{reference.github_organization}"
            f"/{reference.github_repository}/issues/{reference.github_issue}"
        )
    if reference.source is TrackerSource.JIRA:
        return f"{config.jira.base_url}/browse/{reference.id}"
    return NO_LINK


def traceability_branch(config: CtmConfig) -> str:
    """Branch of the traceability repository that links should point to.

    With a delivery version and a GitHub token, results are published as a
    release named after the version, so links use the version instead.
    """
    if config.delivery.version and config.github.access_token:
        return config.delivery.version
    return config.traceability_repo.git.branch


def results_url(reference: BacklogReference, config: CtmConfig) -> str:
    """Link to the item's results in the traceability repository."""
    git = config.traceability_repo.git
    url = (
        f"{config.github.base_url}/{git.organization}/{git.repository}"
        f"/tree/{traceability_branch(config)}"
    )
    if reference.source is not TrackerSource.UNKNOWN:
        url = f"{url}/{reference.source.label}"
    return f"{url}/{reference.traceability_path}"


__all__ = ["NO_LINK", "issue_url", "results_url", "traceability_branch"]
