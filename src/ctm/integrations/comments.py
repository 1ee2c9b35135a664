"""Post test result links as comments on traced backlog items.

Each backlog item is commented once: items that were commented on are
recorded in a :class:`~ctm.integrations.cache.CommentCache` and skipped on
later runs. Failed HTTP calls are logged and never abort a run.
"""

from __future__ import annotations

from collections.abc import Iterable

import httpx
import structlog

from ctm.config import CtmConfig
from ctm.integrations.cache import CommentCache
from ctm.mapping.models import BacklogReference, TrackerSource
from ctm.reporting.links import results_url
from ctm.traces.models import Trace

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 10.0


class LinkPublisher:
    """Comments the traceability results link on GitHub and Jira issues.

    Args:
        config: Run configuration with tracker credentials and flags.
        cache: Cache of items already commented on.
        timeout: Timeout in seconds for each HTTP call.
    """

    def __init__(
        self,
        config: CtmConfig,
        cache: CommentCache,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.config = config
        self.cache = cache
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        """True if a traceability repository exists to link to."""
        return bool(self.config.traceability_repo.git.repository)

    def _wants(self, reference: BacklogReference) -> bool:
        if reference.source is TrackerSource.GITHUB:
            return self.config.github.create_links_in_backlog_items
        if reference.source is TrackerSource.JIRA:
            return self.config.jira.create_links_in_backlog_items
        return False

    def publish(self, traces: Iterable[Trace]) -> int:
        """Comment on every traced item not yet in the cache.

        Returns:
            Number of comments created.
        """
        if not self.enabled:
            logger.debug("link_publishing_disabled", reason="no traceability repository")
            return 0

        references = [trace.backlog_item for trace in traces]
        if not any(self._wants(reference) for reference in references):
            return 0

        self.cache.load()
        created = 0
        for reference in references:
            if not self._wants(reference) or self.cache.contains(reference):
                continue
            if self.post_link(reference):
                self.cache.add(reference)
                created += 1
        self.cache.save()

        logger.info("backlog_links_published", created=created)
        return created

    def post_link(self, reference: BacklogReference) -> bool:
        """Post the results link on one item. Returns True on success."""
        body = {"body": results_url(reference, self.config)}
        try:
            if reference.source is TrackerSource.GITHUB:
                response = httpx.post(
                    f"{self.config.github.api_url}/repos/{reference.github_organization}"
                    f"/{reference.github_repository}/issues/{reference.github_issue}/comments",
                    json=body,
                    headers={
                        "Authorization": f"token {self.config.github.access_token}",
                        "Accept": "application/vnd.github+json",
                    },
                    timeout=self.timeout,
                )
            elif reference.source is TrackerSource.JIRA:
                auth = self.config.jira.basic_auth
                response = httpx.post(
                    f"{self.config.jira.base_url}/rest/api/2/issue/{reference.id}/comment",
                    json=body,
                    auth=(auth.user, auth.password),
                    timeout=self.timeout,
                )
            else:
                return False
        except httpx.HTTPError as e:
            logger.error(
                "backlog_link_failed",
                item=reference.display_name,
                error=str(e),
            )
            return False

        if response.status_code != httpx.codes.CREATED:
            logger.error(
                "backlog_link_rejected",
                item=reference.display_name,
                status_code=response.status_code,
                response=response.text[:200],
            )
            return False

        logger.info("backlog_link_created", item=reference.display_name)
        return True


__all__ = ["DEFAULT_TIMEOUT", "LinkPublisher"]
