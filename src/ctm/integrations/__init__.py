"""Backlog tracker integrations."""

from __future__ import annotations

from ctm.integrations.cache import CACHE_FILE_NAME, CommentCache, cache_key
from ctm.integrations.comments import LinkPublisher

__all__ = ["CACHE_FILE_NAME", "CommentCache", "LinkPublisher", "cache_key"]
