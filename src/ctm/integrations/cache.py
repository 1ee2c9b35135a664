"""Flat-file cache of backlog items that already carry a results link."""

from __future__ import annotations

from pathlib import Path

import structlog

from ctm.mapping.models import BacklogReference

logger = structlog.get_logger(__name__)

CACHE_FILE_NAME = ".commentCache"


def cache_key(reference: BacklogReference) -> str:
    """Key of a reference in the cache, e.g. ``1#PROJ-7`` for a Jira item."""
    return f"{int(reference.source)}#{reference.id}"


class CommentCache:
    """Newline-delimited set of opaque keys.

    The whole file is read on :meth:`load` and rewritten on :meth:`save`.

    Example:
        >>> cache = CommentCache(Path(".commentCache"))
        >>> cache.load()
        >>> if not cache.contains(ref):
        ...     cache.add(ref)
        >>> cache.save()
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._keys: list[str] = []

    @classmethod
    def in_work_dir(cls, work_dir: Path | str) -> CommentCache:
        return cls(Path(work_dir) / CACHE_FILE_NAME)

    def load(self) -> None:
        """Read the cache file; a missing file leaves the cache empty."""
        try:
            content = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("comment_cache_not_found", path=str(self.path))
            self._keys = []
            return
        self._keys = [line.strip() for line in content.splitlines() if line.strip()]
        logger.debug("comment_cache_loaded", path=str(self.path), entries=len(self._keys))

    def contains(self, reference: BacklogReference) -> bool:
        return cache_key(reference) in self._keys

    def add(self, reference: BacklogReference) -> None:
        key = cache_key(reference)
        if key not in self._keys:
            self._keys.append(key)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("".join(f"{key}\n" for key in self._keys), encoding="utf-8")
        logger.debug("comment_cache_saved", path=str(self.path), entries=len(self._keys))

    def __len__(self) -> int:
        return len(self._keys)


__all__ = ["CACHE_FILE_NAME", "CommentCache", "cache_key"]
