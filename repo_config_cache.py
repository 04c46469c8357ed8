"""Per-repository config cache keyed by ``owner/repo``."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict

from content_model import RepoConfigEntry, repo_key


logger = logging.getLogger("vcms.repo_config")

# Returns the pages config payload ({"initialized", "baseUrl"}) for a repo.
RepoConfigFetch = Callable[[str, str], Awaitable[Any]]


class RepoConfigCache:
    """Caches the publishing config of the active repository.

    With the default ``max_entries=1`` only the current repo is held and
    switching repos evicts it by key mismatch. A failed fetch is cached as a
    degraded entry so a broken repo is not retried on every render; callers
    tell it apart from a real "not initialized" via ``entry.degraded`` or
    ``error``.
    """

    def __init__(self, fetch: RepoConfigFetch, max_entries: int = 1) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._fetch = fetch
        self._max_entries = max_entries
        self._entries: "OrderedDict[str, RepoConfigEntry]" = OrderedDict()
        self._inflight: Dict[str, asyncio.Task] = {}
        self._error = False
        self._generation = 0
        self.remote_fetches = 0

    @property
    def error(self) -> bool:
        return self._error

    @property
    def loading(self) -> bool:
        return bool(self._inflight)

    @property
    def current(self) -> RepoConfigEntry | None:
        if not self._entries:
            return None
        return next(reversed(self._entries.values()))

    @property
    def is_initialized(self) -> bool:
        entry = self.current
        return bool(entry and entry.initialized)

    @property
    def base_url(self) -> str:
        entry = self.current
        return (entry.base_url or "") if entry else ""

    def peek(self, owner: str, repo: str) -> RepoConfigEntry | None:
        return self._entries.get(repo_key(owner, repo))

    async def get(self, owner: str, repo: str) -> RepoConfigEntry:
        key = repo_key(owner, repo)
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
            self._error = entry.degraded
            logger.debug("repo_config_hit repo=%s", key)
            return entry

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(owner, repo, key, self._generation))
            self._inflight[key] = task
        else:
            logger.debug("repo_config_join repo=%s", key)
        # shielded so an abandoning caller does not cancel the shared fetch
        return await asyncio.shield(task)

    def invalidate(self) -> None:
        self._generation += 1
        self._entries.clear()
        self._inflight.clear()
        self._error = False
        logger.info("repo_config_invalidated")

    async def _load(self, owner: str, repo: str, key: str, generation: int) -> RepoConfigEntry:
        self.remote_fetches += 1
        try:
            try:
                data = await self._fetch(owner, repo)
                if isinstance(data, RepoConfigEntry):
                    entry = data
                else:
                    entry = RepoConfigEntry.from_pages_response(key, data)
            except Exception as exc:
                logger.warning("repo_config_fetch_failed repo=%s error=%s", key, exc)
                entry = RepoConfigEntry(
                    repo_key=key,
                    initialized=False,
                    fetch_error=str(exc) or exc.__class__.__name__,
                )
            # results of fetches started before invalidate() are not stored
            if generation == self._generation:
                self._store(key, entry)
            return entry
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

    def _store(self, key: str, entry: RepoConfigEntry) -> None:
        self._entries[key] = entry
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("repo_config_evicted repo=%s", evicted)
        self._error = entry.degraded
