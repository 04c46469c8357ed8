"""Composition root: builds the stores once and hands them to the views."""

from __future__ import annotations

import logging

import httpx

from async_guard import AsyncOperationGuard
from console.api import ConsoleApi
from console.notify import Notifier
from console.settings import Settings, configure_logging, load_settings
from content_entries import ContentEntryService
from content_model import RepoConfig, RepoConfigEntry
from field_registry import FieldTypeRegistry
from repo_config_cache import RepoConfigCache
from repo_store import RepoStore
from route_guard import RouteGuard
from session_cache import SessionCache


logger = logging.getLogger("vcms")


class Console:
    """Process-wide state for one console session.

    Construct once at startup and close at shutdown; views receive the
    stores from here instead of importing module-level singletons.
    """

    def __init__(
        self,
        api: ConsoleApi,
        settings: Settings | None = None,
        notifier: Notifier | None = None,
        registry: FieldTypeRegistry | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.api = api
        self.notifier = notifier or Notifier()
        self.session = SessionCache(api.get_me)
        self.repo_config = RepoConfigCache(api.get_pages_config, max_entries=self.settings.repo_cache_size)
        self.repo = RepoStore()
        self.routes = RouteGuard(self.session)
        self.entries = ContentEntryService(api, registry=registry)
        self._closed = False

    @classmethod
    def create(cls, settings: Settings | None = None, transport: httpx.AsyncBaseTransport | None = None) -> "Console":
        settings = settings or load_settings()
        configure_logging(settings)
        api = ConsoleApi.from_settings(settings, transport=transport)
        logger.info("console_started api=%s", settings.api_base_url)
        return cls(api, settings=settings)

    @property
    def closed(self) -> bool:
        return self._closed

    def guard(self) -> AsyncOperationGuard:
        """A fresh guard for one view, reporting through the shared notifier."""
        return AsyncOperationGuard(notify=self.notifier)

    async def open_repo(self, owner: str, repo: str) -> RepoConfig:
        if self.repo.select_repo(owner, repo):
            self.entries.clear()
        data = await self.api.get_repo_config(owner, repo)
        return self.repo.set_config(data)

    async def pages_config(self, owner: str, repo: str) -> RepoConfigEntry:
        return await self.repo_config.get(owner, repo)

    def logout(self) -> None:
        self.session.logout()
        self.repo_config.invalidate()
        self.repo.clear()
        self.entries.clear()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.api.aclose()
        logger.info("console_closed")

    async def __aenter__(self) -> "Console":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
