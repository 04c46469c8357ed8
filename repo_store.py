"""Selected repository and its content-type config."""

from __future__ import annotations

import logging
from typing import Any, Tuple

from content_model import ContentType, RepoConfig


logger = logging.getLogger("vcms.repo")


class RepoStore:
    def __init__(self) -> None:
        self._selected: Tuple[str, str] | None = None
        self._config: RepoConfig | None = None

    @property
    def selected(self) -> Tuple[str, str] | None:
        return self._selected

    @property
    def selected_key(self) -> str | None:
        if self._selected is None:
            return None
        owner, repo = self._selected
        return f"{owner}/{repo}"

    @property
    def config(self) -> RepoConfig | None:
        return self._config

    def select_repo(self, owner: str, repo: str) -> bool:
        """Make ``owner/repo`` the active repo. Returns True when it changed."""
        if not owner or not repo:
            raise ValueError("owner and repo are required")
        if self._selected == (owner, repo):
            return False
        # config of the previous repo must never be shown for the new one
        self._config = None
        self._selected = (owner, repo)
        logger.info("repo_selected repo=%s/%s", owner, repo)
        return True

    def set_config(self, config: RepoConfig | Any) -> RepoConfig:
        if not isinstance(config, RepoConfig):
            config = RepoConfig.from_dict(config)
        self._config = config
        return config

    def content_types(self) -> list[ContentType]:
        return list(self._config.content_types) if self._config else []

    def content_type(self, slug: str) -> ContentType | None:
        if self._config is None:
            return None
        return self._config.content_type(slug)

    def clear(self) -> None:
        self._selected = None
        self._config = None
