"""Authenticated-user state with a one-shot identity check per session."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from content_model import User


logger = logging.getLogger("vcms.session")

# Resolves to the user payload, or None when the server says "not logged in".
# Raising means the check itself failed.
IdentityFetch = Callable[[], Awaitable[Any]]


class AuthState(str, Enum):
    UNKNOWN = "unknown"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class SessionCache:
    def __init__(self, fetch_identity: IdentityFetch) -> None:
        self._fetch_identity = fetch_identity
        self._state = AuthState.UNKNOWN
        self._user: User | None = None
        self._inflight: asyncio.Task | None = None
        self._generation = 0
        self.remote_checks = 0

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def user(self) -> User | None:
        return self._user

    def is_authenticated(self) -> bool:
        return self._state is AuthState.AUTHENTICATED

    async def ensure_authenticated(self) -> bool:
        """Resolve the session state, asking the server at most once.

        Only the UNKNOWN state triggers a remote check; concurrent callers
        share it. Settled states return the cached answer.
        """
        # a check superseded by refresh() leaves the state UNKNOWN; wait on the new one
        while self._state is AuthState.UNKNOWN:
            if self._inflight is None:
                self._inflight = asyncio.ensure_future(self._check(self._generation))
            await asyncio.shield(self._inflight)
        return self.is_authenticated()

    async def refresh(self) -> bool:
        """Drop the cached answer and check again."""
        self._generation += 1
        self._inflight = None
        self._state = AuthState.UNKNOWN
        self._user = None
        return await self.ensure_authenticated()

    def logout(self) -> None:
        # local only: the server-side cookie stays valid until it expires
        self._generation += 1
        self._inflight = None
        self._user = None
        self._state = AuthState.UNAUTHENTICATED
        logger.info("session_logout scope=local")

    async def _check(self, generation: int) -> None:
        self.remote_checks += 1
        try:
            try:
                payload = await self._fetch_identity()
                user = None
                if payload is not None:
                    user = payload if isinstance(payload, User) else User.from_dict(payload)
            except Exception as exc:
                logger.warning("session_check_failed error=%s", exc)
                user = None
            if generation != self._generation:
                return
            self._user = user
            self._state = AuthState.AUTHENTICATED if user is not None else AuthState.UNAUTHENTICATED
            logger.info("session_checked state=%s", self._state.value)
        finally:
            if self._inflight is asyncio.current_task():
                self._inflight = None
