"""Console route table and the auth gate run before each navigation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from session_cache import SessionCache


logger = logging.getLogger("vcms.routes")

LOGIN_PATH = "/"


@dataclass(frozen=True)
class Route:
    path: str
    name: str | None = None
    requires_auth: bool = False
    children: Tuple["Route", ...] = ()


@dataclass(frozen=True)
class RouteMatch:
    name: str | None
    path: str
    params: Dict[str, str] = field(default_factory=dict)
    requires_auth: bool = False


DEFAULT_ROUTES: Tuple[Route, ...] = (
    Route("/", name="login"),
    Route("/repos", name="repos", requires_auth=True),
    Route(
        "/dashboard/:owner/:repo",
        requires_auth=True,
        children=(
            Route("", name="content-types"),
            Route("media", name="media"),
            Route(":ctSlug", name="content-values"),
        ),
    ),
)


def _segments(path: str) -> List[str]:
    return [part for part in path.strip("/").split("/") if part]


def _flatten(routes: Tuple[Route, ...], prefix: List[str], inherited_auth: bool) -> List[Tuple[str | None, List[str], bool]]:
    flat = []
    for route in routes:
        segments = prefix + _segments(route.path)
        requires_auth = inherited_auth or route.requires_auth
        if route.children:
            flat.extend(_flatten(route.children, segments, requires_auth))
        else:
            flat.append((route.name, segments, requires_auth))
    return flat


def _match_segments(pattern: List[str], parts: List[str]) -> Dict[str, str] | None:
    if len(pattern) != len(parts):
        return None
    params: Dict[str, str] = {}
    for expected, actual in zip(pattern, parts):
        if expected.startswith(":"):
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


class RouteGuard:
    def __init__(self, session: SessionCache, routes: Tuple[Route, ...] = DEFAULT_ROUTES) -> None:
        self._session = session
        self._routes = _flatten(routes, [], False)

    def match(self, path: str) -> RouteMatch | None:
        parts = _segments(path.split("?", 1)[0])
        for name, pattern, requires_auth in self._routes:
            params = _match_segments(pattern, parts)
            if params is not None:
                return RouteMatch(name=name, path=path, params=params, requires_auth=requires_auth)
        return None

    async def before_each(self, path: str) -> str | None:
        """Return the redirect target for ``path``, or None to allow it."""
        matched = self.match(path)
        if matched is None:
            logger.debug("route_unmatched path=%s", path)
            return None
        if not matched.requires_auth:
            return None
        if await self._session.ensure_authenticated():
            return None
        logger.info("route_redirect path=%s to=%s", path, LOGIN_PATH)
        return LOGIN_PATH

    async def resolve(self, path: str) -> str:
        redirect = await self.before_each(path)
        return redirect if redirect is not None else path
