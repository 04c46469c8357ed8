"""HTTP client for the console backend."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from console.settings import Settings


logger = logging.getLogger("vcms.api")

AUTH_COOKIE_NAME = "auth_token"


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int | None = None
    path: str | None = None

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        return self.message


def _error_message(resp: httpx.Response, fallback: str) -> str:
    try:
        body = resp.json()
    except ValueError:
        return fallback
    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        return body["error"]
    return fallback


class ConsoleApi:
    """Thin async wrapper over the backend routes used by the console."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.AsyncBaseTransport | None = None) -> "ConsoleApi":
        headers = {"Accept": "application/json"}
        if settings.auth_cookie:
            headers["Cookie"] = f"{AUTH_COOKIE_NAME}={settings.auth_cookie}"
        client = httpx.AsyncClient(
            base_url=settings.api_base_url,
            timeout=httpx.Timeout(settings.http_timeout),
            headers=headers,
            transport=transport,
        )
        return cls(client)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        start = time.perf_counter()
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("api_transport_error method=%s path=%s error=%s", method, path, exc)
            raise ApiError(code="TRANSPORT_ERROR", message=f"Request to {path} failed", path=path) from exc
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("api_request method=%s path=%s status=%s ms=%.1f", method, path, resp.status_code, elapsed_ms)
        return resp

    async def _json(self, method: str, path: str, fallback: str, **kwargs: Any) -> Any:
        resp = await self._request(method, path, **kwargs)
        if resp.status_code >= 400:
            raise ApiError(
                code="HTTP_ERROR",
                message=_error_message(resp, fallback),
                status_code=resp.status_code,
                path=path,
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ApiError(code="INVALID_RESPONSE", message=f"Invalid JSON from {path}", status_code=resp.status_code, path=path) from exc

    async def get_me(self) -> dict | None:
        """Current user, or None when the backend rejects the session."""
        resp = await self._request("GET", "/me")
        if resp.status_code == 401:
            return None
        if resp.status_code >= 400:
            raise ApiError(code="HTTP_ERROR", message=_error_message(resp, "Failed to get user"), status_code=resp.status_code, path="/me")
        return resp.json()

    async def list_repos(self) -> list:
        return await self._json("GET", "/repos", "Failed to fetch repositories")

    async def get_pages_config(self, owner: str, repo: str) -> dict:
        return await self._json("GET", f"/{owner}/{repo}/pages", "Failed to fetch pages config")

    async def get_repo_config(self, owner: str, repo: str) -> dict:
        return await self._json("GET", f"/{owner}/{repo}/config", "Failed to fetch or parse config")

    async def list_content_types(self, owner: str, repo: str) -> list:
        return await self._json("GET", f"/{owner}/{repo}/content-types", "Failed to fetch content types")

    async def create_entry(self, owner: str, repo: str, ct_slug: str, values: dict, slug: str | None = None) -> dict:
        body: dict = {"values": values}
        if slug:
            body["slug"] = slug
        return await self._json("POST", f"/{owner}/{repo}/{ct_slug}", "Failed to create content value", json=body)
