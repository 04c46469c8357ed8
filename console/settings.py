"""Environment-driven settings for the console runtime."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_str(name: str, default: str) -> str:
    return os.getenv(name, "").strip() or default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be > 0")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < 1:
        raise ValueError(f"{name} must be >= 1")
    return value


@dataclass(frozen=True)
class Settings:
    api_base_url: str = "http://localhost:8080/api"
    http_timeout: float = 20.0
    repo_cache_size: int = 1
    log_level: str = "INFO"
    auth_cookie: str | None = None


def load_settings() -> Settings:
    return Settings(
        api_base_url=_env_str("VCMS_API_BASE_URL", Settings.api_base_url).rstrip("/"),
        http_timeout=_env_float("VCMS_HTTP_TIMEOUT", Settings.http_timeout),
        repo_cache_size=_env_int("VCMS_REPO_CACHE_SIZE", Settings.repo_cache_size),
        log_level=_env_str("VCMS_LOG_LEVEL", Settings.log_level).upper(),
        auth_cookie=os.getenv("VCMS_AUTH_COOKIE", "").strip() or None,
    )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
