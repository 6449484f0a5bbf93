"""Configuration loading from environment variables."""

from __future__ import annotations

import os

from gamedesk.models.config import APIConfig, GameDeskConfig, LogConfig, RemoteConfig
from gamedesk.observability.logging import LOG_FORMATS


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"GAMEDESK_{key}", default)


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_float(key: str, default: float) -> float:
    return float(_env(key, str(default)))


def _validate_base_url(value: str) -> str:
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"Invalid remote base URL: {value}. Must start with http:// or https://")
    return value.rstrip("/")


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def _validate_log_format(value: str) -> str:
    if value.lower() not in LOG_FORMATS:
        raise ValueError(f"Invalid log format: {value}. Must be one of {LOG_FORMATS}")
    return value.lower()


def load_config() -> GameDeskConfig:
    """Load configuration from GAMEDESK_* environment variables."""
    return GameDeskConfig(
        remote=RemoteConfig(
            base_url=_validate_base_url(_env("REMOTE_BASE_URL", RemoteConfig.base_url)),
            collection=_env("REMOTE_COLLECTION", RemoteConfig.collection).strip("/"),
            timeout_seconds=max(_env_float("REMOTE_TIMEOUT", 0.0), 0.0),
        ),
        api=APIConfig(
            host=_env("API_HOST", APIConfig.host),
            port=_env_int("API_PORT", 8080, min_val=1024, max_val=65535),
            max_sessions=_env_int("API_MAX_SESSIONS", APIConfig.max_sessions, min_val=1, max_val=10000),
        ),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
            format=_validate_log_format(_env("LOG_FORMAT", "json")),
        ),
    )
