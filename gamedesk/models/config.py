"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class RemoteConfig:
    """Remote game collection configuration."""

    base_url: str = "https://690b524b6ad3beba00f46a02.mockapi.io"
    collection: str = "games"
    timeout_seconds: float = 0.0  # 0 disables the timeout


@dataclass
class APIConfig:
    """REST API configuration."""

    host: str = "127.0.0.1"
    port: int = 8080
    max_sessions: int = 256  # open edit sessions before the least recently used is closed


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "info"
    format: str = "json"  # json | console


@dataclass
class GameDeskConfig:
    """Top-level GameDesk configuration."""

    remote: RemoteConfig = field(default_factory=RemoteConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
