from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List
from urllib.parse import urlparse

from .errors import ConfigError


@dataclass(frozen=True)
class Settings:
    """
    Application settings loaded from environment variables.

    Env vars:
    - PORT / HOST: listening address of the todo service (default 0.0.0.0:3000)
    - DATABASE_URL: store connection string, 'sqlite:///<path>' or 'memory://'.
      When set it takes precedence over PERSISTENCE_BACKEND and SQLITE_DB_PATH.
    - PERSISTENCE_BACKEND: 'sqlite' (default) or 'memory'
    - SQLITE_DB_PATH: path to sqlite db file. Default './data/todos.db'
    - CORS_ALLOW_ORIGINS: comma-separated list of allowed origins; '*' by default
    - LOG_LEVEL: debug, info (default), warning or error
    - LOG_FORMAT: 'console' (default) or 'json'
    """

    host: str
    port: int
    persistence_backend: str
    sqlite_db_path: str
    cors_allow_origins: List[str]
    log_level: str
    log_format: str


_BACKENDS = {"memory", "sqlite"}
_LOG_LEVELS = {"debug", "info", "warning", "error"}


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name, default)
    if value is None or value == "":
        return default
    return value


def _parse_port(name: str, value: str) -> int:
    try:
        port = int(value.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a valid port number (1-65535)") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"{name} must be a valid port number (1-65535)")
    return port


def _parse_origins(origins_value: str) -> List[str]:
    """
    Parse CORS origins from env. Supports:
    - '*' to allow all origins
    - Comma-separated list of origins
    """
    value = origins_value.strip()
    if value == "*":
        return ["*"]
    return [o.strip() for o in value.split(",") if o.strip()]


def _parse_database_url(url: str) -> tuple[str, str]:
    """Split a DATABASE_URL into (backend, sqlite path)."""
    if url == "memory://" or url == "memory":
        return "memory", ""
    if url.startswith("sqlite:///"):
        path = url[len("sqlite:///"):]
        if not path:
            raise ConfigError("DATABASE_URL must name a database file, e.g. sqlite:///./data/todos.db")
        return "sqlite", path
    raise ConfigError(f"Unsupported DATABASE_URL: {url!r} (expected sqlite:///<path> or memory://)")


def _validate_url(name: str, value: str) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigError(f"{name} must be a valid URL")
    return value.rstrip("/")


# PUBLIC_INTERFACE
def get_settings() -> Settings:
    """Return application settings loaded from environment variables."""
    backend = _get_env("PERSISTENCE_BACKEND", "sqlite").strip().lower()
    sqlite_path = _get_env("SQLITE_DB_PATH", "./data/todos.db").strip()

    database_url = os.getenv("DATABASE_URL", "").strip()
    if database_url:
        backend, url_path = _parse_database_url(database_url)
        sqlite_path = url_path or sqlite_path

    if backend not in _BACKENDS:
        raise ConfigError(f"PERSISTENCE_BACKEND must be one of {sorted(_BACKENDS)}, got {backend!r}")

    log_level = _get_env("LOG_LEVEL", "info").strip().lower()
    if log_level == "warn":
        log_level = "warning"
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}, got {log_level!r}")

    log_format = _get_env("LOG_FORMAT", "console").strip().lower()
    if log_format not in {"console", "json"}:
        raise ConfigError(f"LOG_FORMAT must be 'console' or 'json', got {log_format!r}")

    return Settings(
        host=_get_env("HOST", "0.0.0.0").strip(),
        port=_parse_port("PORT", _get_env("PORT", "3000")),
        persistence_backend=backend,
        sqlite_db_path=sqlite_path,
        cors_allow_origins=_parse_origins(_get_env("CORS_ALLOW_ORIGINS", "*")),
        log_level=log_level,
        log_format=log_format,
    )


@dataclass(frozen=True)
class McpSettings:
    """
    Settings read only by the MCP adapter. They are validated when the adapter
    starts, not when the todo service does.

    Env vars:
    - TODO_SERVICE_URL: base URL the MCP adapter uses to reach the todo service
    - MCP_SERVER_PORT: listening port of the MCP adapter (default 3001)
    """

    todo_service_url: str
    mcp_server_port: int


# PUBLIC_INTERFACE
def get_mcp_settings() -> McpSettings:
    """Return the MCP adapter settings loaded from environment variables."""
    return McpSettings(
        todo_service_url=_validate_url(
            "TODO_SERVICE_URL", _get_env("TODO_SERVICE_URL", "http://localhost:3000").strip()
        ),
        mcp_server_port=_parse_port("MCP_SERVER_PORT", _get_env("MCP_SERVER_PORT", "3001")),
    )
