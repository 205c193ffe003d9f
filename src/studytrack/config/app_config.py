"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml, or
falls back to built-in defaults when the file is missing. A few values
can be overridden from the environment.

Usage:
    from studytrack.config.app_config import load_app_config

    config = load_app_config()
    db_path = config.database.path
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

# Environment overrides
DB_PATH_ENV = "STUDYTRACK_DB_PATH"
DEV_SECRET = "studytrack-dev-secret-change-me-before-deploying"


@dataclass
class DatabaseConfig:
    """Where the SQLite store lives."""

    path: Path = Path("db/studytrack.db")
    busy_timeout_seconds: float = 30.0


@dataclass
class AuthConfig:
    """Bearer token settings."""

    secret_env: str | None = "STUDYTRACK_JWT_SECRET"
    algorithm: str = "HS256"
    token_ttl_minutes: int = 60 * 24

    def get_secret(self) -> str:
        """Get the signing secret from the environment, or the dev fallback."""
        if self.secret_env:
            secret = os.environ.get(self.secret_env)
            if secret:
                return secret
        return DEV_SECRET


@dataclass
class ApiConfig:
    """Paging and result-size limits."""

    default_page_size: int = 20
    max_page_size: int = 100
    featured_limit: int = 5
    search_limit: int = 10
    max_quiz_questions: int = 100


@dataclass
class AppConfig:
    """Application-wide configuration."""

    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)
    api: ApiConfig = field(default_factory=ApiConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "database": {
            "path": "db/studytrack.db",
            "busy_timeout_seconds": 30.0,
        },
        "auth": {
            "secret_env": "STUDYTRACK_JWT_SECRET",
            "algorithm": "HS256",
            "token_ttl_minutes": 1440,
        },
        "api": {
            "default_page_size": 20,
            "max_page_size": 100,
            "featured_limit": 5,
            "search_limit": 10,
            "max_quiz_questions": 100,
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    db_data = {**defaults["database"], **(data.get("database") or {})}
    db_path = os.environ.get(DB_PATH_ENV) or db_data["path"]
    database = DatabaseConfig(
        path=Path(db_path),
        busy_timeout_seconds=float(db_data["busy_timeout_seconds"]),
    )

    auth_data = {**defaults["auth"], **(data.get("auth") or {})}
    auth = AuthConfig(
        secret_env=auth_data["secret_env"],
        algorithm=auth_data["algorithm"],
        token_ttl_minutes=int(auth_data["token_ttl_minutes"]),
    )

    api_data = {**defaults["api"], **(data.get("api") or {})}
    api = ApiConfig(
        default_page_size=int(api_data["default_page_size"]),
        max_page_size=int(api_data["max_page_size"]),
        featured_limit=int(api_data["featured_limit"]),
        search_limit=int(api_data["search_limit"]),
        max_quiz_questions=int(api_data["max_quiz_questions"]),
    )

    return AppConfig(database=database, auth=auth, api=api)


def load_app_config(
    force_reload: bool = False, config_file: Path | None = None
) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.
        config_file: Alternate YAML file (bypasses the cache).

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if config_file is None and _cached_config is not None and not force_reload:
        return _cached_config

    source = config_file or CONFIG_FILE
    data: dict[str, Any]

    if source.exists():
        logger.debug("loading_app_config", source=str(source))
        data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    config = _parse_config(data)
    if config_file is None:
        _cached_config = config
    return config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
