"""Configuration package for StudyTrack."""

from studytrack.config.app_config import (
    ApiConfig,
    AppConfig,
    AuthConfig,
    DatabaseConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "ApiConfig",
    "AppConfig",
    "AuthConfig",
    "DatabaseConfig",
    "clear_config_cache",
    "load_app_config",
]
