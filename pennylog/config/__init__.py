"""Configuration package."""

from pennylog.config.settings import (
    AppConfig,
    AppSettings,
    StorageSettings,
    get_config,
    validate_all_config,
)

__all__ = [
    "AppConfig",
    "AppSettings",
    "StorageSettings",
    "get_config",
    "validate_all_config",
]
