"""
Configuration Management for Pennylog

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All runtime configuration is centralized here.
This is NOT the user's Settings document (currency, budgets, categories);
that one is edited in the app and persisted through the store. This
module only decides how the app runs: which storage backend, where files
go, how logs are rendered.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Persistent key/value store configuration."""

    model_config = SettingsConfigDict(
        env_prefix="PENNYLOG_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="cookie",
        pattern="^(cookie|file|memory)$",
        description="Which store backs the finance documents; file is shared by every session"
    )
    data_dir: str = Field(
        default="data",
        description="Directory for the file backend"
    )

    # Cookie backend
    cookie_path: str = Field(
        default="/",
        description="Path attribute of written cookies"
    )
    cookie_lifetime_years: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Cookie expiry, in calendar years from the write"
    )

    # Keys of the two persisted documents
    finance_data_key: str = Field(
        default="financeData",
        description="Key holding the entry lists"
    )
    settings_key: str = Field(
        default="financeSettings",
        description="Key holding the user's settings"
    )


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="PENNYLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level written to the log"
    )
    log_format: str = Field(
        default="json",
        pattern="^(json|console)$",
        description="Render log lines as JSON or for a terminal"
    )

    # Dashboard
    selectable_years: int = Field(
        default=3,
        ge=1,
        le=50,
        description="How many years (back from the current one) the period picker offers"
    )


class AppConfig(BaseSettings):
    """
    Root configuration container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_config() -> AppConfig:
    """
    Get application configuration (cached).

    Call get_config.cache_clear() to reload if needed.
    """
    return AppConfig()


def validate_all_config() -> dict[str, bool]:
    """
    Validate all configuration sections load.

    Returns a dict of {section_name: is_valid}, plus
    {section_name}_error entries for the failures.
    """
    results = {}

    config = get_config()

    sections = {
        "storage": lambda: config.storage,
        "app": lambda: config.app,
    }
    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
