"""Tests for environment-driven configuration."""

import pytest
from pydantic import ValidationError

from pennylog.config import AppSettings, StorageSettings, get_config, validate_all_config


@pytest.fixture(autouse=True)
def fresh_config():
    get_config.cache_clear()
    yield
    get_config.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        """Each browser keeps its own data unless a backend is chosen."""
        monkeypatch.delenv("PENNYLOG_STORAGE_BACKEND", raising=False)
        settings = StorageSettings(_env_file=None)
        assert settings.backend == "cookie"
        assert settings.cookie_path == "/"
        assert settings.cookie_lifetime_years == 1
        assert settings.finance_data_key == "financeData"
        assert settings.settings_key == "financeSettings"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PENNYLOG_STORAGE_BACKEND", "file")
        assert StorageSettings(_env_file=None).backend == "file"

    def test_unknown_backend_rejected(self):
        with pytest.raises(ValidationError):
            StorageSettings(backend="sheets", _env_file=None)


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_format_validated(self):
        with pytest.raises(ValidationError):
            AppSettings(log_format="xml", _env_file=None)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PENNYLOG_SELECTABLE_YEARS", "5")
        assert AppSettings(_env_file=None).selectable_years == 5


class TestValidateAllConfig:
    """Tests for validate_all_config."""

    def test_all_valid(self, monkeypatch):
        monkeypatch.delenv("PENNYLOG_STORAGE_BACKEND", raising=False)
        monkeypatch.delenv("PENNYLOG_LOG_LEVEL", raising=False)
        results = validate_all_config()
        assert results["storage"] is True
        assert results["app"] is True

    def test_reports_bad_section(self, monkeypatch):
        monkeypatch.setenv("PENNYLOG_LOG_LEVEL", "LOUD")
        results = validate_all_config()
        assert results["app"] is False
        assert "app_error" in results
        assert results["storage"] is True


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
