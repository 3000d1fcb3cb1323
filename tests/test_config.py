"""Tests for configuration settings."""

import pytest
from pydantic import ValidationError

from team_activity_db.config import Settings, SyncConfig, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings-related variables inherited from the shell."""
    for var in ("DATABASE_URL", "GITHUB_TOKEN", "ENVIRONMENT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self, clean_env):
        """Test default values are correct."""
        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./team_activity.db"
        assert settings.github_token == ""
        assert settings.environment == "development"
        assert settings.log_level == "INFO"

    def test_settings_from_env(self, clean_env):
        """Test environment variables override defaults."""
        clean_env.setenv("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
        clean_env.setenv("GITHUB_TOKEN", "test_token_123")
        clean_env.setenv("ENVIRONMENT", "production")
        clean_env.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./test.db"
        assert settings.github_token == "test_token_123"
        assert settings.environment == "production"
        assert settings.log_level == "DEBUG"

    def test_settings_environment_validation(self, clean_env):
        """Test that invalid environment value is rejected."""
        clean_env.setenv("ENVIRONMENT", "invalid")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_log_level_validation(self, clean_env):
        """Test that invalid log level is rejected."""
        clean_env.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_settings_case_insensitive(self, clean_env):
        """Test that env var names are case-insensitive."""
        clean_env.setenv("database_url", "sqlite+aiosqlite:///./lower.db")
        clean_env.setenv("GITHUB_TOKEN", "upper_token")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite+aiosqlite:///./lower.db"
        assert settings.github_token == "upper_token"

    def test_nested_sync_settings_from_env(self, clean_env):
        """Nested sync values use the double-underscore delimiter."""
        clean_env.setenv("SYNC__PAGE_DELAY_SECONDS", "0")
        clean_env.setenv("SYNC__COMMIT_BATCH_SIZE", "10")

        settings = Settings(_env_file=None)

        assert settings.sync.page_delay_seconds == 0
        assert settings.sync.commit_batch_size == 10
        assert settings.sync.page_size == 100


class TestSyncConfig:
    """Tests for SyncConfig defaults and bounds."""

    def test_defaults(self):
        """Defaults match GitHub's page cap and the fixed delays."""
        config = SyncConfig()

        assert config.page_size == 100
        assert config.page_delay_seconds == 1.0
        assert config.pr_delay_seconds == 0.5
        assert config.api_version == "2022-11-28"
        assert config.commit_batch_size == 1

    @pytest.mark.parametrize("page_size", [0, 101])
    def test_page_size_bounds(self, page_size: int):
        """Page size must stay within GitHub's 1..100 limit."""
        with pytest.raises(ValidationError):
            SyncConfig(page_size=page_size)

    def test_negative_delay_rejected(self):
        """Delays cannot be negative."""
        with pytest.raises(ValidationError):
            SyncConfig(pr_delay_seconds=-1)


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self):
        """Test that get_settings returns a Settings instance."""
        # Clear cache to ensure fresh settings
        get_settings.cache_clear()

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        # Should be the same object (cached)
        assert settings1 is settings2
