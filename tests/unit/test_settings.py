"""
Tests for Settings configuration class.
"""

from pathlib import Path

from doc2markdown.config import Settings, settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_instance_exists(self):
        """Test that global settings instance exists."""
        assert settings is not None
        assert isinstance(settings, Settings)

    def test_listing_defaults(self):
        """Test folder and block listing defaults."""
        fresh = Settings(_env_file=None)
        assert fresh.folder_page_size == 200
        assert fresh.folder_page_count == 3
        assert fresh.block_page_size == 500
        assert fresh.token_refresh_margin == 3.0

    def test_env_override(self, monkeypatch):
        """Test environment variables override defaults case-insensitively."""
        monkeypatch.setenv("FEISHU_APP_ID", "cli_env")
        monkeypatch.setenv("feishu_app_secret", "env-secret")
        monkeypatch.setenv("RATE_LIMIT", "2.5")

        fresh = Settings(_env_file=None)

        assert fresh.feishu_app_id == "cli_env"
        assert fresh.feishu_app_secret == "env-secret"
        assert fresh.rate_limit == 2.5
        assert fresh.has_credentials

    def test_missing_credentials(self, monkeypatch):
        """Test has_credentials is false without an app id."""
        monkeypatch.delenv("FEISHU_APP_ID", raising=False)
        monkeypatch.delenv("FEISHU_APP_SECRET", raising=False)
        assert not Settings(_env_file=None).has_credentials

    def test_resolve_image_dir(self, tmp_path):
        """Test image directory falls back to the working directory."""
        assert Settings(_env_file=None, image_dir=tmp_path).resolve_image_dir() == tmp_path
        assert Settings(_env_file=None, image_dir=None).resolve_image_dir() == Path.cwd()

