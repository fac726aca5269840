"""
Configuration module using pydantic-settings.

All configuration loaded from environment variables with sensible defaults.
"""

from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Load from .env file or environment variables.
    """

    # Feishu credentials
    feishu_app_id: str = ""
    feishu_app_secret: str = ""
    feishu_base_url: str = "https://open.feishu.cn"

    # HTTP settings
    request_timeout: int = 30  # Seconds per request
    max_retries: int = 3
    retry_min_wait: float = 1.0
    retry_max_wait: float = 30.0
    rate_limit: float = 5.0  # Requests per second
    token_refresh_margin: float = 3.0  # Seconds subtracted from token lifetime

    # Listing settings
    folder_page_size: int = 200
    folder_page_count: int = 3  # Max folder pages fetched per batch
    block_page_size: int = 500

    # Output directories
    output_dir: Path = Path("output")
    image_dir: Optional[Path] = None  # Defaults to the current working directory

    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def has_credentials(self) -> bool:
        """Whether both app id and app secret are configured"""
        return bool(self.feishu_app_id and self.feishu_app_secret)

    def resolve_image_dir(self) -> Path:
        """Directory under which per-document image folders are created"""
        return Path(self.image_dir) if self.image_dir else Path.cwd()


# Global settings instance
settings = Settings()
