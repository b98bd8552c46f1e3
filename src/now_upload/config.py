"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Now API
    now_token: str = Field(default="", repr=False)
    now_api_url: str = "https://api.zeit.co"

    # Upload settings
    upload_chunk_size: int = Field(default=64 * 1024, gt=0)
    upload_max_concurrent: int = Field(default=3, gt=0)

    # HTTP client timeouts (seconds)
    http_timeout: float = 300.0
    http_connect_timeout: float = 30.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def files_url(self) -> str:
        return f"{self.now_api_url.rstrip('/')}/v2/now/files"


def get_settings(**overrides: object) -> Settings:
    """Create a Settings instance, allowing overrides for testing."""
    return Settings(**overrides)  # type: ignore[arg-type]
