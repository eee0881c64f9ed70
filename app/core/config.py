from functools import lru_cache
from typing import Annotated
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_BASE_URL = "https://rumble.com"
# Publish times on the listing page look like 2024-03-01T18:30:00+00:00
DEFAULT_DATE_LAYOUT = "%Y-%m-%dT%H:%M:%S%z"


class PipelineConfig(BaseModel):
    """Read-only values the feed pipeline needs for one run."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    date_layout: str = DEFAULT_DATE_LAYOUT
    max_text_length: int = 0  # 0 = unlimited
    max_item_count: int = 0  # 0 = unlimited
    fetch_timeout: float = 10.0
    max_content_size: int = 10 * 1024 * 1024
    max_redirects: int = 10
    strict_link_prefix: bool = False

    @property
    def target_host(self) -> str:
        return urlparse(self.base_url).netloc


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    base_url: str = DEFAULT_BASE_URL
    date_layout: str = DEFAULT_DATE_LAYOUT
    max_text_length: int = 0
    max_item_count: int = 0
    fetch_timeout: float = 10.0
    max_content_size: int = 10 * 1024 * 1024
    max_redirects: int = 10
    strict_link_prefix: bool = False

    cors_origins: Annotated[list[str], NoDecode] = ["*"]
    rate_limit: str = "30/minute"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="CHANNELCAST_", env_file_encoding="utf-8"
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> list[str]:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("max_text_length", "max_item_count")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("limits must be >= 0 (0 disables the limit)")
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("base_url must be an absolute http(s) URL")
        return value.rstrip("/")

    def pipeline_config(self) -> PipelineConfig:
        """Snapshot the pipeline-relevant settings into an immutable config."""
        return PipelineConfig(
            base_url=self.base_url,
            date_layout=self.date_layout,
            max_text_length=self.max_text_length,
            max_item_count=self.max_item_count,
            fetch_timeout=self.fetch_timeout,
            max_content_size=self.max_content_size,
            max_redirects=self.max_redirects,
            strict_link_prefix=self.strict_link_prefix,
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return Settings()
