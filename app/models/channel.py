from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ChannelRequest(BaseModel):
    """A caller link resolved to the channel page that will be fetched."""

    model_config = ConfigDict(frozen=True)

    raw_link: str
    resolved_host: str
    channel_path: str  # "/name" or "/c/name"
    scheme: str = "https"

    @field_validator("channel_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/") or value == "/":
            raise ValueError("channel_path must be a non-empty path starting with '/'")
        return value

    @property
    def fetch_url(self) -> str:
        return f"{self.scheme}://{self.resolved_host}{self.channel_path}"


class ChannelMetadata(BaseModel):
    """Channel-level details read from the page header."""

    title: str
    canonical_link: str
    thumbnail_url: Optional[str] = None
    description: str = ""
