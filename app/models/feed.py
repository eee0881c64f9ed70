from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class FeedIdentity(BaseModel):
    """Caller-supplied feed identity; when given it replaces the scraped one."""

    title: str = ""
    description: str = ""
    publish_time: Optional[datetime] = None
    updated_time: Optional[datetime] = None


class FeedItem(BaseModel):
    title: str
    link: str
    description: str
    guid: str
    pub_date: Optional[datetime] = None
    duration: Optional[int] = None  # seconds
    image: Optional[str] = None
    # Not representable in RSS/iTunes yet; kept for consumers of the model.
    is_live: bool = False


class FeedModel(BaseModel):
    """Format-agnostic feed handed to the encoder."""

    title: str
    link: str
    description: str
    published_at: datetime
    updated_at: datetime
    image: Optional[str] = None
    items: List[FeedItem] = []
