from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.feed import FeedIdentity


class FeedRequest(BaseModel):
    """Parameters of a feed request.

    Supplying any of ``title``, ``description``, ``publish_time`` or
    ``updated_time`` makes the caller authoritative for the feed identity:
    all four then come from the request (missing ones are defaulted) and
    none from the scraped page.
    """

    link: Optional[str] = Field(
        default=None,
        description="Channel link, e.g. https://rumble.com/c/acme/videos. A bare host is accepted.",
        examples=["https://rumble.com/c/acme", "rumble.com/acme"],
    )
    title: Optional[str] = Field(default=None, description="Feed title override.")
    description: Optional[str] = Field(default=None, description="Feed description override.")
    publish_time: Optional[datetime] = Field(default=None, description="Feed pubDate override.")
    updated_time: Optional[datetime] = Field(
        default=None, description="Feed lastBuildDate override."
    )

    def identity(self) -> Optional[FeedIdentity]:
        """Return the caller identity, or *None* when the page is authoritative."""
        fields = (self.title, self.description, self.publish_time, self.updated_time)
        # Empty query values such as "?title=" count as not supplied
        if not any(fields):
            return None
        return FeedIdentity(
            title=self.title or "",
            description=self.description or "",
            publish_time=self.publish_time,
            updated_time=self.updated_time,
        )
