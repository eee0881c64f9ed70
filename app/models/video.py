from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RawVideoRecord(BaseModel):
    """One listing item exactly as found in the markup (missing nodes -> "")."""

    title: str = ""
    description: str = ""
    duration_text: str = ""
    is_live: bool = False
    publish_time_text: str = ""
    thumbnail_url: str = ""
    link: str = ""


class NormalizedVideoRecord(RawVideoRecord):
    """A listing item ready to become a feed item.

    ``duration`` is ``None`` when the page showed no duration badge and ``0``
    when the badge could not be parsed. ``publish_time`` is ``None`` when no
    publish time is known.
    """

    duration: Optional[int] = None
    publish_time: Optional[datetime] = None
