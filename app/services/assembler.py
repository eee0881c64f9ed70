"""Build the feed model from channel metadata and normalised records."""

from datetime import datetime
from typing import Iterable, Optional

from app.models.channel import ChannelMetadata
from app.models.feed import FeedIdentity, FeedItem, FeedModel
from app.models.video import NormalizedVideoRecord
from app.services.errors import AssemblyError
from app.services.normalizer import UNKNOWN_DESCRIPTION, UNKNOWN_TITLE


def to_feed_item(record: NormalizedVideoRecord) -> FeedItem:
    """Map one record to a feed item, rejecting items RSS readers cannot show."""
    if not record.title and not record.description:
        raise AssemblyError(f"item {record.link!r} has neither a title nor a description")
    return FeedItem(
        title=record.title,
        link=record.link,
        description=record.description,
        guid=record.link,
        pub_date=record.publish_time,
        duration=record.duration,
        image=record.thumbnail_url or None,
        is_live=record.is_live,
    )


def assemble_feed(
    channel: ChannelMetadata,
    records: Iterable[NormalizedVideoRecord],
    published_at: datetime,
    updated_at: datetime,
    identity: Optional[FeedIdentity] = None,
    channel_link: Optional[str] = None,
) -> FeedModel:
    """Combine *channel* and *records* into a :class:`FeedModel`.

    Exactly one source decides title, link, description and both timestamps:

    * without *identity*, the scraped page (header title, canonical link,
      meta description) and the given *published_at* / *updated_at*;
    * with *identity*, the caller: its title and description (defaulted when
      empty), *channel_link* (falling back to the canonical link) and its
      times, each falling back to the given fetch times.
    """
    if identity is None:
        title = channel.title
        link = channel.canonical_link
        description = channel.description
    else:
        title = identity.title or UNKNOWN_TITLE
        link = channel_link or channel.canonical_link
        description = identity.description or UNKNOWN_DESCRIPTION
        published_at = identity.publish_time or published_at
        updated_at = identity.updated_time or updated_at

    return FeedModel(
        title=title,
        link=link,
        description=description,
        published_at=published_at,
        updated_at=updated_at,
        image=channel.thumbnail_url or None,
        items=[to_feed_item(record) for record in records],
    )
