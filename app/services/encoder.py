"""Serialisation of a :class:`FeedModel` to an RSS 2.0 podcast document."""

from datetime import datetime, timezone
from email.utils import format_datetime

from lxml import etree

from app.models.feed import FeedItem, FeedModel
from app.services.duration import format_duration
from app.services.errors import EncodeError

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
GENERATOR = "channelcast"
MEDIA_TYPE = "application/rss+xml; charset=utf-8"

_ITUNES = "{%s}" % ITUNES_NS


def _rfc2822(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return format_datetime(value.astimezone(timezone.utc))


def _sub(parent: etree._Element, tag: str, text: str) -> etree._Element:
    element = etree.SubElement(parent, tag)
    element.text = text
    return element


def _encode_item(channel: etree._Element, item: FeedItem) -> None:
    node = etree.SubElement(channel, "item")
    _sub(node, "title", item.title)
    _sub(node, "link", item.link)
    _sub(node, "description", item.description)
    guid = _sub(node, "guid", item.guid)
    guid.set("isPermaLink", "true" if item.guid.startswith(("http://", "https://")) else "false")
    if item.pub_date is not None:
        _sub(node, "pubDate", _rfc2822(item.pub_date))
    if item.duration is not None:
        _sub(node, _ITUNES + "duration", format_duration(item.duration))
    if item.image:
        etree.SubElement(node, _ITUNES + "image").set("href", item.image)
    # item.is_live has no RSS/iTunes representation


def encode_feed(feed: FeedModel) -> bytes:
    """Return *feed* as UTF-8 RSS XML.

    Raises:
        EncodeError: a value cannot be represented in XML (e.g. control characters).
    """
    try:
        rss = etree.Element("rss", nsmap={"itunes": ITUNES_NS})
        rss.set("version", "2.0")
        channel = etree.SubElement(rss, "channel")
        _sub(channel, "title", feed.title)
        _sub(channel, "link", feed.link)
        _sub(channel, "description", feed.description)
        _sub(channel, "generator", GENERATOR)
        _sub(channel, "pubDate", _rfc2822(feed.published_at))
        _sub(channel, "lastBuildDate", _rfc2822(feed.updated_at))
        if feed.image:
            image = etree.SubElement(channel, "image")
            _sub(image, "url", feed.image)
            _sub(image, "title", feed.title)
            _sub(image, "link", feed.link)
            etree.SubElement(channel, _ITUNES + "image").set("href", feed.image)

        for item in feed.items:
            _encode_item(channel, item)

        return etree.tostring(rss, xml_declaration=True, encoding="UTF-8", pretty_print=True)
    except (ValueError, TypeError, etree.LxmlError) as exc:
        raise EncodeError(f"could not encode feed {feed.link!r}: {exc}") from exc
