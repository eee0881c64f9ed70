"""Extraction of channel metadata and listing items from a channel page."""

import logging
from typing import List, Optional, Protocol, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag

from app.models.channel import ChannelMetadata
from app.models.video import RawVideoRecord
from app.services.errors import DocumentParseError

logger = logging.getLogger(__name__)

# Header region
_HEADER = "div.channel-header--content"
_HEADER_TITLE = "div.channel-header--title h1"
_HEADER_THUMB = "div.channel-header--thumb img"

# Listing items and their fields
_LISTING_ITEM = "section.channel-listing__container div.videostream.thumbnail__grid--item"
_ITEM_DURATION = "div.videostream__badge"
_ITEM_TITLE = "h3.thumbnail__title"
_ITEM_DESCRIPTION = "div.videostream__description"
_ITEM_PUBLISH_TIME = "div.videostream__data time"
_ITEM_LINK = "a.videostream__link"
_ITEM_THUMB = "img.thumbnail__image"
_ITEM_LIVE = ".videostream__status--live"


class ExtractionStrategy(Protocol):
    """Reads channel metadata and raw listing items out of a parsed page."""

    def extract(
        self, soup: BeautifulSoup, page_url: str, max_items: int = 0
    ) -> Tuple[ChannelMetadata, List[RawVideoRecord]]:
        ...


def parse_document(html: str) -> BeautifulSoup:
    """Parse *html* with lxml, raising :class:`DocumentParseError` on failure."""
    if not isinstance(html, str):
        raise DocumentParseError(f"expected page markup as text, got {type(html).__name__}")
    try:
        return BeautifulSoup(html, "lxml")
    except (ParserRejectedMarkup, ValueError) as exc:
        raise DocumentParseError(f"could not parse channel page: {exc}") from exc


def _text(node: Optional[Tag], selector: str) -> str:
    if node is None:
        return ""
    found = node.select_one(selector)
    if found is None:
        return ""
    return found.get_text().strip()


def _attr(node: Optional[Tag], selector: str, name: str) -> str:
    if node is None:
        return ""
    found = node.select_one(selector)
    if found is None:
        return ""
    value = found.get(name)
    if isinstance(value, list):  # multi-valued attributes such as class
        value = " ".join(value)
    return (value or "").strip()


def _extract_description(soup: BeautifulSoup) -> str:
    meta = soup.find("meta", attrs={"name": "description"})
    if meta and meta.get("content"):
        return str(meta["content"]).strip()
    og_desc = soup.find("meta", attrs={"property": "og:description"})
    if og_desc and og_desc.get("content"):
        return str(og_desc["content"]).strip()
    return ""


def extract_canonical(soup: BeautifulSoup, base_url: str) -> Optional[str]:
    """Return the canonical URL declared in the page, or *None* if absent."""
    link_tag = soup.find("link", rel="canonical")
    if link_tag and link_tag.get("href"):
        return urljoin(base_url, str(link_tag["href"]))

    og_url = soup.find("meta", attrs={"property": "og:url"})
    if og_url and og_url.get("content"):
        return urljoin(base_url, str(og_url["content"]))

    return None


def _absolute(url: str, page_url: str) -> str:
    return urljoin(page_url, url) if url else ""


def _extract_item(node: Tag, page_url: str) -> RawVideoRecord:
    return RawVideoRecord(
        title=_text(node, _ITEM_TITLE),
        description=_text(node, _ITEM_DESCRIPTION),
        duration_text=_text(node, _ITEM_DURATION),
        is_live=node.select_one(_ITEM_LIVE) is not None,
        publish_time_text=_attr(node, _ITEM_PUBLISH_TIME, "datetime"),
        thumbnail_url=_absolute(_attr(node, _ITEM_THUMB, "src"), page_url),
        link=_attr(node, _ITEM_LINK, "href"),
    )


class ChannelPageExtractor:
    """Selector-based extraction for the target site's channel pages."""

    def extract(
        self, soup: BeautifulSoup, page_url: str, max_items: int = 0
    ) -> Tuple[ChannelMetadata, List[RawVideoRecord]]:
        """Return the channel header metadata and up to *max_items* listing items.

        Items come back in document order; nothing is sorted or de-duplicated.
        ``max_items=0`` means no limit.
        """
        header = soup.select_one(_HEADER)
        thumbnail = _absolute(_attr(header, _HEADER_THUMB, "src"), page_url)
        metadata = ChannelMetadata(
            title=_text(header, _HEADER_TITLE),
            thumbnail_url=thumbnail or None,
            canonical_link=extract_canonical(soup, page_url) or page_url,
            description=_extract_description(soup),
        )

        records: List[RawVideoRecord] = []
        # soupsieve treats limit=0 as "no limit"
        for node in soup.select(_LISTING_ITEM, limit=max_items):
            records.append(_extract_item(node, page_url))
        if max_items and len(records) >= max_items:
            logger.info("Item limit of %d reached on %s", max_items, page_url)

        if header is None and not records:
            logger.warning("No channel header or listing items found on %s", page_url)

        return metadata, records
