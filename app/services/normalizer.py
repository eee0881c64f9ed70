"""Per-record normalisation: text defaults and limits, links, durations, publish times."""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from app.core.config import PipelineConfig
from app.models.video import NormalizedVideoRecord, RawVideoRecord
from app.services.duration import parse_duration
from app.services.errors import DurationParseError

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "unknown title"
UNKNOWN_DESCRIPTION = "unknown description"
ELLIPSIS = "..."


def default_text(value: str, fallback: str) -> str:
    return value if value else fallback


def truncate_text(value: str, max_length: int) -> str:
    """Cut *value* to *max_length* characters and append :data:`ELLIPSIS`.

    The marker is not counted against the limit. ``max_length=0`` disables
    truncation.
    """
    if max_length <= 0 or len(value) <= max_length:
        return value
    return value[:max_length] + ELLIPSIS


def absolutize_link(link: str, base_url: str) -> str:
    """Prefix relative *link* with the site origin; empty links become the origin."""
    if not link:
        return base_url
    if urlparse(link).scheme.lower() in ("http", "https"):
        return link
    if link.startswith("//"):
        return f"{base_url.split(':', 1)[0]}:{link}"
    if not link.startswith("/"):
        link = "/" + link
    return base_url + link


def parse_publish_time(text: str, layout: str) -> Optional[datetime]:
    """Parse *text* with *layout*; *None* for empty text.

    Raises:
        ValueError: *text* does not match *layout*.
    """
    if not text:
        return None
    return datetime.strptime(text, layout)


def _duration(record: RawVideoRecord) -> Optional[int]:
    if not record.duration_text:
        return None
    try:
        return parse_duration(record.duration_text)
    except DurationParseError as exc:
        logger.warning(
            "Unparseable duration, using 0",
            extra={"link": record.link, "duration_text": record.duration_text, "error": str(exc)},
        )
        return 0


def _publish_time(record: RawVideoRecord, layout: str) -> Optional[datetime]:
    try:
        return parse_publish_time(record.publish_time_text, layout)
    except ValueError as exc:
        logger.warning(
            "Unparseable publish time, leaving it unset",
            extra={"link": record.link, "publish_time_text": record.publish_time_text, "error": str(exc)},
        )
        return None


def normalize_record(record: RawVideoRecord, config: PipelineConfig) -> NormalizedVideoRecord:
    """Return a :class:`NormalizedVideoRecord` for *record*.

    Duration and publish-time failures never raise; they are logged and the
    field is defaulted (``0`` seconds, no publish time).
    """
    title = truncate_text(default_text(record.title, UNKNOWN_TITLE), config.max_text_length)
    description = truncate_text(
        default_text(record.description, UNKNOWN_DESCRIPTION), config.max_text_length
    )
    return NormalizedVideoRecord(
        title=title,
        description=description,
        duration_text=record.duration_text,
        is_live=record.is_live,
        publish_time_text=record.publish_time_text,
        thumbnail_url=record.thumbnail_url,
        link=absolutize_link(record.link, config.base_url),
        duration=_duration(record),
        publish_time=_publish_time(record, config.date_layout),
    )


def normalize_records(
    records: Iterable[RawVideoRecord], config: PipelineConfig
) -> List[NormalizedVideoRecord]:
    """Normalise *records* in order, keeping at most ``config.max_item_count`` (0 = all)."""
    normalized: List[NormalizedVideoRecord] = []
    for record in records:
        if config.max_item_count and len(normalized) >= config.max_item_count:
            break
        normalized.append(normalize_record(record, config))
    return normalized
