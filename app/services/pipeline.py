"""Scrape-to-feed orchestration: resolve → fetch → parse → extract → normalise → assemble."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

from app.core.config import PipelineConfig
from app.models.channel import ChannelRequest
from app.models.feed import FeedIdentity, FeedModel
from app.services.assembler import assemble_feed
from app.services.errors import FetchError, FetchTimeoutError
from app.services.extractor import ChannelPageExtractor, ExtractionStrategy, parse_document
from app.services.fetcher import fetch_url
from app.services.normalizer import normalize_records
from app.services.resolver import resolve_link, resolve_link_strict

logger = logging.getLogger(__name__)


class FeedPipeline:
    """Builds one :class:`FeedModel` per call; holds no per-request state."""

    def __init__(
        self,
        config: PipelineConfig,
        extractor: Optional[ExtractionStrategy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self.extractor = extractor or ChannelPageExtractor()
        self._transport = transport

    def resolve(self, link: Optional[str]) -> ChannelRequest:
        if self.config.strict_link_prefix:
            return resolve_link_strict(link, self.config.base_url)
        return resolve_link(link, self.config.base_url)

    async def fetch(self, request: ChannelRequest) -> str:
        """Fetch the channel page, reporting every failure as a :class:`FetchError`."""
        url = request.fetch_url
        try:
            return await fetch_url(
                url,
                allowed_host=self.config.target_host,
                timeout=self.config.fetch_timeout,
                max_content_size=self.config.max_content_size,
                max_redirects=self.config.max_redirects,
                transport=self._transport,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.error("Timeout fetching %s", url)
            raise FetchTimeoutError(f"fetching {url} timed out") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("HTTP error fetching %s: %s", url, status)
            raise FetchError(f"{url} returned HTTP {status}", status_code=status) from exc
        except (httpx.HTTPError, ValueError, RuntimeError) as exc:
            logger.error("Error fetching %s: %s", url, exc)
            raise FetchError(f"could not fetch {url}: {exc}") from exc

    def build(
        self,
        request: ChannelRequest,
        html: str,
        fetched_at: datetime,
        identity: Optional[FeedIdentity] = None,
    ) -> FeedModel:
        """Run the synchronous stages on an already fetched page."""
        soup = parse_document(html)
        channel, raw_records = self.extractor.extract(
            soup, request.fetch_url, max_items=self.config.max_item_count
        )
        records = normalize_records(raw_records, self.config)
        return assemble_feed(
            channel,
            records,
            published_at=fetched_at,
            updated_at=fetched_at,
            identity=identity,
            channel_link=request.fetch_url,
        )

    async def run(self, link: Optional[str], identity: Optional[FeedIdentity] = None) -> FeedModel:
        """Build the feed for *link*.

        Raises:
            LinkError: the link is missing or unusable (nothing is fetched).
            FetchError: the page could not be fetched.
            DocumentParseError: the page could not be parsed.
            AssemblyError: an item cannot be represented in the feed.
        """
        request = self.resolve(link)
        html = await self.fetch(request)
        feed = self.build(request, html, datetime.now(timezone.utc), identity)
        logger.info(
            "Feed built",
            extra={
                "channel_path": request.channel_path,
                "item_count": len(feed.items),
                "identity": "caller" if identity else "page",
            },
        )
        return feed
