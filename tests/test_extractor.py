"""Tests for extractor.ChannelPageExtractor and parse_document."""

from unittest.mock import patch

import pytest

from app.services.errors import DocumentParseError
from app.services.extractor import ChannelPageExtractor, extract_canonical, parse_document
from conftest import channel_page, listing_item

_PAGE_URL = "https://rumble.com/c/acme"


def _extract(html: str, max_items: int = 0):
    return ChannelPageExtractor().extract(parse_document(html), _PAGE_URL, max_items=max_items)


class TestChannelHeader:
    def test_title_is_trimmed(self):
        channel, _ = _extract(channel_page(title="Acme Channel"))
        assert channel.title == "Acme Channel"

    def test_thumbnail(self):
        channel, _ = _extract(channel_page(thumbnail="https://cdn.example.com/acme.png"))
        assert channel.thumbnail_url == "https://cdn.example.com/acme.png"

    def test_missing_thumbnail_is_none(self):
        channel, _ = _extract(channel_page(thumbnail=""))
        assert channel.thumbnail_url is None

    def test_missing_header_yields_empty_title(self):
        channel, records = _extract("<html><body><p>nothing here</p></body></html>")
        assert channel.title == ""
        assert channel.thumbnail_url is None
        assert records == []

    def test_canonical_link_defaults_to_page_url(self):
        channel, _ = _extract(channel_page())
        assert channel.canonical_link == _PAGE_URL

    def test_canonical_link_from_markup(self):
        channel, _ = _extract(channel_page(canonical="/c/Acme"))
        assert channel.canonical_link == "https://rumble.com/c/Acme"

    def test_description_from_meta(self):
        channel, _ = _extract(channel_page(description="Videos about anvils"))
        assert channel.description == "Videos about anvils"


class TestListingItems:
    def test_fields(self):
        html = channel_page(
            [
                listing_item(
                    title="First",
                    description="Desc",
                    duration="1:02:10",
                    published="2024-03-01T18:30:00+00:00",
                    href="/v1-first.html",
                    thumbnail="https://cdn.example.com/1.jpg",
                )
            ]
        )
        _, records = _extract(html)
        assert len(records) == 1
        record = records[0]
        assert record.title == "First"
        assert record.description == "Desc"
        assert record.duration_text == "1:02:10"
        assert record.publish_time_text == "2024-03-01T18:30:00+00:00"
        assert record.link == "/v1-first.html"
        assert record.thumbnail_url == "https://cdn.example.com/1.jpg"
        assert record.is_live is False

    def test_missing_nodes_yield_empty_strings(self):
        html = channel_page(
            [listing_item(title="", description="", duration="", published="", href="", thumbnail="")]
        )
        _, records = _extract(html)
        record = records[0]
        assert record.title == ""
        assert record.description == ""
        assert record.duration_text == ""
        assert record.publish_time_text == ""
        assert record.link == ""
        assert record.thumbnail_url == ""

    def test_live_marker(self):
        _, records = _extract(channel_page([listing_item(live=True), listing_item()]))
        assert [r.is_live for r in records] == [True, False]

    def test_document_order_and_duplicates_kept(self):
        items = [
            listing_item(title="B", href="/same.html"),
            listing_item(title="A", href="/same.html"),
            listing_item(title="C", href="/other.html"),
        ]
        _, records = _extract(channel_page(items))
        assert [r.title for r in records] == ["B", "A", "C"]
        assert [r.link for r in records] == ["/same.html", "/same.html", "/other.html"]

    def test_items_outside_listing_are_ignored(self):
        html = channel_page([listing_item(title="Inside")]).replace(
            "</body>", listing_item(title="Outside") + "</body>"
        )
        _, records = _extract(html)
        assert [r.title for r in records] == ["Inside"]

    def test_max_items_keeps_first_n(self):
        items = [listing_item(title=f"Video {i}") for i in range(8)]
        _, records = _extract(channel_page(items), max_items=3)
        assert [r.title for r in records] == ["Video 0", "Video 1", "Video 2"]

    def test_zero_max_items_is_unlimited(self):
        items = [listing_item(title=f"Video {i}") for i in range(8)]
        _, records = _extract(channel_page(items), max_items=0)
        assert len(records) == 8

    def test_max_items_stops_selection(self):
        items = [listing_item(title=f"Video {i}") for i in range(8)]
        soup = parse_document(channel_page(items))
        with patch.object(soup, "select", wraps=soup.select) as select:
            _, records = ChannelPageExtractor().extract(soup, _PAGE_URL, max_items=2)
        assert len(records) == 2
        assert select.call_args.kwargs["limit"] == 2

    def test_relative_thumbnails_are_made_absolute(self):
        html = channel_page([listing_item(thumbnail="/t.jpg")], thumbnail="/a.png")
        channel, records = _extract(html)
        assert channel.thumbnail_url == "https://rumble.com/a.png"
        assert records[0].thumbnail_url == "https://rumble.com/t.jpg"


class TestParseDocument:
    def test_returns_soup(self):
        soup = parse_document("<html><body><h1>x</h1></body></html>")
        assert soup.find("h1").get_text() == "x"

    def test_rejects_non_text(self):
        with pytest.raises(DocumentParseError):
            parse_document(None)


class TestExtractCanonical:
    def test_og_url_fallback(self):
        soup = parse_document('<html><head><meta property="og:url" content="https://rumble.com/c/x"></head></html>')
        assert extract_canonical(soup, _PAGE_URL) == "https://rumble.com/c/x"

    def test_absent(self):
        assert extract_canonical(parse_document("<html></html>"), _PAGE_URL) is None
