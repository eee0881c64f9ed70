"""Shared fixtures: channel page markup built the way the target site renders it."""

from typing import Optional

import pytest

from app.core.config import PipelineConfig

BASE_URL = "https://rumble.com"


def listing_item(
    title: str = "Episode",
    description: str = "About this episode",
    duration: str = "3:45",
    published: str = "2024-03-01T18:30:00+00:00",
    href: str = "/v123-episode.html",
    thumbnail: str = "https://cdn.example.com/thumb.jpg",
    live: bool = False,
) -> str:
    """Return the markup of one listing item; empty arguments omit the node."""
    parts = ['<div class="videostream thumbnail__grid--item">']
    if thumbnail:
        parts.append(f'<img class="thumbnail__image" src="{thumbnail}">')
    if duration:
        parts.append(f'<div class="videostream__badge">\n  {duration}\n</div>')
    if live:
        parts.append('<div class="videostream__status videostream__status--live">LIVE</div>')
    if title:
        parts.append(f'<h3 class="thumbnail__title">  {title}  </h3>')
    if description:
        parts.append(f'<div class="videostream__description">{description}</div>')
    if published:
        parts.append(
            f'<div class="videostream__data"><time datetime="{published}">Mar 1</time></div>'
        )
    if href:
        parts.append(f'<a class="videostream__link" href="{href}">watch</a>')
    parts.append("</div>")
    return "\n".join(parts)


def channel_page(
    items: Optional[list] = None,
    title: str = "Acme Channel",
    thumbnail: str = "https://cdn.example.com/acme.png",
    canonical: str = "",
    description: str = "",
) -> str:
    head = []
    if canonical:
        head.append(f'<link rel="canonical" href="{canonical}">')
    if description:
        head.append(f'<meta name="description" content="{description}">')
    header = ['<div class="channel-header--content">']
    if thumbnail:
        header.append(f'<div class="channel-header--thumb"><img src="{thumbnail}"></div>')
    header.append(f'<div class="channel-header--title"><h1>\n {title}\n</h1></div>')
    header.append("</div>")
    return (
        "<!DOCTYPE html><html><head><title>Rumble</title>"
        + "".join(head)
        + "</head><body>"
        + "".join(header)
        + '<section class="channel-listing__container">'
        + "".join(items or [])
        + "</section></body></html>"
    )


@pytest.fixture
def config() -> PipelineConfig:
    return PipelineConfig(base_url=BASE_URL)
