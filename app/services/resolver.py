"""Turn a caller-supplied link into the channel page to fetch."""

from typing import Optional
from urllib.parse import urlparse, ParseResult

from app.models.channel import ChannelRequest
from app.services.errors import (
    ChannelNotFoundError,
    MissingLinkError,
    UnparseableLinkError,
    WrongHostError,
)

# Path marker for custom channel URLs: /c/<name>
_CUSTOM_CHANNEL_MARKER = "c"


def _parse(link: str) -> ParseResult:
    try:
        parsed = urlparse(link)
        # Accessing .port validates the netloc (raises on e.g. "host:abc")
        parsed.port
    except ValueError as exc:
        raise UnparseableLinkError(link) from exc
    return parsed


def _channel_path(path: str) -> Optional[str]:
    """Return "/name" or "/c/name" for *path*, or *None* if there is no channel in it."""
    segments = path.split("/")
    if len(segments) < 2 or segments[0] != "":
        return None

    if len(segments) == 2:
        name = segments[1]
        return f"/{name}" if name else None

    if segments[1] == _CUSTOM_CHANNEL_MARKER:
        name = segments[2]
        return "/".join(segments[:3]) if name else None

    name = segments[1]
    return f"/{name}" if name else None


def resolve_link(raw: Optional[str], base_url: str) -> ChannelRequest:
    """Resolve *raw* into a :class:`ChannelRequest` for the site at *base_url*.

    Accepts full URLs as well as links without a scheme
    (``rumble.com/c/acme/videos``). ``/c/<name>`` links keep the ``/c/``
    prefix; any other link resolves to its first path segment.

    Raises:
        MissingLinkError: *raw* is empty or missing.
        UnparseableLinkError: *raw* is not a URL, even with ``https://`` prepended.
        WrongHostError: the link points at a different host.
        ChannelNotFoundError: the path contains no channel name.
    """
    link = (raw or "").strip()
    if not link:
        raise MissingLinkError()

    base = urlparse(base_url)
    parsed = _parse(link)
    if not parsed.scheme or not parsed.netloc:
        # Scheme inference happens once; a second failure is final.
        prefix = "https:" if link.startswith("//") else "https://"
        parsed = _parse(prefix + link)
        if not parsed.netloc:
            raise UnparseableLinkError(link)

    host = parsed.netloc.lower()
    if host != base.netloc.lower():
        raise WrongHostError(parsed.netloc, base.netloc)

    channel_path = _channel_path(parsed.path)
    if not channel_path:
        raise ChannelNotFoundError(link)

    return ChannelRequest(
        raw_link=link,
        resolved_host=base.netloc,
        channel_path=channel_path,
        scheme=base.scheme,
    )


def resolve_link_strict(raw: Optional[str], base_url: str) -> ChannelRequest:
    """Legacy resolver: the link must start with *base_url* verbatim.

    The remainder after the prefix is used as the channel path unchanged
    (query string and fragment dropped).
    """
    link = (raw or "").strip()
    if not link:
        raise MissingLinkError()

    parts = link.split(base_url)
    if len(parts) != 2 or parts[0] != "":
        base_host = urlparse(base_url).netloc
        raise WrongHostError(_parse(link).netloc or link, base_host)

    channel_path = _parse(parts[1]).path
    if not channel_path.startswith("/") or channel_path == "/":
        raise ChannelNotFoundError(link)

    base = urlparse(base_url)
    return ChannelRequest(
        raw_link=link,
        resolved_host=base.netloc,
        channel_path=channel_path,
        scheme=base.scheme,
    )
