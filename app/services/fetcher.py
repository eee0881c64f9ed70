import asyncio
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

MAX_CONTENT_SIZE = 10 * 1024 * 1024  # 10 MB
TIMEOUT = 10  # seconds
MAX_REDIRECTS = 10
ALLOWED_SCHEMES = {"http", "https"}
USER_AGENT = "channelcast/1.0"


def _validate_url(url: str, allowed_host: str) -> None:
    """Raise ValueError unless *url* is http(s) on *allowed_host* or one of its subdomains."""
    parsed = urlparse(url)

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValueError(f"Scheme '{parsed.scheme}' is not allowed. Use http or https.")

    hostname = (parsed.hostname or "").lower()
    if not hostname:
        raise ValueError("URL must have a valid hostname.")

    allowed = allowed_host.lower().split(":")[0]
    if hostname != allowed and not hostname.endswith("." + allowed):
        raise ValueError(f"Requests to '{hostname}' are not allowed.")


async def _fetch(
    url: str,
    allowed_host: str,
    max_content_size: int,
    max_redirects: int,
    transport: Optional[httpx.AsyncBaseTransport],
) -> str:
    _validate_url(url, allowed_host)

    current_url = url
    async with httpx.AsyncClient(
        follow_redirects=False,
        timeout=TIMEOUT,
        transport=transport,
        headers={"User-Agent": USER_AGENT},
    ) as client:
        for _ in range(max_redirects + 1):
            async with client.stream("GET", current_url) as response:
                if response.is_redirect:
                    location = response.headers.get("location", "")
                    next_url = urljoin(current_url, location)
                    _validate_url(next_url, allowed_host)
                    current_url = next_url
                    continue

                response.raise_for_status()

                content_length = response.headers.get("content-length")
                if content_length and int(content_length) > max_content_size:
                    raise RuntimeError("Response body exceeds the maximum allowed size.")

                chunks = []
                total = 0
                async for chunk in response.aiter_bytes():
                    total += len(chunk)
                    if total > max_content_size:
                        raise RuntimeError("Response body exceeds the maximum allowed size.")
                    chunks.append(chunk)

                return b"".join(chunks).decode(errors="replace")

    raise RuntimeError("Too many redirects.")


async def fetch_url(
    url: str,
    allowed_host: str,
    timeout: float = TIMEOUT,
    max_content_size: int = MAX_CONTENT_SIZE,
    max_redirects: int = MAX_REDIRECTS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Fetch *url* and return the response body as a string.

    Redirects are followed manually so that every redirect destination is
    checked against *allowed_host* before the next request is made. The whole
    exchange, redirects included, must finish within *timeout* seconds.

    Raises:
        ValueError: if the URL (or a redirect target) is not allowed.
        asyncio.TimeoutError: if *timeout* expires.
        httpx.HTTPError: on network or HTTP errors (non-2xx responses included).
        RuntimeError: if the body exceeds *max_content_size* or redirects loop.
    """
    return await asyncio.wait_for(
        _fetch(url, allowed_host, max_content_size, max_redirects, transport),
        timeout=timeout,
    )
