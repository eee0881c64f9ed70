"""Error conditions raised by the feed pipeline.

The router is the only place that turns these into HTTP responses:

* :class:`LinkError` subclasses are caused by the caller's input (400).
* :class:`FetchError` covers upstream failures (502, or 504 on timeout).
* :class:`DocumentParseError` means no records could be produced (502).
* :class:`AssemblyError` / :class:`EncodeError` are internal failures (500).

:class:`DurationParseError` is raised by the duration parser but is treated
as non-fatal per item by the normalizer.
"""

from typing import Optional


class FeedError(Exception):
    """Base class for every condition the pipeline reports."""


class LinkError(FeedError, ValueError):
    """The caller-supplied channel link cannot be used."""


class MissingLinkError(LinkError):
    def __init__(self) -> None:
        super().__init__("link is required")


class UnparseableLinkError(LinkError):
    def __init__(self, link: str) -> None:
        super().__init__(f"link {link!r} is not a valid URL")
        self.link = link


class WrongHostError(LinkError):
    def __init__(self, host: str, expected: str) -> None:
        super().__init__(f"link host {host!r} is not allowed, expected {expected!r}")
        self.host = host
        self.expected = expected


class ChannelNotFoundError(LinkError):
    def __init__(self, link: str) -> None:
        super().__init__(f"no channel found in link {link!r}")
        self.link = link


class FetchError(FeedError, RuntimeError):
    """The channel page could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class FetchTimeoutError(FetchError):
    pass


class DocumentParseError(FeedError):
    """The fetched body could not be turned into a document tree."""


class DurationParseError(FeedError, ValueError):
    pass


class AssemblyError(FeedError):
    pass


class EncodeError(FeedError):
    pass
