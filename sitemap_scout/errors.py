# File: sitemap_scout/errors.py
"""Exception hierarchy used across the sitemap pipeline.

Only :class:`InvalidInputError` and :class:`NoSitemapFoundError` abort a run.
Every other error is recorded on the sitemap or page it belongs to.
"""
from __future__ import annotations

from typing import Optional

__all__ = (
    "SitemapScoutError",
    "InvalidInputError",
    "NoSitemapFoundError",
    "FetchError",
    "DecompressionError",
    "MalformedContentError",
    "ReceivedHtmlInsteadOfXml",
    "MalformedXml",
    "UnsupportedFormat",
)


class SitemapScoutError(Exception):
    """Base class for all SitemapScout errors."""


class InvalidInputError(SitemapScoutError, ValueError):
    """The base URL is not an absolute http(s) URL."""


class NoSitemapFoundError(SitemapScoutError):
    """Neither robots.txt nor the common paths produced a sitemap."""


class FetchError(SitemapScoutError):
    """A GET request failed after all retries."""

    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class DecompressionError(FetchError):
    """The body of a ``.gz`` resource is not valid gzip data."""


class MalformedContentError(SitemapScoutError):
    """Fetched content cannot be interpreted as a sitemap."""


class ReceivedHtmlInsteadOfXml(MalformedContentError):
    def __init__(self, message: str = "Received HTML content instead of XML sitemap.") -> None:
        super().__init__(message)


class MalformedXml(MalformedContentError):
    pass


class UnsupportedFormat(MalformedContentError):
    def __init__(self, message: str = "Unsupported XML sitemap format or empty sitemap file.") -> None:
        super().__init__(message)
