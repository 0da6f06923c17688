# sitemap_scout/crawler/models.py
"""
Data models for the SitemapScout crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from sitemap_scout.errors import FetchError

__all__ = (
    "Status",
    "SitemapType",
    "ResponseKind",
    "FetchResult",
    "SitemapInfo",
    "ParsedPageData",
    "to_camel_dict",
)


class Status(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


class SitemapType(str, Enum):
    XML = "xml"
    TXT = "txt"


class ResponseKind(str, Enum):
    TEXT = "text"
    BINARY = "binary"


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_camel_dict(obj: Any) -> Dict[str, Any]:
    """Serialize a dataclass with camelCase keys, leaving out fields that are None."""
    out: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, list):
            value = list(value)
        out[_camel(f.name)] = value
    return out


@dataclass(slots=True)
class FetchResult:
    """Outcome of a GET: either content or the error that ended the retries."""

    url: str
    content: Union[str, bytes, None] = None
    error: Optional[FetchError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def error_message(self) -> str:
        return str(self.error) if self.error is not None else ""


@dataclass(slots=True)
class SitemapInfo:
    """Status of one visited sitemap document."""

    url: str
    type: SitemapType = SitemapType.XML
    status: Status = Status.PENDING
    url_count: int = 0
    error_message: Optional[str] = None
    child_sitemaps: Optional[List[str]] = None
    media_count: Optional[int] = None

    def succeed(
        self,
        url_count: int,
        child_sitemaps: Optional[List[str]] = None,
        media_count: Optional[int] = None,
    ) -> None:
        self.status = Status.SUCCESS
        self.url_count = url_count
        self.error_message = None
        self.child_sitemaps = child_sitemaps
        self.media_count = media_count

    def fail(self, message: str) -> None:
        self.status = Status.ERROR
        self.url_count = 0
        self.error_message = message or "Unknown error"
        self.child_sitemaps = None
        self.media_count = None

    def to_dict(self) -> Dict[str, Any]:
        return to_camel_dict(self)


@dataclass(slots=True)
class ParsedPageData:
    """A leaf URL from a urlset plus whatever enrichment was requested."""

    url: str
    keyword: str
    status: Status = Status.PENDING
    title: Optional[str] = None
    h1: Optional[str] = None
    canonical_url: Optional[str] = None
    is_canonical: Optional[bool] = None
    word_count: Optional[int] = None
    internal_links: Optional[int] = None
    external_links: Optional[int] = None
    competition: Optional[int] = None
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return to_camel_dict(self)
