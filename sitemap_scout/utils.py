# File: sitemap_scout/utils.py
"""sitemap_scout.utils: URL helpers and the syntactic sitemap classifier."""

from __future__ import annotations

import re
from typing import List, Sequence
from urllib.parse import unquote, urlparse

from sitemap_scout.crawler.models import SitemapType
from sitemap_scout.logger import logger

__all__: Sequence[str] = (
    "is_absolute_url",
    "is_http_url",
    "strip_trailing_slashes",
    "classify_sitemap_type",
    "looks_like_sitemap_url",
    "extract_keyword",
    "remove_duplicates",
    "KEYWORD_HOMEPAGE",
    "KEYWORD_UNKNOWN",
)

KEYWORD_HOMEPAGE = "homepage"
KEYWORD_UNKNOWN = "unknown"

_SITEMAP_PATTERNS = (
    re.compile(r"\.xml$", re.IGNORECASE),
    re.compile(r"\.xml\.gz$", re.IGNORECASE),
    re.compile(r"/sitemap[^/]*\.xml", re.IGNORECASE),
    re.compile(r"/sitemap[^/]*\.txt", re.IGNORECASE),
    re.compile(r"/sitemap\.php$", re.IGNORECASE),
)

_PAGE_EXTENSION_RE = re.compile(r"\.(html|htm|php|asp|aspx|jsp|cfm)$", re.IGNORECASE)


def is_absolute_url(url: str) -> bool:
    """True for strings with a scheme and a host and no embedded whitespace."""
    if not url or any(ch.isspace() for ch in url):
        return False
    try:
        parsed = urlparse(url)
        return bool(parsed.scheme) and bool(parsed.netloc)
    except ValueError:
        return False


def is_http_url(url: str) -> bool:
    """True for absolute URLs using http or https."""
    return is_absolute_url(url) and urlparse(url).scheme.lower() in ("http", "https")


def strip_trailing_slashes(url: str) -> str:
    return url.rstrip("/")


def classify_sitemap_type(url: str) -> SitemapType:
    """``.txt`` and ``.txt.gz`` are TXT sitemaps, everything else is XML."""
    if url.endswith((".txt", ".txt.gz")):
        return SitemapType.TXT
    return SitemapType.XML


def looks_like_sitemap_url(url: str) -> bool:
    """Tell a sitemap document URL from a site root using its shape only."""
    return any(pattern.search(url) for pattern in _SITEMAP_PATTERNS)


def extract_keyword(url: str) -> str:
    """Derive a keyword from the last path segment of *url*.

    ``https://example.com/blog/my-first_post.html`` → ``"my first post"``.
    The root path gives ``"homepage"``; an unparsable URL gives ``"unknown"``.
    """
    try:
        path = unquote(urlparse(url).path)
    except ValueError as exc:
        logger.debug("Cannot extract keyword from %s: %s", url, exc)
        return KEYWORD_UNKNOWN

    path = _PAGE_EXTENSION_RE.sub("", path)
    path = path.removeprefix("/").removesuffix("/")
    path = re.sub(r"[-_]", " ", path).lower().strip()
    if not path:
        return KEYWORD_HOMEPAGE
    keyword = path.split("/")[-1].strip()
    return keyword or KEYWORD_HOMEPAGE


def remove_duplicates(urls: Sequence[str]) -> List[str]:
    """Remove duplicate URLs keeping the first occurrence."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
