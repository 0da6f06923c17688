# File: sitemap_scout/parser/robots_parser.py
"""sitemap_scout.parser.robots_parser: ``Sitemap:`` directives of robots.txt."""

from __future__ import annotations

from typing import List

from sitemap_scout.utils import is_http_url

__all__ = ("SITEMAP_DIRECTIVE", "extract_sitemaps")

SITEMAP_DIRECTIVE = "sitemap:"


def extract_sitemaps(text: str) -> List[str]:
    """Return every sitemap URL declared in robots.txt, in file order.

    Args:
        text: robots.txt body.

    Returns:
        Absolute http(s) URLs from lines starting with ``Sitemap:`` (any case).
        Other values of the directive are ignored.
    """
    sitemaps: List[str] = []
    for raw in text.splitlines():
        line = raw.strip()
        if not line.lower().startswith(SITEMAP_DIRECTIVE):
            continue
        value = line[len(SITEMAP_DIRECTIVE):].strip()
        if value and is_http_url(value):
            sitemaps.append(value)
    return sitemaps
