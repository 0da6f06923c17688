# sitemap_scout/crawler/discovery.py
"""
Discovery of the initial sitemap frontier: direct sitemap URL, robots.txt,
then the list of common sitemap paths.
"""
from __future__ import annotations

from typing import List, Sequence

from sitemap_scout.config import DEFAULT_COMMON_PATHS
from sitemap_scout.crawler.fetcher import Fetcher
from sitemap_scout.errors import NoSitemapFoundError
from sitemap_scout.logger import logger
from sitemap_scout.parser.robots_parser import extract_sitemaps
from sitemap_scout.utils import looks_like_sitemap_url, remove_duplicates, strip_trailing_slashes

__all__ = ("SitemapDiscovery",)


class SitemapDiscovery:
    """Finds the sitemap URLs a traversal starts from."""

    def __init__(self, fetcher: Fetcher, common_paths: Sequence[str] = DEFAULT_COMMON_PATHS) -> None:
        self.fetcher = fetcher
        self.common_paths = tuple(common_paths)

    async def discover(self, base_url: str) -> List[str]:
        """
        Return the ordered, unique sitemap URLs for *base_url*.

        Raises NoSitemapFoundError when robots.txt and every common path
        come up empty.
        """
        base = strip_trailing_slashes(base_url)

        if looks_like_sitemap_url(base):
            logger.info("Provided URL appears to be a direct sitemap URL: %s", base)
            return [base]

        logger.info("Attempting to discover sitemaps via robots.txt for %s", base)
        found = await self.from_robots_txt(base)

        if not found:
            logger.info("Falling back to common sitemap paths for %s", base)
            found = await self.from_common_paths(base)

        if not found:
            raise NoSitemapFoundError(
                f"Could not find any valid sitemap for {base} "
                "after checking robots.txt and common paths."
            )
        return found

    async def from_robots_txt(self, base: str) -> List[str]:
        robots_url = f"{base}/robots.txt"
        result = await self.fetcher.fetch(robots_url)
        if not result.ok:
            logger.warning("Could not fetch robots.txt for %s: %s", base, result.error_message)
            return []

        content = result.content if isinstance(result.content, str) else ""
        sitemaps = remove_duplicates(extract_sitemaps(content))
        if sitemaps:
            logger.info("Found sitemap(s) in robots.txt: %s", ", ".join(sitemaps))
        else:
            logger.warning("No Sitemap directives found in robots.txt for %s", base)
        return sitemaps

    async def from_common_paths(self, base: str) -> List[str]:
        """Probe the common paths in order; the first one with content wins."""
        for path in self.common_paths:
            candidate = f"{base}{path}"
            result = await self.fetcher.fetch(candidate)
            if result.ok and result.content:
                logger.info("Found common sitemap path: %s", candidate)
                return [candidate]
            logger.debug("Common sitemap path not found or accessible: %s", candidate)
        return []
