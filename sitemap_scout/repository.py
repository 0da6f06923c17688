# File: sitemap_scout/repository.py
"""sitemap_scout.repository: hand-off point for durable storage of run results.

The default implementation stores nothing and only logs what it was given.
Subclass :class:`ResultRepository` to persist results somewhere.
"""

from __future__ import annotations

from typing import Sequence

from sitemap_scout.crawler.models import ParsedPageData, SitemapInfo
from sitemap_scout.logger import logger

__all__ = ("ResultRepository",)


class ResultRepository:
    async def save_sitemap_info(self, sitemaps: Sequence[SitemapInfo]) -> None:
        logger.debug("Repository received %d sitemap records (not persisted)", len(sitemaps))

    async def save_extracted_pages(self, pages: Sequence[ParsedPageData]) -> None:
        logger.debug("Repository received %d page records (not persisted)", len(pages))
