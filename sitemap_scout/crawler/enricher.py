# sitemap_scout/crawler/enricher.py
"""
Page enrichment: one HTML fetch per leaf URL, fields filled per ExtractionSettings.
"""
from __future__ import annotations

import asyncio
from typing import List, Sequence

from sitemap_scout.config import ExtractionSettings
from sitemap_scout.crawler.fetcher import Fetcher
from sitemap_scout.crawler.models import ParsedPageData, ResponseKind, Status
from sitemap_scout.logger import logger
from sitemap_scout.parser.html_parser import parse_html
from sitemap_scout.utils import extract_keyword

__all__ = ("PageEnricher",)


class PageEnricher:
    """Builds :class:`ParsedPageData` records, fetching pages in fixed-size batches."""

    def __init__(self, fetcher: Fetcher, batch_size: int = 10) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.fetcher = fetcher
        self.batch_size = batch_size

    async def extract_page_data(self, url: str, settings: ExtractionSettings) -> ParsedPageData:
        page = ParsedPageData(url=url, keyword=extract_keyword(url))

        # Nothing to measure: skip the network round-trip entirely.
        if not settings.needs_page_fetch:
            page.status = Status.SUCCESS
            return page

        try:
            result = await self.fetcher.fetch(url, ResponseKind.TEXT)
        except Exception as exc:
            logger.error("Error fetching page %s: %s", url, exc)
            page.status = Status.ERROR
            page.error_message = str(exc) or type(exc).__name__
            return page
        if not result.ok:
            page.status = Status.ERROR
            page.error_message = result.error_message
            return page

        content = result.content
        html = content if isinstance(content, str) else (content or b"").decode("utf-8", errors="replace")

        try:
            doc = parse_html(url, html)

            if settings.extract_title_h1:
                page.title = doc.title()
                page.h1 = doc.h1()

            if settings.check_canonical:
                canonical = doc.canonical()
                if canonical:
                    page.canonical_url = canonical
                    page.is_canonical = canonical == url
                else:
                    page.is_canonical = True

            if settings.count_words:
                page.word_count = doc.word_count()

            if settings.count_internal_and_external_links:
                page.internal_links, page.external_links = doc.link_counts()

            if settings.estimate_competition:
                page.competition = doc.competition_signals().score()
        except Exception as exc:
            logger.error("Error extracting page data for %s: %s", url, exc)
            page.status = Status.ERROR
            page.error_message = str(exc) or type(exc).__name__
            return page

        page.status = Status.SUCCESS
        return page

    async def extract_batch(self, urls: Sequence[str], settings: ExtractionSettings) -> List[ParsedPageData]:
        """Enrich *urls* in chunks of ``batch_size``; output keeps input order."""
        results: List[ParsedPageData] = []
        for start in range(0, len(urls), self.batch_size):
            batch = urls[start:start + self.batch_size]
            results.extend(
                await asyncio.gather(*(self.extract_page_data(url, settings) for url in batch))
            )
        logger.debug("Enriched %d pages", len(results))
        return results
