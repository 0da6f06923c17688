# === FILE: sitemap_scout/crawler/crawler.py ===
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Set, Tuple

from sitemap_scout.config import ExtractionSettings
from sitemap_scout.crawler.enricher import PageEnricher
from sitemap_scout.crawler.fetcher import Fetcher
from sitemap_scout.crawler.models import ParsedPageData, SitemapInfo, SitemapType
from sitemap_scout.errors import FetchError, SitemapScoutError
from sitemap_scout.logger import logger
from sitemap_scout.parser.sitemap_parser import (
    MultimediaResult,
    SitemapIndexResult,
    UrlsetResult,
    parse_txt,
    parse_xml,
)
from sitemap_scout.utils import classify_sitemap_type

__all__ = ("SitemapCrawler", "SitemapOutcome")


@dataclass(slots=True)
class SitemapOutcome:
    """What processing one sitemap document produced."""

    info: SitemapInfo
    child_sitemaps: List[str] = field(default_factory=list)
    leaf_urls: List[str] = field(default_factory=list)


class SitemapCrawler:
    """Breadth-first walk over sitemap documents.

    The queue, the seen-set and the accumulators belong to a single
    :meth:`crawl` call. A failing sitemap is recorded and the walk goes on.
    """

    def __init__(self, fetcher: Fetcher, enricher: PageEnricher, dedupe_pages: bool = False) -> None:
        self.fetcher = fetcher
        self.enricher = enricher
        self.dedupe_pages = dedupe_pages

    async def crawl(
        self, frontier: Iterable[str], settings: ExtractionSettings
    ) -> Tuple[List[SitemapInfo], List[ParsedPageData]]:
        start = time.monotonic()
        queue: Deque[str] = deque(frontier)
        seen: Set[str] = set()
        seen_pages: Set[str] = set()
        sitemaps: List[SitemapInfo] = []
        pages: List[ParsedPageData] = []

        while queue:
            url = queue.popleft()
            if url in seen:
                continue
            seen.add(url)

            logger.info("Processing sitemap: %s", url)
            outcome = await self.process_sitemap(url, settings)
            sitemaps.append(outcome.info)

            for child in outcome.child_sitemaps:
                if child not in seen:
                    queue.append(child)

            leaves = outcome.leaf_urls
            if self.dedupe_pages:
                leaves = [u for u in dict.fromkeys(leaves) if u not in seen_pages]
                seen_pages.update(leaves)
            if leaves:
                pages.extend(await self.enricher.extract_batch(leaves, settings))

        duration = time.monotonic() - start
        logger.info(
            "Finished: %d sitemaps, %d pages in %.2f s", len(sitemaps), len(pages), duration
        )
        return sitemaps, pages

    async def process_sitemap(self, url: str, settings: ExtractionSettings) -> SitemapOutcome:
        """Fetch and parse one sitemap. Errors end up in ``outcome.info``."""
        info = SitemapInfo(url=url, type=classify_sitemap_type(url))
        outcome = SitemapOutcome(info=info)
        try:
            content = await self._fetch_text(url)

            if info.type is SitemapType.TXT:
                outcome.leaf_urls = parse_txt(content)
                info.succeed(len(outcome.leaf_urls))
                logger.info("Found %d URLs in TXT sitemap: %s", info.url_count, url)
                return outcome

            parsed = parse_xml(content, parse_multimedia=settings.parse_multimedia_sitemaps)
            if isinstance(parsed, SitemapIndexResult):
                outcome.child_sitemaps = list(parsed.sitemaps)
                info.succeed(len(parsed.sitemaps), child_sitemaps=list(parsed.sitemaps))
                logger.info("Discovered %d child sitemaps in index: %s", info.url_count, url)
            elif isinstance(parsed, UrlsetResult):
                outcome.leaf_urls = list(parsed.urls)
                info.succeed(len(parsed.urls), media_count=len(parsed.media_urls) or None)
                logger.info("Found %d URLs in sitemap: %s", info.url_count, url)
            elif isinstance(parsed, MultimediaResult):
                info.succeed(len(parsed.media_urls), media_count=len(parsed.media_urls))
                logger.info("Found %d media URLs in multimedia sitemap: %s", info.url_count, url)
        except SitemapScoutError as exc:
            logger.error("Error processing sitemap %s: %s", url, exc)
            outcome.child_sitemaps = []
            outcome.leaf_urls = []
            info.fail(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error processing sitemap %s", url)
            outcome.child_sitemaps = []
            outcome.leaf_urls = []
            info.fail(str(exc) or type(exc).__name__)
        return outcome

    async def _fetch_text(self, url: str) -> str:
        result = await self.fetcher.fetch(url)
        if not result.ok:
            assert result.error is not None
            raise result.error
        content = result.content
        if isinstance(content, bytes):
            content = content.decode("utf-8", errors="replace")
        if not content or not content.strip():
            raise FetchError("Sitemap content is empty or could not be fetched.", url=url)
        return content
