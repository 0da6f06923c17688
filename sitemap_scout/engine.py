# File: sitemap_scout/engine.py
"""sitemap_scout.engine: orchestration of a run, from base URL to ParseReport."""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Callable, Optional

from aiohttp import ClientSession

from sitemap_scout.aggregator import ParseReport, SitemapParsedEvent, aggregate_results
from sitemap_scout.config import ExtractionSettings, ParserConfig, load_config
from sitemap_scout.crawler.crawler import SitemapCrawler
from sitemap_scout.crawler.discovery import SitemapDiscovery
from sitemap_scout.crawler.enricher import PageEnricher
from sitemap_scout.crawler.fetcher import Fetcher
from sitemap_scout.errors import InvalidInputError
from sitemap_scout.logger import logger
from sitemap_scout.repository import ResultRepository
from sitemap_scout.utils import is_http_url, strip_trailing_slashes

__all__ = ["Engine", "parse_website_sitemaps", "validate_base_url"]


def validate_base_url(base_url: str) -> str:
    """Return *base_url* without trailing slashes or raise InvalidInputError."""
    if not isinstance(base_url, str) or not is_http_url(base_url.strip()):
        raise InvalidInputError(
            "Invalid or malformed base URL provided. Please provide a valid URL "
            "including the protocol (http:// or https://)"
        )
    return strip_trailing_slashes(base_url.strip())


async def parse_website_sitemaps(
    base_url: str,
    settings: Optional[ExtractionSettings] = None,
    config: Optional[ParserConfig] = None,
    repository: Optional[ResultRepository] = None,
    session: Optional[ClientSession] = None,
    on_parsed: Optional[Callable[[SitemapParsedEvent], Any]] = None,
) -> ParseReport:
    """Discover, traverse and enrich the sitemaps of *base_url*.

    *settings* overrides ``config.settings``. *on_parsed* (plain function or
    coroutine function) receives a :class:`SitemapParsedEvent` once the
    results were handed to *repository*; a failing listener is logged and
    does not affect the returned report. Raises InvalidInputError before
    any I/O for a bad URL and NoSitemapFoundError when discovery finds
    nothing; every other failure is recorded inside the report.
    """
    cleaned = validate_base_url(base_url)
    config = config or ParserConfig()
    settings = settings or config.settings
    repository = repository or ResultRepository()

    start = time.monotonic()
    async with Fetcher(config, session=session) as fetcher:
        discovery = SitemapDiscovery(fetcher, config.common_paths)
        frontier = await discovery.discover(cleaned)

        crawler = SitemapCrawler(
            fetcher,
            PageEnricher(fetcher, batch_size=config.batch_size),
            dedupe_pages=config.dedupe_pages,
        )
        sitemaps, pages = await crawler.crawl(frontier, settings)

    await repository.save_sitemap_info(sitemaps)
    await repository.save_extracted_pages(pages)

    elapsed_ms = int((time.monotonic() - start) * 1000)
    report = aggregate_results(cleaned, sitemaps, pages, elapsed_ms)
    logger.info(
        "Parsed %s: %d sitemaps (%d failed), %d URLs in %d ms",
        cleaned,
        len(report.sitemaps),
        report.failed_sitemaps,
        report.total_urls_extracted,
        report.processing_time_ms,
    )

    if on_parsed is not None:
        await _notify(on_parsed, report.parsed_event())
    return report


async def _notify(listener: Callable[[SitemapParsedEvent], Any], event: SitemapParsedEvent) -> None:
    try:
        result = listener(event)
        if inspect.isawaitable(result):
            await result
    except Exception:
        logger.exception("sitemap.parsed listener failed for %s", event.base_url)


class Engine:
    """Synchronous facade for the CLI and scripts: config loading and one run."""

    @staticmethod
    def load_config(path: Optional[str]) -> ParserConfig:
        """Load a YAML/JSON config or fall back to defaults."""
        return load_config(path)

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self.config = config or ParserConfig()

    def run(
        self,
        base_url: str,
        settings: Optional[ExtractionSettings] = None,
        timeout: Optional[float] = None,
    ) -> ParseReport:
        """Run :func:`parse_website_sitemaps` in a fresh event loop.

        With *timeout* the whole run is cancelled after that many seconds and
        :class:`asyncio.TimeoutError` is raised.
        """
        logger.info("Starting sitemap parsing for %s", base_url)
        coro = parse_website_sitemaps(base_url, settings, self.config)
        if timeout:
            coro = asyncio.wait_for(coro, timeout=timeout)
        try:
            return asyncio.run(coro)
        except asyncio.TimeoutError:
            logger.error("Parsing did not finish within %s seconds", timeout)
            raise
