# File: sitemap_scout/aggregator.py
"""sitemap_scout.aggregator: the result of one sitemap parsing run."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sitemap_scout.crawler.models import ParsedPageData, SitemapInfo, Status


@dataclass(slots=True)
class ParseReport:
    """Every visited sitemap, every extracted page and the run duration."""

    base_url: str
    sitemaps: List[SitemapInfo] = field(default_factory=list)
    extracted_urls: List[ParsedPageData] = field(default_factory=list)
    processing_time_ms: int = 0

    @property
    def total_urls_extracted(self) -> int:
        return len(self.extracted_urls)

    @property
    def successful_sitemaps(self) -> int:
        return sum(1 for s in self.sitemaps if s.status is Status.SUCCESS)

    @property
    def failed_sitemaps(self) -> int:
        return sum(1 for s in self.sitemaps if s.status is Status.ERROR)

    def summary(self) -> Dict[str, int]:
        return {
            "totalUrlsExtracted": self.total_urls_extracted,
            "successfulSitemaps": self.successful_sitemaps,
            "failedSitemaps": self.failed_sitemaps,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "sitemaps": [s.to_dict() for s in self.sitemaps],
            "extractedUrls": [p.to_dict() for p in self.extracted_urls],
            "processingTimeMs": self.processing_time_ms,
            "summary": self.summary(),
        }

    def parsed_event(self, timestamp: Optional[datetime] = None) -> SitemapParsedEvent:
        return SitemapParsedEvent(
            base_url=self.base_url,
            total_urls_extracted=self.total_urls_extracted,
            successful_sitemaps=self.successful_sitemaps,
            failed_sitemaps=self.failed_sitemaps,
            processing_time_ms=self.processing_time_ms,
            timestamp=timestamp or datetime.now(timezone.utc),
        )

    def json(self, *, pretty: bool = False) -> str:
        """JSON representation with camelCase keys; unset optional fields are omitted."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


@dataclass(frozen=True, slots=True)
class SitemapParsedEvent:
    """Completion notice of a run, handed to the ``on_parsed`` listener."""

    base_url: str
    total_urls_extracted: int
    successful_sitemaps: int
    failed_sitemaps: int
    processing_time_ms: int
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseUrl": self.base_url,
            "totalUrlsExtracted": self.total_urls_extracted,
            "successfulSitemaps": self.successful_sitemaps,
            "failedSitemaps": self.failed_sitemaps,
            "processingTimeMs": self.processing_time_ms,
            "timestamp": self.timestamp.isoformat(),
        }


def aggregate_results(
    base_url: str,
    sitemaps: List[SitemapInfo],
    pages: List[ParsedPageData],
    processing_time_ms: int,
) -> ParseReport:
    """Assemble a ParseReport from the traversal output."""
    return ParseReport(
        base_url=base_url,
        sitemaps=list(sitemaps),
        extracted_urls=list(pages),
        processing_time_ms=max(0, int(processing_time_ms)),
    )
