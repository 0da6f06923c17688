# File: tests/test_enricher.py
from __future__ import annotations

import asyncio
from typing import Dict, List

import pytest

from sitemap_scout.config import ExtractionSettings
from sitemap_scout.crawler.enricher import PageEnricher
from sitemap_scout.crawler.models import FetchResult, Status
from sitemap_scout.errors import FetchError
from sitemap_scout.parser.html_parser import HtmlPage

PAGE = """
<html><head>
  <title>Blue widgets</title>
  <link rel="canonical" href="https://example.com/widgets/blue">
</head><body>
  <h1>Blue widgets for sale</h1>
  <p>Small blue widgets.</p>
  <a href="/red">Red</a>
  <a href="https://other.org/">Other</a>
</body></html>
"""


class FakeFetcher:
    """Serves canned HTML and records every requested URL."""

    def __init__(self, pages: Dict[str, str], delay: float = 0.0):
        self.pages = pages
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch(self, url, kind=None):
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url not in self.pages:
                return FetchResult(url, error=FetchError(f"HTTP Status 404 for {url}", url=url, status=404))
            return FetchResult(url, content=self.pages[url])
        finally:
            self.in_flight -= 1


@pytest.mark.asyncio()
async def test_no_settings_means_no_fetch():
    fetcher = FakeFetcher({})
    enricher = PageEnricher(fetcher)
    settings = ExtractionSettings()

    first = await enricher.extract_page_data("https://example.com/blog/my-post.html", settings)
    second = await enricher.extract_page_data("https://example.com/blog/my-post.html", settings)

    assert fetcher.calls == []
    assert first == second
    assert first.status is Status.SUCCESS
    assert first.keyword == "my post"
    assert first.to_dict() == {
        "url": "https://example.com/blog/my-post.html",
        "keyword": "my post",
        "status": "success",
    }


@pytest.mark.asyncio()
async def test_only_requested_fields_are_filled():
    url = "https://example.com/widgets/blue-widget"
    enricher = PageEnricher(FakeFetcher({url: PAGE}))
    settings = ExtractionSettings(extract_title_h1=True, count_words=True)

    page = await enricher.extract_page_data(url, settings)

    assert page.status is Status.SUCCESS
    assert page.title == "Blue widgets"
    assert page.h1 == "Blue widgets for sale"
    assert page.word_count is not None and page.word_count > 0
    assert page.canonical_url is None
    assert page.is_canonical is None
    assert page.internal_links is None
    assert page.external_links is None
    assert page.competition is None


@pytest.mark.asyncio()
async def test_all_settings():
    url = "https://example.com/widgets/blue"
    enricher = PageEnricher(FakeFetcher({url: PAGE}))

    page = await enricher.extract_page_data(url, ExtractionSettings.all_enabled())

    assert page.status is Status.SUCCESS
    assert page.canonical_url == "https://example.com/widgets/blue"
    assert page.is_canonical is True
    assert page.internal_links == 1
    assert page.external_links == 1
    assert 0 <= page.competition <= 100


@pytest.mark.asyncio()
async def test_canonical_elsewhere_and_missing():
    other = "https://example.com/widgets/blue-copy"
    bare = "https://example.com/bare"
    enricher = PageEnricher(FakeFetcher({other: PAGE, bare: "<html><body>x</body></html>"}))
    settings = ExtractionSettings(check_canonical=True)

    copy = await enricher.extract_page_data(other, settings)
    assert copy.canonical_url == "https://example.com/widgets/blue"
    assert copy.is_canonical is False

    plain = await enricher.extract_page_data(bare, settings)
    assert plain.canonical_url is None
    assert plain.is_canonical is True


@pytest.mark.asyncio()
async def test_fetch_failure_marks_page_as_error():
    enricher = PageEnricher(FakeFetcher({}))

    page = await enricher.extract_page_data(
        "https://example.com/gone", ExtractionSettings(extract_title_h1=True)
    )

    assert page.status is Status.ERROR
    assert "404" in page.error_message
    assert page.title is None


@pytest.mark.asyncio()
async def test_extraction_error_keeps_earlier_fields(monkeypatch):
    url = "https://example.com/widgets/blue"
    enricher = PageEnricher(FakeFetcher({url: PAGE}))

    def boom(self):
        raise RuntimeError("word counter exploded")

    monkeypatch.setattr(HtmlPage, "word_count", boom)
    settings = ExtractionSettings(extract_title_h1=True, count_words=True, estimate_competition=True)

    page = await enricher.extract_page_data(url, settings)

    assert page.status is Status.ERROR
    assert page.error_message == "word counter exploded"
    assert page.title == "Blue widgets"
    assert page.word_count is None
    assert page.competition is None


@pytest.mark.asyncio()
async def test_batch_keeps_order_and_limits_parallelism():
    urls = [f"https://example.com/p{i}" for i in range(7)]
    fetcher = FakeFetcher({u: PAGE for u in urls}, delay=0.01)
    enricher = PageEnricher(fetcher, batch_size=3)

    pages = await enricher.extract_batch(urls, ExtractionSettings(extract_title_h1=True))

    assert [p.url for p in pages] == urls
    assert [p.keyword for p in pages] == [f"p{i}" for i in range(7)]
    assert fetcher.max_in_flight <= 3
    assert sorted(fetcher.calls) == sorted(urls)


class ExplodingFetcher:
    async def fetch(self, url, kind=None):
        raise UnicodeError("label empty or too long")


@pytest.mark.asyncio()
async def test_unexpected_fetch_exception_stays_on_the_page():
    enricher = PageEnricher(ExplodingFetcher())
    urls = ["https://example.com/a", "https://example.com/b"]

    pages = await enricher.extract_batch(urls, ExtractionSettings(extract_title_h1=True))

    assert [p.status for p in pages] == [Status.ERROR, Status.ERROR]
    assert pages[0].error_message == "label empty or too long"
    assert pages[0].title is None


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        PageEnricher(FakeFetcher({}), batch_size=0)
