# === FILE: sitemap_scout/parser/html_parser.py ===
"""HTML parsing utilities for page enrichment.

Everything here is synchronous and works on an already downloaded page:

* title / h1: text of the first matching element or ``""``.
* canonical: ``href`` of ``<link rel="canonical">`` if any.
* words: whitespace-separated tokens of the ``<body>`` text.
* links: ``<a href>`` split into internal and external by exact hostname.
* competition: a 0–100 heuristic of on-page richness, see
  :func:`calculate_competition_score`.
"""
from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import Tag

__all__: Sequence[str] = (
    "CompetitionSignals",
    "HtmlPage",
    "calculate_competition_score",
    "parse_html",
)


@dataclass(slots=True, frozen=True)
class CompetitionSignals:
    """Raw page measurements fed into :func:`calculate_competition_score`."""

    text_length: int
    header_count: int
    has_meta_description: bool
    images: int
    images_with_alt: int
    has_structured_data: bool

    def score(self) -> int:
        return calculate_competition_score(
            self.text_length,
            self.header_count,
            self.has_meta_description,
            self.images,
            self.images_with_alt,
            self.has_structured_data,
        )


def calculate_competition_score(
    text_length: int,
    header_count: int,
    has_meta_description: bool,
    images: int,
    images_with_alt: int,
    has_structured_data: bool,
) -> int:
    """Heuristic on-page richness score in ``[0, 100]``.

    +1 for each of text length > 1000 / 2000 / 3000, ``min(headers / 10, 2)``,
    +1 for a meta description, ``alt / images * 2`` when the page has images,
    +2 for JSON-LD structured data. The sum is multiplied by 10, rounded half
    up and clamped.
    """
    score = 0.0
    if text_length > 1000:
        score += 1
    if text_length > 2000:
        score += 1
    if text_length > 3000:
        score += 1

    score += min(header_count / 10, 2)

    if has_meta_description:
        score += 1

    if images > 0:
        score += (images_with_alt / images) * 2

    if has_structured_data:
        score += 2

    return int(min(max(math.floor(score * 10 + 0.5), 0), 100))


class HtmlPage:
    """A downloaded page parsed once with BeautifulSoup."""

    def __init__(self, url: str, html: str) -> None:
        self.url = url
        self.soup = BeautifulSoup(html, "html.parser")

    def _first_text(self, name: str) -> str:
        tag = self.soup.find(name)
        return tag.get_text().strip() if isinstance(tag, Tag) else ""

    def title(self) -> str:
        return self._first_text("title")

    def h1(self) -> str:
        return self._first_text("h1")

    def canonical(self) -> Optional[str]:
        for link in self.soup.find_all("link", href=True):
            if not isinstance(link, Tag):
                continue
            rel = link.get("rel") or []
            if isinstance(rel, str):
                rel = rel.split()
            if any(r.lower() == "canonical" for r in rel):
                href = link.get("href")
                return href if isinstance(href, str) else None
        return None

    def body_text(self) -> str:
        body = self.soup.body
        return body.get_text() if body is not None else self.soup.get_text()

    def word_count(self) -> int:
        return len(self.body_text().split())

    def link_counts(self) -> Tuple[int, int]:
        """Return ``(internal, external)`` counts of ``<a href>`` links."""
        host = urlparse(self.url).hostname
        internal = external = 0
        for tag in self.soup.find_all("a", href=True):
            if not isinstance(tag, Tag):
                continue
            href = tag.get("href")
            if not isinstance(href, str):
                continue
            try:
                link_host = urlparse(urljoin(self.url, href.strip())).hostname
            except ValueError:
                continue
            if link_host == host:
                internal += 1
            else:
                external += 1
        return internal, external

    def competition_signals(self) -> CompetitionSignals:
        images = [img for img in self.soup.find_all("img") if isinstance(img, Tag)]
        return CompetitionSignals(
            text_length=len(self.body_text()),
            header_count=len(self.soup.find_all(["h1", "h2", "h3", "h4", "h5", "h6"])),
            has_meta_description=self.soup.find("meta", attrs={"name": "description"}) is not None,
            images=len(images),
            images_with_alt=sum(1 for img in images if img.has_attr("alt")),
            has_structured_data=(
                self.soup.find("script", attrs={"type": "application/ld+json"}) is not None
            ),
        )


def parse_html(url: str, html: str) -> HtmlPage:
    """Parse raw HTML of *url*."""
    return HtmlPage(url, html)
