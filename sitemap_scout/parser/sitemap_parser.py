# File: sitemap_scout/parser/sitemap_parser.py
"""sitemap_scout.parser.sitemap_parser: parsing of TXT and XML sitemap payloads.

Example:
```python
from sitemap_scout.parser.sitemap_parser import UrlsetResult, parse_xml

result = parse_xml(content)
if isinstance(result, UrlsetResult):
    print(result.urls)
```
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Union

from lxml import etree

from sitemap_scout.errors import MalformedXml, ReceivedHtmlInsteadOfXml, UnsupportedFormat
from sitemap_scout.utils import is_absolute_url

__all__ = (
    "SitemapIndexResult",
    "UrlsetResult",
    "MultimediaResult",
    "ParseResult",
    "looks_like_html",
    "parse_txt",
    "parse_xml",
)

IMAGE_NS = "http://www.google.com/schemas/sitemap-image/1.1"
VIDEO_NS = "http://www.google.com/schemas/sitemap-video/1.1"
_MEDIA_NAMESPACES = (IMAGE_NS, VIDEO_NS)
_MEDIA_LOC_TAGS = (
    f"{{{IMAGE_NS}}}loc",
    f"{{{VIDEO_NS}}}content_loc",
    f"{{{VIDEO_NS}}}player_loc",
)


@dataclass(slots=True)
class SitemapIndexResult:
    """A ``<sitemapindex>``: child sitemap URLs in document order."""

    sitemaps: List[str] = field(default_factory=list)


@dataclass(slots=True)
class UrlsetResult:
    """A ``<urlset>``: leaf page URLs in document order.

    ``media_urls`` holds the nested ``image:``/``video:`` locations and is
    only filled when multimedia parsing is enabled.
    """

    urls: List[str] = field(default_factory=list)
    media_urls: List[str] = field(default_factory=list)


@dataclass(slots=True)
class MultimediaResult:
    """An image or video sitemap: media URLs in document order."""

    media_urls: List[str] = field(default_factory=list)


ParseResult = Union[SitemapIndexResult, UrlsetResult, MultimediaResult]


def parse_txt(content: str) -> List[str]:
    """Return the absolute URLs of a plain-text sitemap, one per line.

    Blank and invalid lines are dropped; the order of valid lines is kept.
    """
    urls: List[str] = []
    for raw in content.splitlines():
        line = raw.strip()
        if line and is_absolute_url(line):
            urls.append(line)
    return urls


def looks_like_html(content: str) -> bool:
    stripped = content.strip()
    if not stripped.startswith("<"):
        return False
    lowered = stripped.lower()
    return "<!doctype html" in lowered or "<html" in lowered


def _local_name(element: etree._Element) -> str:
    return etree.QName(element).localname if isinstance(element.tag, str) else ""


def _namespace(element: etree._Element) -> Optional[str]:
    return etree.QName(element).namespace if isinstance(element.tag, str) else None


def _child_locs(root: etree._Element, entry_name: str) -> List[str]:
    """First ``<loc>`` of every *entry_name* child of *root*; blank ones are skipped."""
    locs: List[str] = []
    for entry in root:
        if _local_name(entry) != entry_name:
            continue
        for child in entry:
            if _local_name(child) == "loc":
                text = (child.text or "").strip()
                if text:
                    locs.append(text)
                break
    return locs


def _media_locs(root: etree._Element) -> List[str]:
    locs: List[str] = []
    for element in root.iter(*_MEDIA_LOC_TAGS):
        text = (element.text or "").strip()
        if text:
            locs.append(text)
    return locs


def parse_xml(content: str, parse_multimedia: bool = False) -> ParseResult:
    """Parse an XML sitemap.

    Args:
        content: decoded XML text.
        parse_multimedia: accept image/video sitemaps instead of rejecting them
            and collect the ``image:``/``video:`` locations nested in a
            regular urlset.

    Raises:
        ReceivedHtmlInsteadOfXml: the payload is an HTML page.
        MalformedXml: the payload is not well-formed XML.
        UnsupportedFormat: well-formed XML that is not a known sitemap shape,
            or a sitemap without a single usable ``<loc>``.
    """
    if looks_like_html(content):
        raise ReceivedHtmlInsteadOfXml()

    parser = etree.XMLParser(recover=False, resolve_entities=False, no_network=True, huge_tree=True)
    try:
        root = etree.fromstring(content.strip().encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError as exc:
        raise MalformedXml(f"Malformed XML: {exc}") from exc
    if root is None:
        raise MalformedXml("Malformed XML: empty document")

    name = _local_name(root)
    namespace = _namespace(root)

    if name == "urlset" and namespace in _MEDIA_NAMESPACES:
        if parse_multimedia:
            return MultimediaResult(media_urls=_media_locs(root))
        raise UnsupportedFormat()

    if name == "sitemapindex":
        children = _child_locs(root, "sitemap")
        if children:
            return SitemapIndexResult(sitemaps=children)
    elif name == "urlset":
        urls = _child_locs(root, "url")
        if urls:
            media = _media_locs(root) if parse_multimedia else []
            return UrlsetResult(urls=urls, media_urls=media)

    raise UnsupportedFormat()
