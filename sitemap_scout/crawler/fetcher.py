# sitemap_scout/crawler/fetcher.py
"""
Fetcher module: HTTP GET with timeout, retry/backoff, a global concurrency
limit and gzip decompression of ``.gz`` resources.
"""
from __future__ import annotations

import asyncio
import gzip
import zlib
from types import TracebackType
from typing import Optional, Sequence, Type, Union

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL

from sitemap_scout.config import ParserConfig
from sitemap_scout.crawler.models import FetchResult, ResponseKind
from sitemap_scout.errors import DecompressionError, FetchError
from sitemap_scout.logger import logger

__all__ = ("Fetcher", "gunzip_text", "is_gzip_url")


def is_gzip_url(url: str) -> bool:
    return url.lower().endswith(".gz")


def gunzip_text(url: str, data: bytes) -> str:
    """Decompress a gzip body and decode it as UTF-8."""
    try:
        raw = gzip.decompress(data)
    except (OSError, EOFError, zlib.error) as exc:
        raise DecompressionError(f"Failed to decompress gzipped content for {url}: {exc}", url=url) from exc
    return raw.decode("utf-8", errors="replace")


class Fetcher:
    """Handles HTTP fetching with retries/backoff, timeout and a concurrency cap.

    Use as an async context manager; the session is closed on exit unless it
    was passed in by the caller.
    """

    _RETRY_STATUS: Sequence[int] = tuple(range(500, 600)) + (429,)

    def __init__(self, config: ParserConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None
        self._semaphore = asyncio.Semaphore(config.max_concurrency)
        # per request, so a caller-provided session sends them too
        self._headers = {
            "User-Agent": config.user_agent,
            "Accept-Encoding": "gzip, deflate",
        }
        self._timeout = ClientTimeout(total=config.timeout)

    async def __aenter__(self) -> Fetcher:
        if self.session is None:
            self.session = ClientSession(
                timeout=self._timeout,
                headers=self._headers,
                raise_for_status=False,
            )
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str, kind: Optional[ResponseKind] = None) -> FetchResult:
        """
        GET *url* with up to ``retry_times`` attempts.

        *kind* defaults to BINARY for ``.gz`` URLs and TEXT otherwise. A BINARY
        ``.gz`` body is gunzipped and returned as text. Never raises for
        network, HTTP or URL problems: the returned :class:`FetchResult`
        carries either the content or the last error. Only connection errors,
        timeouts, 5xx and 429 are retried.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized")
        if kind is None:
            kind = ResponseKind.BINARY if is_gzip_url(url) else ResponseKind.TEXT

        attempts = self.config.retry_times
        last_error = FetchError(f"Failed to fetch {url}", url=url)
        for attempt in range(1, attempts + 1):
            try:
                content = await self._request(url, kind)
            except DecompressionError as exc:
                logger.error("%s", exc)
                return FetchResult(url, error=exc)
            except FetchError as exc:
                if exc.status not in self._RETRY_STATUS:
                    logger.debug("Not retrying %s: %s", url, exc)
                    return FetchResult(url, error=exc)
                last_error = exc
            except InvalidURL:
                logger.warning("Skipping invalid URL: %r", url)
                return FetchResult(url, error=FetchError(f"Invalid URL: {url!r}", url=url))
            except (ClientError, asyncio.TimeoutError) as exc:
                reason = str(exc) or type(exc).__name__
                last_error = FetchError(f"Request to {url} failed: {reason}", url=url)
            except Exception as exc:
                # e.g. UnicodeError from IDNA encoding of an over-long host label
                logger.warning("Request to %s could not be sent: %r", url, exc)
                reason = str(exc) or type(exc).__name__
                error = FetchError(f"Request to {url} could not be sent: {reason}", url=url)
                return FetchResult(url, error=error)
            else:
                return FetchResult(url, content=content)

            logger.warning("Attempt %d/%d failed for %s: %s", attempt, attempts, url, last_error)
            if attempt < attempts:
                await asyncio.sleep(self.backoff_delay(attempt))

        logger.error("Failed to fetch content from %s after %d attempts", url, attempts)
        return FetchResult(url, error=last_error)

    def backoff_delay(self, attempt: int) -> float:
        """Delay after failed attempt number *attempt*; grows linearly."""
        return self.config.retry_backoff * attempt

    async def _request(self, url: str, kind: ResponseKind) -> Union[str, bytes]:
        assert self.session is not None
        logger.debug("GET %s (%s)", url, kind.value)
        async with self._semaphore:
            async with self.session.get(
                url,
                headers=self._headers,
                timeout=self._timeout,
                max_redirects=self.config.max_redirects,
            ) as resp:
                if resp.status >= 400:
                    raise FetchError(f"HTTP Status {resp.status} for {url}", url=url, status=resp.status)
                if kind is ResponseKind.TEXT:
                    return await resp.text(errors="replace")
                data = await resp.read()
        if is_gzip_url(url):
            return gunzip_text(url, data)
        return data
