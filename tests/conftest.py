# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import List

import pytest
import pytest_asyncio
from aiohttp import web

from sitemap_scout.config import ParserConfig
from sitemap_scout.logger import init_logging

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"


def urlset_xml(*urls: str) -> str:
    entries = "".join(f"<url><loc>{u}</loc></url>" for u in urls)
    return f'<?xml version="1.0" encoding="UTF-8"?><urlset xmlns="{SITEMAP_NS}">{entries}</urlset>'


def index_xml(*sitemaps: str) -> str:
    entries = "".join(f"<sitemap><loc>{u}</loc></sitemap>" for u in sitemaps)
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>'
        f'<sitemapindex xmlns="{SITEMAP_NS}">{entries}</sitemapindex>'
    )


def base_of(request: web.Request) -> str:
    """Absolute base URL of the test server handling *request*."""
    return f"{request.scheme}://{request.host}"


@pytest.fixture(autouse=True)
def fresh_logging():
    """Point the logger at the current stderr; CliRunner leaves closed streams behind."""
    init_logging(level="DEBUG")
    yield
    init_logging()


@pytest.fixture()
def fast_config() -> ParserConfig:
    """
    Config with short timeouts and tiny backoff so failure paths stay quick.
    """
    return ParserConfig(
        timeout=2.0,
        retry_times=2,
        retry_backoff=0.01,
        user_agent="TestAgent/1.0",
    )


@pytest_asyncio.fixture
async def serve_app(unused_tcp_port_factory) -> AsyncIterator[Callable[[web.Application], Awaitable[str]]]:
    """Start aiohttp apps on free ports; yields a starter returning the base URL."""
    runners: List[web.AppRunner] = []

    async def _serve(app: web.Application) -> str:
        port = unused_tcp_port_factory()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        runners.append(runner)
        return f"http://127.0.0.1:{port}"

    try:
        yield _serve
    finally:
        for runner in runners:
            await runner.cleanup()
