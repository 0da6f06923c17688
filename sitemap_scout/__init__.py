"""
SitemapScout package initializer.
Defines package version and exposes the async API and the CLI.
"""
__version__ = "0.1.0"

from sitemap_scout.engine import Engine, parse_website_sitemaps  # noqa: E402

# Expose CLI entry point
from .cli import cli  # noqa: E402

__all__ = ["__version__", "Engine", "parse_website_sitemaps", "cli"]
