"""sitemap_scout.parser: pure parsers for robots.txt, sitemap payloads and page HTML."""
