"""sitemap_scout.crawler: network side of the pipeline (fetch, discover, enrich, traverse)."""
