"""site_health.parser: HTML snapshot and sitemap parsers."""
