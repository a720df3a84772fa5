"""site_health.crawler: frontier, render engine adapter, sitemap discovery."""
