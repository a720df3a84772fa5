"""
SiteHealth package initializer.
Defines package version and exposes the crawl entry point.
"""
__version__ = "0.1.0"

from site_health.engine import CrawlOrchestrator, CrawlOutcome, start_crawl  # noqa: E402

__all__ = ["__version__", "CrawlOrchestrator", "CrawlOutcome", "start_crawl"]
