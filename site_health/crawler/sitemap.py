# site_health/crawler/sitemap.py
"""
Sitemap loader: fetches sitemap.xml with aiohttp and returns page URLs.

The sitemap is only a discovery hint for the frontier; it is never rendered
or checked as a page itself.
"""
from __future__ import annotations

import asyncio
from typing import List, Optional

from aiohttp import ClientError, ClientSession, ClientTimeout

from site_health.config import CrawlerConfig
from site_health.logger import get_logger
from site_health.parser.sitemap_parser import parse_sitemap

logger = get_logger("sitemap")

# nested sitemaps followed from a <sitemapindex>
MAX_CHILD_SITEMAPS = 10


async def _get(session: ClientSession, url: str) -> Optional[bytes]:
    async with session.get(url, raise_for_status=False) as resp:
        if resp.status != 200:
            logger.debug("sitemap %s -> HTTP %s", url, resp.status)
            return None
        return await resp.read()


async def load_sitemap_urls(sitemap_url: str, config: Optional[CrawlerConfig] = None) -> List[str]:
    """
    Fetch *sitemap_url* and return the page URLs it lists.

    A ``<sitemapindex>`` is expanded one level deep. Any network or HTTP
    failure yields an empty list.
    """
    config = config or CrawlerConfig()
    timeout = ClientTimeout(total=config.sitemap_timeout)
    urls: List[str] = []
    try:
        async with ClientSession(
            timeout=timeout, headers={"User-Agent": config.user_agent}
        ) as session:
            body = await _get(session, sitemap_url)
            if body is None:
                return []
            doc = parse_sitemap(body)
            urls.extend(doc.pages)
            for child in doc.sitemaps[:MAX_CHILD_SITEMAPS]:
                child_body = await _get(session, child)
                if child_body is not None:
                    urls.extend(parse_sitemap(child_body).pages)
    except (ClientError, asyncio.TimeoutError) as exc:
        logger.warning("Error loading sitemap %s: %s", sitemap_url, exc)
        return urls
    logger.debug("sitemap %s: %d URL(s)", sitemap_url, len(urls))
    return urls


__all__ = ["MAX_CHILD_SITEMAPS", "load_sitemap_urls"]
