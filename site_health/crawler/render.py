# site_health/crawler/render.py
"""
Render engine capability and its Playwright implementation.

The crawler depends only on :class:`RenderEngine` / :class:`BrowsingContext`;
any object with the same coroutines can stand in (tests use a fake engine).
"""
from __future__ import annotations

import time
from types import TracebackType
from typing import Optional, Protocol, Type, runtime_checkable

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeout

from site_health.config import CrawlerConfig, WaitCondition
from site_health.crawler.models import NavigationResult, PageSnapshot
from site_health.errors import EngineUnavailable, NavigationError, NavigationTimeout
from site_health.logger import get_logger
from site_health.parser.html_parser import extract_snapshot

logger = get_logger("render")

_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


@runtime_checkable
class BrowsingContext(Protocol):
    """One browser page, used for a single URL and then closed."""

    async def navigate(
        self, url: str, *, wait_until: WaitCondition, timeout_ms: int
    ) -> NavigationResult: ...

    async def extract(self) -> PageSnapshot: ...

    async def close(self) -> None: ...


@runtime_checkable
class RenderEngine(Protocol):
    """Scoped browser resource: one instance per crawl, released when it ends."""

    async def open_page(self) -> BrowsingContext: ...

    async def close(self) -> None: ...

    async def __aenter__(self) -> RenderEngine: ...

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None: ...


class PlaywrightPage:
    """Browsing context backed by a Playwright :class:`Page`."""

    def __init__(self, page: Page) -> None:
        self._page = page
        self._navigation: Optional[NavigationResult] = None

    async def navigate(
        self, url: str, *, wait_until: WaitCondition = "networkidle", timeout_ms: int = 30_000
    ) -> NavigationResult:
        self._navigation = None
        start = time.monotonic()
        try:
            response = await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeout as exc:
            raise NavigationTimeout(url, timeout_ms) from exc
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc
        elapsed_ms = int((time.monotonic() - start) * 1000)

        if response is None:
            raise NavigationError(url, "No response")
        if not 200 <= response.status < 300:
            raise NavigationError(url, f"HTTP {response.status}")

        self._navigation = NavigationResult(
            url=self._page.url or url, status_code=response.status, elapsed_ms=elapsed_ms
        )
        return self._navigation

    async def extract(self) -> PageSnapshot:
        nav = self._navigation
        if nav is None:
            raise NavigationError(self._page.url, "extract() called before a successful navigate()")
        try:
            html = await self._page.content()
        except PlaywrightError as exc:
            raise NavigationError(nav.url, exc.message) from exc
        return extract_snapshot(
            html, url=nav.url, status_code=nav.status_code, load_time_ms=nav.elapsed_ms
        )

    async def close(self) -> None:
        try:
            await self._page.close()
        except PlaywrightError as exc:
            logger.debug("Page close failed: %s", exc)


class PlaywrightRenderEngine:
    """Headless Chromium, launched lazily on the first :meth:`open_page`."""

    def __init__(self, config: Optional[CrawlerConfig] = None) -> None:
        self.config = config or CrawlerConfig()
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._closed = False

    async def __aenter__(self) -> PlaywrightRenderEngine:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def started(self) -> bool:
        return self._browser is not None

    async def open_page(self) -> PlaywrightPage:
        if self._closed:
            raise EngineUnavailable("render engine already released")
        browser = self._browser or await self._start()
        try:
            page = await browser.new_page(user_agent=self.config.user_agent)
        except PlaywrightError as exc:
            raise EngineUnavailable(f"cannot open browser page: {exc.message}") from exc
        return PlaywrightPage(page)

    async def close(self) -> None:
        self._closed = True
        browser, self._browser = self._browser, None
        driver, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
        if driver is not None:
            await driver.stop()
            logger.debug("Render engine released")

    async def _start(self) -> Browser:
        logger.debug("Launching headless browser (headless=%s)", self.config.headless)
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless, args=_BROWSER_ARGS
            )
            return self._browser
        except Exception as exc:
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
            raise EngineUnavailable(f"cannot launch browser: {exc}") from exc


__all__ = ["BrowsingContext", "RenderEngine", "PlaywrightPage", "PlaywrightRenderEngine"]
