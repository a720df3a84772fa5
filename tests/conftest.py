# File: tests/conftest.py
from __future__ import annotations

import html as html_lib
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pytest

from site_health.config import CrawlerConfig
from site_health.crawler.models import NavigationResult, PageSnapshot
from site_health.errors import EngineUnavailable, NavigationError
from site_health.parser.html_parser import extract_snapshot
from site_health.store import InMemoryIssueStore

GOOD_TITLE = "A perfectly sized page title for tests"  # 38 chars
GOOD_DESCRIPTION = "A meta description that is present and within the length limit."
LONG_TEXT = "Lorem ipsum dolor sit amet, consectetur adipiscing elit. " * 8


def make_html(
    *,
    title: Optional[str] = GOOD_TITLE,
    description: Optional[str] = GOOD_DESCRIPTION,
    h1: Sequence[str] = ("Main heading",),
    h2: Sequence[str] = (),
    text: str = LONG_TEXT,
    links: Iterable[str] = (),
    images: Iterable[Optional[str]] = (),
) -> str:
    """Build a small HTML document; ``images`` lists alt values (None = no alt)."""
    head = []
    if title is not None:
        head.append(f"<title>{html_lib.escape(title)}</title>")
    if description is not None:
        head.append(f'<meta name="description" content="{html_lib.escape(description)}">')
    body = [f"<h1>{html_lib.escape(h)}</h1>" for h in h1]
    body += [f"<h2>{html_lib.escape(h)}</h2>" for h in h2]
    body.append(f"<p>{html_lib.escape(text)}</p>")
    body += [f'<a href="{href}">link</a>' for href in links]
    for alt in images:
        body.append('<img src="x.png">' if alt is None else f'<img src="x.png" alt="{alt}">')
    return f"<html><head>{''.join(head)}</head><body>{''.join(body)}</body></html>"


PageSpec = Union[str, Exception, PageSnapshot]


class FakePage:
    """Browsing context serving canned HTML, snapshots or errors."""

    def __init__(self, engine: FakeRenderEngine) -> None:
        self.engine = engine
        self.closed = False
        self._url: Optional[str] = None

    async def navigate(self, url: str, *, wait_until: str, timeout_ms: int) -> NavigationResult:
        assert not self.engine.closed, "navigation after engine release"
        self.engine.navigations.append(url)
        url = self.engine.redirects.get(url, url)
        spec = self.engine.pages.get(url)
        if spec is None:
            raise NavigationError(url, "HTTP 404")
        if isinstance(spec, Exception):
            raise spec
        self._url = url
        return NavigationResult(url=url, status_code=200, elapsed_ms=self.engine.load_times.get(url, 120))

    async def extract(self) -> PageSnapshot:
        spec = self.engine.pages[self._url]
        if isinstance(spec, PageSnapshot):
            return spec
        return extract_snapshot(
            spec, url=self._url, status_code=200, load_time_ms=self.engine.load_times.get(self._url, 120)
        )

    async def close(self) -> None:
        self.closed = True


class FakeRenderEngine:
    def __init__(
        self,
        pages: Dict[str, PageSpec],
        load_times: Optional[Dict[str, int]] = None,
        fail_on_open: Optional[Exception] = None,
        redirects: Optional[Dict[str, str]] = None,
    ) -> None:
        self.pages = pages
        self.redirects = redirects or {}
        self.load_times = load_times or {}
        self.fail_on_open = fail_on_open
        self.navigations: List[str] = []
        self.opened: List[FakePage] = []
        self.closed = False

    async def __aenter__(self) -> FakeRenderEngine:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def open_page(self) -> FakePage:
        if self.closed:
            raise EngineUnavailable("render engine already released")
        if self.fail_on_open is not None:
            raise self.fail_on_open
        page = FakePage(self)
        self.opened.append(page)
        return page

    async def close(self) -> None:
        self.closed = True


@pytest.fixture()
def config() -> CrawlerConfig:
    """Config without sitemap lookups and with short timeouts."""
    return CrawlerConfig(sitemap_discovery=False, navigation_timeout=1.0)


@pytest.fixture()
def store() -> InMemoryIssueStore:
    return InMemoryIssueStore()


@pytest.fixture()
def good_html() -> str:
    return make_html()
