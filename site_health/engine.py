# File: site_health/engine.py
"""site_health.engine: оркестрация обхода сайта и расчёта health score.

One :meth:`CrawlOrchestrator.start_crawl` call walks ``Idle → Crawling →
Scoring → Idle``:

1. seed the frontier with the site root (the sitemap, when enabled, only
   feeds link discovery);
2. while budget remains, render the next URL, detect issues and store them;
   a page that fails to render is recorded as a ``crawl_error`` issue and the
   crawl goes on;
3. stamp ``last_crawled_at``, rescore the site from all unresolved issues
   and store the score.

Any other fault aborts the crawl and is reported as a failed
:class:`CrawlOutcome`; the render engine is released on every path.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import urljoin

from site_health.config import CrawlerConfig
from site_health.crawler.frontier import Frontier
from site_health.crawler.link_extractor import normalize_url
from site_health.crawler.render import PlaywrightRenderEngine, RenderEngine
from site_health.crawler.sitemap import load_sitemap_urls
from site_health.detector import crawl_error_issue, detect_issues
from site_health.errors import NavigationError
from site_health.logger import get_logger
from site_health.scoring import compute_health_score
from site_health.store import InMemoryIssueStore, IssueStore

__all__ = [
    "CrawlState",
    "PageResult",
    "CrawlOutcome",
    "CrawlContext",
    "CrawlOrchestrator",
    "site_root_url",
    "start_crawl",
]

logger = get_logger("engine")

EngineFactory = Callable[[CrawlerConfig], RenderEngine]
SitemapLoader = Callable[[str, CrawlerConfig], Awaitable[List[str]]]


class CrawlState(str, Enum):
    IDLE = "idle"
    CRAWLING = "crawling"
    SCORING = "scoring"


@dataclass(slots=True)
class PageResult:
    """Итог обработки одной страницы."""

    url: str
    status_code: Optional[int] = None
    load_time_ms: Optional[int] = None
    issues: int = 0
    error: Optional[str] = None


@dataclass(slots=True)
class CrawlOutcome:
    """Result of :meth:`CrawlOrchestrator.start_crawl`: a score or an error, never both."""

    site_id: str
    success: bool
    health_score: Optional[int] = None
    error: Optional[str] = None
    pages: List[PageResult] = field(default_factory=list)

    @classmethod
    def ok(cls, site_id: str, health_score: int, pages: List[PageResult]) -> CrawlOutcome:
        return cls(site_id=site_id, success=True, health_score=health_score, pages=pages)

    @classmethod
    def failed(cls, site_id: str, error: str, pages: List[PageResult]) -> CrawlOutcome:
        return cls(site_id=site_id, success=False, error=error, pages=pages)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class CrawlContext:
    """State owned by one crawl invocation."""

    site_id: str
    root_url: str
    frontier: Frontier
    engine: RenderEngine
    pages: List[PageResult] = field(default_factory=list)
    state: CrawlState = CrawlState.IDLE


def site_root_url(domain: str, scheme: str = "https") -> str:
    """``example.com`` → ``https://example.com/``; full origins are kept as given."""
    domain = domain.strip()
    if "://" not in domain:
        domain = f"{scheme}://{domain}"
    return normalize_url(domain)


class CrawlOrchestrator:
    """Фасад для CLI и тестов: обход сайта, запись проблем, расчёт health score."""

    def __init__(
        self,
        store: IssueStore,
        config: Optional[CrawlerConfig] = None,
        engine_factory: Optional[EngineFactory] = None,
        sitemap_loader: Optional[SitemapLoader] = None,
    ) -> None:
        self.store = store
        self.config = config or CrawlerConfig()
        self._engine_factory: EngineFactory = engine_factory or PlaywrightRenderEngine
        self._sitemap_loader: SitemapLoader = sitemap_loader or load_sitemap_urls
        self._active: List[CrawlContext] = []

    @property
    def active_crawls(self) -> List[tuple[str, CrawlState]]:
        """``(site_id, state)`` of every crawl currently running on this orchestrator."""
        return [(c.site_id, c.state) for c in self._active]

    async def start_crawl(
        self, site_id: str, domain: str, budget: Optional[int] = None
    ) -> CrawlOutcome:
        """Crawl *domain* for *site_id* visiting at most *budget* pages."""
        budget = self.config.max_pages if budget is None else budget
        root = site_root_url(domain, self.config.scheme)
        ctx: Optional[CrawlContext] = None
        logger.info("Starting crawl of %s (site %s, budget %d)", root, site_id, budget)
        try:
            async with self._engine_factory(self.config) as engine:
                ctx = CrawlContext(
                    site_id=site_id,
                    root_url=root,
                    frontier=Frontier(root, budget),
                    engine=engine,
                    state=CrawlState.CRAWLING,
                )
                self._active.append(ctx)
                await self._seed(ctx)
                await self._crawl(ctx)
            ctx.state = CrawlState.SCORING
            score = await self._score(site_id)
        except Exception as exc:
            logger.exception("Crawl of %s failed: %s", root, exc)
            pages = ctx.pages if ctx is not None else []
            return CrawlOutcome.failed(site_id, f"{type(exc).__name__}: {exc}", pages)
        finally:
            if ctx is not None:
                ctx.state = CrawlState.IDLE
                self._active.remove(ctx)

        pages = ctx.pages
        failed = sum(1 for p in pages if p.error)
        logger.info(
            "Crawl of %s finished: %d page(s), %d failed, health score %d",
            root, len(pages), failed, score,
        )
        return CrawlOutcome.ok(site_id, score, pages)

    async def _seed(self, ctx: CrawlContext) -> None:
        ctx.frontier.seed([ctx.root_url])
        if not self.config.sitemap_discovery:
            return
        sitemap_url = urljoin(ctx.root_url, self.config.sitemap_path)
        urls = await self._sitemap_loader(sitemap_url, self.config)
        added = ctx.frontier.discover(urls)
        logger.debug("Sitemap %s: %d URL(s) queued", sitemap_url, added)

    async def _crawl(self, ctx: CrawlContext) -> None:
        frontier = ctx.frontier
        while frontier.has_budget():
            url = frontier.next()
            if url is None:
                break
            frontier.mark_visited(url)
            ctx.pages.append(await self._visit(ctx, url))

    async def _visit(self, ctx: CrawlContext, url: str) -> PageResult:
        logger.info("Crawling: %s", url)
        page = await ctx.engine.open_page()
        try:
            nav = await page.navigate(
                url,
                wait_until=self.config.wait_until,
                timeout_ms=self.config.navigation_timeout_ms,
            )
            final = normalize_url(nav.url)
            if final != url and ctx.frontier.is_visited(final):
                logger.info("%s redirects to already crawled %s, skipping", url, final)
                return PageResult(url=url, status_code=nav.status_code, load_time_ms=nav.elapsed_ms)
            ctx.frontier.mark_alias(final)
            snapshot = await page.extract()
        except NavigationError as exc:
            logger.warning("Error crawling %s: %s", url, exc)
            await self.store.insert_issue(crawl_error_issue(ctx.site_id, url, exc))
            return PageResult(url=url, issues=1, error=str(exc))
        finally:
            await page.close()

        issues = detect_issues(snapshot, ctx.site_id, page_url=url)
        for issue in issues:
            await self.store.insert_issue(issue)
        if self.config.follow_links:
            ctx.frontier.discover(snapshot.links)
        return PageResult(
            url=url,
            status_code=snapshot.status_code,
            load_time_ms=snapshot.load_time_ms,
            issues=len(issues),
        )

    async def _score(self, site_id: str) -> int:
        await self.store.update_site(site_id, last_crawled_at=datetime.now(timezone.utc))
        severities = await self.store.query_unresolved_severities(site_id)
        score = compute_health_score(severities)
        await self.store.update_site(site_id, health_score=score)
        return score


async def start_crawl(
    site_id: str,
    domain: str,
    budget: Optional[int] = None,
    *,
    store: Optional[IssueStore] = None,
    config: Optional[CrawlerConfig] = None,
    engine_factory: Optional[EngineFactory] = None,
) -> CrawlOutcome:
    """Запускает обход сайта; без store используется InMemoryIssueStore."""
    orchestrator = CrawlOrchestrator(
        store if store is not None else InMemoryIssueStore(),
        config=config,
        engine_factory=engine_factory,
    )
    return await orchestrator.start_crawl(site_id, domain, budget)
