# site_health/crawler/frontier.py
"""
Crawl frontier: FIFO queue of pending URLs, visited set and page budget.
"""
from __future__ import annotations

from collections import deque
from typing import Deque, FrozenSet, Iterable, Optional, Set

from site_health.crawler.link_extractor import (
    is_http_url,
    normalize_url,
    same_registrable_domain,
)
from site_health.logger import get_logger

logger = get_logger("frontier")


class Frontier:
    """URLs to visit and URLs already visited, bounded by ``budget``.

    Invariants: ``len(visited) <= budget``; a URL is visited at most once;
    the queue never holds a visited URL. Every URL is compared in its
    :func:`normalize_url` form.
    """

    def __init__(self, root_url: str, budget: int) -> None:
        if budget < 0:
            raise ValueError("budget must be >= 0")
        self.root_url = normalize_url(root_url)
        self.budget = budget
        self._queue: Deque[str] = deque()
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()
        self._aliases: Set[str] = set()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def visited(self) -> FrozenSet[str]:
        return frozenset(self._visited)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._queue)

    def seed(self, urls: Iterable[str]) -> int:
        """Append URLs that are neither visited nor queued. Returns the number added."""
        added = 0
        for url in urls:
            if self._enqueue(normalize_url(url)):
                added += 1
        return added

    def discover(self, urls: Iterable[str]) -> int:
        """Like :meth:`seed`, restricted to http(s) URLs on the root's registrable domain."""
        added = 0
        for url in urls:
            if not is_http_url(url) or not same_registrable_domain(url, self.root_url):
                continue
            if self._enqueue(normalize_url(url)):
                added += 1
        if added:
            logger.debug("Discovered %d new URL(s), queue size %d", added, len(self._queue))
        return added

    def next(self) -> Optional[str]:
        """Pop the oldest queued URL, or None when the queue is empty."""
        if not self._queue:
            return None
        url = self._queue.popleft()
        self._queued.discard(url)
        return url

    def mark_visited(self, url: str) -> None:
        norm = normalize_url(url)
        if norm in self._visited:
            return
        if len(self._visited) >= self.budget:
            raise RuntimeError(f"crawl budget of {self.budget} page(s) exhausted")
        self._visited.add(norm)
        if norm in self._queued:
            self._queued.discard(norm)
            self._queue.remove(norm)

    def is_visited(self, url: str) -> bool:
        return normalize_url(url) in self._visited

    def mark_alias(self, url: str) -> None:
        """Record *url* as served by an already visited page (a redirect target).

        The URL is dropped from the queue and never queued again. It does not
        use up budget.
        """
        norm = normalize_url(url)
        if norm in self._visited:
            return
        self._aliases.add(norm)
        if norm in self._queued:
            self._queued.discard(norm)
            self._queue.remove(norm)

    def has_budget(self) -> bool:
        return len(self._visited) < self.budget

    def _enqueue(self, url: str) -> bool:
        if url in self._visited or url in self._aliases or url in self._queued:
            return False
        self._queue.append(url)
        self._queued.add(url)
        return True


__all__ = ["Frontier"]
