# File: site_health/store.py
"""site_health.store: хранилище найденных проблем и состояния сайтов.

The crawler only talks to the :class:`IssueStore` protocol. Two stores ship
with the package:

* :class:`InMemoryIssueStore` – process-local, used by tests and one-off runs.
* :class:`JsonIssueStore` – the same behaviour persisted to a single JSON file.

Both are insert-only for issues; resolving issues is left to whatever owns
the data (an issue with ``resolved=True`` simply stops counting towards the
health score).
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union, runtime_checkable

from site_health.crawler.models import Issue, Severity
from site_health.errors import PersistenceError
from site_health.logger import get_logger

logger = get_logger("store")


@dataclass(slots=True)
class SiteRecord:
    """Crawl bookkeeping for one site."""

    site_id: str
    last_crawled_at: Optional[datetime] = None
    health_score: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "site_id": self.site_id,
            "last_crawl": self.last_crawled_at.isoformat() if self.last_crawled_at else None,
            "health_score": self.health_score,
        }

    @classmethod
    def from_dict(cls, row: Dict[str, Any]) -> SiteRecord:
        last = row.get("last_crawl")
        return cls(
            site_id=row["site_id"],
            last_crawled_at=datetime.fromisoformat(last) if last else None,
            health_score=row.get("health_score"),
        )


@runtime_checkable
class IssueStore(Protocol):
    async def insert_issue(self, issue: Issue) -> None: ...

    async def query_unresolved_severities(self, site_id: str) -> List[Severity]: ...

    async def update_site(
        self,
        site_id: str,
        *,
        last_crawled_at: Optional[datetime] = None,
        health_score: Optional[int] = None,
    ) -> None: ...

    async def issues_for(self, site_id: str, unresolved_only: bool = False) -> List[Issue]: ...

    async def get_site(self, site_id: str) -> Optional[SiteRecord]: ...


class InMemoryIssueStore:
    """Issue store kept in memory; writes are serialised by an asyncio lock."""

    def __init__(self) -> None:
        self._issues: List[Issue] = []
        self._sites: Dict[str, SiteRecord] = {}
        self._lock = asyncio.Lock()

    async def insert_issue(self, issue: Issue) -> None:
        async with self._lock:
            await self._ensure_loaded()
            self._insert(issue)
            await self._persist()

    async def query_unresolved_severities(self, site_id: str) -> List[Severity]:
        await self._ensure_loaded()
        return [i.severity for i in self._issues if i.site_id == site_id and not i.resolved]

    async def update_site(
        self,
        site_id: str,
        *,
        last_crawled_at: Optional[datetime] = None,
        health_score: Optional[int] = None,
    ) -> None:
        async with self._lock:
            await self._ensure_loaded()
            site = self._sites.setdefault(site_id, SiteRecord(site_id))
            if last_crawled_at is not None:
                site.last_crawled_at = last_crawled_at
            if health_score is not None:
                if not 0 <= health_score <= 100:
                    raise ValueError(f"health score out of range: {health_score}")
                site.health_score = health_score
            await self._persist()

    async def issues_for(self, site_id: str, unresolved_only: bool = False) -> List[Issue]:
        await self._ensure_loaded()
        return [
            i for i in self._issues
            if i.site_id == site_id and not (unresolved_only and i.resolved)
        ]

    async def get_site(self, site_id: str) -> Optional[SiteRecord]:
        await self._ensure_loaded()
        return self._sites.get(site_id)

    def _insert(self, issue: Issue) -> None:
        if issue.created_at is None:
            issue.created_at = datetime.now(timezone.utc)
        self._issues.append(issue)

    # hooks for persistent subclasses
    async def _ensure_loaded(self) -> None:
        return None

    async def _persist(self) -> None:
        return None


class JsonIssueStore(InMemoryIssueStore):
    """Issue store persisted to one JSON document ``{"issues": [...], "sites": {...}}``."""

    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__()
        self.path = Path(path)
        self._loaded = False

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
            self._issues = [Issue.from_dict(row) for row in data.get("issues", [])]
            self._sites = {
                sid: SiteRecord.from_dict(row) for sid, row in data.get("sites", {}).items()
            }
        except (OSError, ValueError, KeyError, TypeError) as exc:
            self._loaded = False
            raise PersistenceError(f"Cannot read issue store {self.path}: {exc}") from exc
        logger.debug("Loaded %d issue(s) from %s", len(self._issues), self.path)

    async def _persist(self) -> None:
        payload = {
            "issues": [i.to_dict() for i in self._issues],
            "sites": {sid: s.to_dict() for sid, s in self._sites.items()},
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write issue store {self.path}: {exc}") from exc


__all__ = ["SiteRecord", "IssueStore", "InMemoryIssueStore", "JsonIssueStore"]
