# File: site_health/aggregator.py
"""site_health.aggregator: сводный отчёт по результатам обхода."""

from __future__ import annotations

import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TypedDict

from site_health.crawler.models import Issue, Severity
from site_health.engine import CrawlOutcome


class PageInfo(TypedDict, total=False):
    """Информация об обработанной странице."""

    url: str
    status_code: Optional[int]
    load_time_ms: Optional[int]
    issues: int
    error: Optional[str]


class IssueInfo(TypedDict, total=False):
    """Строка отчёта о найденной проблеме."""

    page_url: str
    issue_type: str
    severity: str
    description: str
    suggested_fix: Optional[str]
    is_fixed: bool
    created_at: Optional[str]


@dataclass(slots=True)
class CrawlReport:
    """Итоговый отчёт: health score, страницы, проблемы и их распределение."""

    site_id: str
    success: bool
    health_score: Optional[int] = None
    error: Optional[str] = None
    pages: List[PageInfo] = field(default_factory=list)
    issues: List[IssueInfo] = field(default_factory=list)
    severity_counts: Dict[str, int] = field(default_factory=dict)
    type_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "site_id": self.site_id,
            "success": self.success,
            "health_score": self.health_score,
            "error": self.error,
            "pages": self.pages,
            "issues": self.issues,
            "severity_counts": self.severity_counts,
            "type_counts": self.type_counts,
        }

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление отчёта."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2 if pretty else None)


def _page_info(outcome: CrawlOutcome) -> List[PageInfo]:
    return [
        {
            "url": p.url,
            "status_code": p.status_code,
            "load_time_ms": p.load_time_ms,
            "issues": p.issues,
            "error": p.error,
        }
        for p in outcome.pages
    ]


def _issue_info(issues: Sequence[Issue]) -> List[IssueInfo]:
    rows: List[IssueInfo] = []
    for issue in issues:
        row = issue.to_dict()
        row.pop("site_id")
        rows.append(row)  # type: ignore[arg-type]
    return rows


def aggregate_results(outcome: CrawlOutcome, issues: Sequence[Issue] = ()) -> CrawlReport:
    """Собирает CrawlOutcome и проблемы сайта в CrawlReport.

    Счётчики учитывают только нерешённые проблемы: те же, что вошли в health score.
    """
    open_issues = [i for i in issues if not i.resolved]
    severity_counts = Counter(i.severity.value for i in open_issues)
    return CrawlReport(
        site_id=outcome.site_id,
        success=outcome.success,
        health_score=outcome.health_score,
        error=outcome.error,
        pages=_page_info(outcome),
        issues=_issue_info(issues),
        severity_counts={s.value: severity_counts.get(s.value, 0) for s in Severity},
        type_counts=dict(Counter(i.type.value for i in open_issues)),
    )


__all__ = ["PageInfo", "IssueInfo", "CrawlReport", "aggregate_results"]
