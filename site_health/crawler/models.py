# site_health/crawler/models.py
"""
Data models for the SiteHealth crawler.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional


@dataclass(slots=True, frozen=True)
class NavigationResult:
    """Outcome of a successful navigation: final URL, HTTP status, wall time."""

    url: str
    status_code: int
    elapsed_ms: int


@dataclass(slots=True, frozen=True)
class PageSnapshot:
    """Structured extraction of one rendered page."""

    url: str
    title: Optional[str] = None
    meta_description: Optional[str] = None
    h1: tuple[str, ...] = ()
    h2: tuple[str, ...] = ()
    image_count: int = 0
    images_without_alt: int = 0
    internal_links: int = 0
    external_links: int = 0
    content_length: int = 0
    load_time_ms: int = 0
    status_code: int = 200
    links: tuple[str, ...] = ()


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueType(str, Enum):
    MISSING_TITLE = "missing_title"
    TITLE_TOO_LONG = "title_too_long"
    TITLE_TOO_SHORT = "title_too_short"
    MISSING_META_DESCRIPTION = "missing_meta_description"
    META_DESCRIPTION_TOO_LONG = "meta_description_too_long"
    MISSING_H1 = "missing_h1"
    MULTIPLE_H1 = "multiple_h1"
    IMAGES_MISSING_ALT = "images_missing_alt"
    THIN_CONTENT = "thin_content"
    SLOW_LOADING = "slow_loading"
    CRAWL_ERROR = "crawl_error"


@dataclass(slots=True)
class Issue:
    """One detected on-page defect.

    ``created_at`` stays ``None`` until the issue store accepts the record.
    """

    site_id: str
    page_url: str
    type: IssueType
    severity: Severity
    description: str
    suggested_fix: Optional[str] = None
    resolved: bool = False
    created_at: Optional[datetime] = field(default=None, compare=False)

    def to_dict(self) -> dict[str, Any]:
        """Row representation used by the JSON store and reports."""
        return {
            "site_id": self.site_id,
            "page_url": self.page_url,
            "issue_type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "suggested_fix": self.suggested_fix,
            "is_fixed": self.resolved,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, row: dict[str, Any]) -> Issue:
        created = row.get("created_at")
        return cls(
            site_id=row["site_id"],
            page_url=row["page_url"],
            type=IssueType(row["issue_type"]),
            severity=Severity(row["severity"]),
            description=row["description"],
            suggested_fix=row.get("suggested_fix"),
            resolved=bool(row.get("is_fixed", False)),
            created_at=datetime.fromisoformat(created) if created else None,
        )


__all__ = ["NavigationResult", "PageSnapshot", "Severity", "IssueType", "Issue"]
