# File: site_health/detector.py
"""site_health.detector: rule-based on-page SEO issue detection.

:func:`detect_issues` is pure: the same snapshot always yields the same
ordered list of issues. Rules are evaluated in the order of :data:`RULES`;
within a rule group at most one issue fires (e.g. a title is either missing,
too long, too short, or fine).
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from site_health.crawler.models import Issue, IssueType, PageSnapshot, Severity

__all__ = [
    "TITLE_MAX_LENGTH",
    "TITLE_MIN_LENGTH",
    "META_DESCRIPTION_MAX_LENGTH",
    "MIN_CONTENT_LENGTH",
    "SLOW_LOAD_MS",
    "RULES",
    "detect_issues",
    "crawl_error_issue",
]

TITLE_MAX_LENGTH = 60
TITLE_MIN_LENGTH = 30
META_DESCRIPTION_MAX_LENGTH = 160
MIN_CONTENT_LENGTH = 300
SLOW_LOAD_MS = 3000

# (type, severity, description, suggested fix)
_Finding = Tuple[IssueType, Severity, str, str]
Rule = Callable[[PageSnapshot], Iterator[_Finding]]


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _title_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    title = snap.title
    if _blank(title):
        yield (
            IssueType.MISSING_TITLE,
            Severity.CRITICAL,
            "Page is missing a title tag",
            "Add a descriptive title tag (50-60 characters)",
        )
        return
    length = len(title)
    if length > TITLE_MAX_LENGTH:
        yield (
            IssueType.TITLE_TOO_LONG,
            Severity.MEDIUM,
            f"Title is too long ({length} characters)",
            "Shorten title to 50-60 characters",
        )
    elif length < TITLE_MIN_LENGTH:
        yield (
            IssueType.TITLE_TOO_SHORT,
            Severity.LOW,
            f"Title is too short ({length} characters)",
            "Expand title to 30-60 characters",
        )


def _meta_description_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    description = snap.meta_description
    if _blank(description):
        yield (
            IssueType.MISSING_META_DESCRIPTION,
            Severity.HIGH,
            "Page is missing a meta description",
            "Add a compelling meta description (150-160 characters)",
        )
        return
    length = len(description)
    if length > META_DESCRIPTION_MAX_LENGTH:
        yield (
            IssueType.META_DESCRIPTION_TOO_LONG,
            Severity.MEDIUM,
            f"Meta description is too long ({length} characters)",
            "Shorten meta description to 150-160 characters",
        )


def _h1_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    count = len(snap.h1)
    if count == 0:
        yield (
            IssueType.MISSING_H1,
            Severity.HIGH,
            "Page is missing an H1 tag",
            "Add a descriptive H1 tag that includes your target keyword",
        )
    elif count > 1:
        yield (
            IssueType.MULTIPLE_H1,
            Severity.MEDIUM,
            f"Page has multiple H1 tags ({count})",
            "Use only one H1 tag per page",
        )


def _image_alt_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    missing = snap.images_without_alt
    if missing > 0:
        yield (
            IssueType.IMAGES_MISSING_ALT,
            Severity.MEDIUM,
            f"{missing} images are missing alt text",
            "Add descriptive alt text to all images for accessibility and SEO",
        )


def _content_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    length = snap.content_length
    if length < MIN_CONTENT_LENGTH:
        yield (
            IssueType.THIN_CONTENT,
            Severity.MEDIUM,
            f"Page has thin content ({length} characters)",
            "Add more valuable, relevant content (aim for 300+ words)",
        )


def _load_time_rule(snap: PageSnapshot) -> Iterator[_Finding]:
    if snap.load_time_ms > SLOW_LOAD_MS:
        # half-up rounding to whole seconds
        seconds = (snap.load_time_ms + 500) // 1000
        yield (
            IssueType.SLOW_LOADING,
            Severity.HIGH,
            f"Page loads slowly ({seconds}s)",
            "Optimize images, minify CSS/JS, and consider using a CDN",
        )


RULES: Sequence[Rule] = (
    _title_rule,
    _meta_description_rule,
    _h1_rule,
    _image_alt_rule,
    _content_rule,
    _load_time_rule,
)


def detect_issues(
    snapshot: PageSnapshot, site_id: str = "", page_url: Optional[str] = None
) -> List[Issue]:
    """Evaluate every rule against *snapshot* and return the issues in rule order.

    Issues are filed under *page_url* when given, otherwise under ``snapshot.url``.
    """
    page_url = page_url or snapshot.url
    return [
        Issue(
            site_id=site_id,
            page_url=page_url,
            type=issue_type,
            severity=severity,
            description=description,
            suggested_fix=fix,
        )
        for rule in RULES
        for issue_type, severity, description, fix in rule(snapshot)
    ]


def crawl_error_issue(site_id: str, page_url: str, error: object) -> Issue:
    """Synthetic issue recorded for a page that could not be fetched."""
    return Issue(
        site_id=site_id,
        page_url=page_url,
        type=IssueType.CRAWL_ERROR,
        severity=Severity.HIGH,
        description=f"Failed to crawl page: {error}",
        suggested_fix="Check if the page is accessible and fix any server errors",
    )
