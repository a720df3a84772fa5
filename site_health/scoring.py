"""site_health.scoring: health score from unresolved issue severities."""

from __future__ import annotations

from typing import Iterable, Mapping, Union

from site_health.crawler.models import Severity

MAX_SCORE = 100

SEVERITY_PENALTIES: Mapping[Severity, int] = {
    Severity.CRITICAL: 20,
    Severity.HIGH: 10,
    Severity.MEDIUM: 5,
    Severity.LOW: 2,
}


def compute_health_score(severities: Iterable[Union[Severity, str]]) -> int:
    """Start at 100, subtract a fixed penalty per issue, never go below 0.

    Raises ValueError for a severity outside low/medium/high/critical.
    """
    score = MAX_SCORE
    for severity in severities:
        score -= SEVERITY_PENALTIES[Severity(severity)]
    return max(score, 0)


__all__ = ["MAX_SCORE", "SEVERITY_PENALTIES", "compute_health_score"]
