"""Dashboard metrics over a report collection.

No framework dependencies.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from cidade_alerta.core.models import (
    RESOLVED_STATUSES,
    Category,
    Report,
    Severity,
    report_to_dict,
)

RECENT_LIMIT = 10

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class DashboardMetrics:
    total: int = 0
    resolved_count: int = 0
    pending_count: int = 0
    by_category: dict[Category, int] = field(default_factory=dict)
    by_severity: dict[Severity, int] = field(default_factory=dict)
    recent: list[Report] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Return a JSON-serializable view of the metrics."""
        return {
            "totalProblems": self.total,
            "resolvedProblems": self.resolved_count,
            "pendingProblems": self.pending_count,
            "problemsByCategory": [
                {"category": c.value, "count": n} for c, n in self.by_category.items()
            ],
            "problemsBySeverity": [
                {"severity": s.value, "count": n} for s, n in self.by_severity.items()
            ],
            "recentProblems": [report_to_dict(r) for r in self.recent],
        }


def _created_key(report: Report) -> tuple[bool, datetime]:
    # Reports without a creation time sort after every dated one.
    created = report.created_at
    if created is None:
        return (False, _OLDEST)
    if created.tzinfo is None:
        # Naive times are UTC, as at the document boundary.
        created = created.replace(tzinfo=timezone.utc)
    return (True, created)


def aggregate(reports: Iterable[Report], recent_limit: int = RECENT_LIMIT) -> DashboardMetrics:
    """Summary counts for the authority dashboard.

    Every category and severity appears in the result, with 0 when nothing
    matches. ``recent`` holds the newest ``recent_limit`` reports.
    """
    reports = list(reports)
    categories = Counter(r.category for r in reports)
    severities = Counter(r.severity for r in reports)
    resolved = sum(1 for r in reports if r.status in RESOLVED_STATUSES)

    recent = sorted(reports, key=_created_key, reverse=True)[:recent_limit]

    return DashboardMetrics(
        total=len(reports),
        resolved_count=resolved,
        pending_count=len(reports) - resolved,
        by_category={c: categories.get(c, 0) for c in Category},
        by_severity={s: severities.get(s, 0) for s in Severity},
        recent=recent,
    )
