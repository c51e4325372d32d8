"""In-process list-backed implementation of ReportStore."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from cidade_alerta.core.errors import NotFoundError

if TYPE_CHECKING:
    from cidade_alerta.core.models import Category, Report, Severity, Status


def matches_filters(report: Report, category, severity, status) -> bool:
    if category is not None and report.category != category:
        return False
    if severity is not None and report.severity != severity:
        return False
    if status is not None and report.status != status:
        return False
    return True


class MemoryReportStore:
    """ReportStore backed by a Python list. Zero dependencies."""

    def __init__(self, reports: Iterable[Report] = ()) -> None:
        self._reports: list[Report] = list(reports)

    def add(self, report: Report) -> None:
        self._reports.append(report)

    def query(
        self,
        category: Category | None = None,
        severity: Severity | None = None,
        status: Status | None = None,
    ) -> list[Report]:
        return [r for r in self._reports if matches_filters(r, category, severity, status)]

    def get(self, report_id: str) -> Report:
        for report in self._reports:
            if report.id == report_id:
                return report
        raise NotFoundError(f"report {report_id} not found")

    def __len__(self) -> int:
        return len(self._reports)
