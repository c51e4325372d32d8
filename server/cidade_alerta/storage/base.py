"""Storage interface (port) for reading problem reports."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from cidade_alerta.core.models import Category, Report, Severity, Status


class ReportStore(Protocol):
    """Port: returns full report records, filtered by equality only.

    Geo-radius queries are not supported here; callers filter by distance
    with cidade_alerta.core.proximity.
    """

    def query(
        self,
        category: Category | None = None,
        severity: Severity | None = None,
        status: Status | None = None,
    ) -> list[Report]: ...

    def get(self, report_id: str) -> Report: ...
