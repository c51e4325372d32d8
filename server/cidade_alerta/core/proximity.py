"""Proximity filter: which reports are near a reference point."""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from cidade_alerta.core.errors import InvalidCoordinateError
from cidade_alerta.core.geo import haversine_m, is_usable
from cidade_alerta.core.models import Coordinate, DistanceAnnotatedReport, Report

log = structlog.get_logger()


def _usable_reports(reports: Iterable[Report]) -> Iterable[Report]:
    for report in reports:
        if is_usable(report.location):
            yield report
        else:
            log.debug("report_skipped_invalid_location", report_id=report.id)


def filter_nearby(
    reference: Coordinate,
    radius_m: float,
    reports: Iterable[Report],
) -> list[DistanceAnnotatedReport]:
    """Return reports within ``radius_m`` meters of ``reference``.

    Each result carries its distance. Results are sorted by ascending
    distance; reports at the same distance keep their input order.
    Reports without a usable location are left out.
    """
    if not is_usable(reference):
        raise InvalidCoordinateError(f"unusable reference coordinate {reference!r}")

    nearby: list[DistanceAnnotatedReport] = []
    for report in _usable_reports(reports):
        loc = report.location
        d = haversine_m(reference.latitude, reference.longitude, loc.latitude, loc.longitude)
        if d <= radius_m:
            nearby.append(DistanceAnnotatedReport(report=report, distance_m=d))

    nearby.sort(key=lambda item: item.distance_m)
    return nearby


def count_nearby(reference: Coordinate, radius_m: float, reports: Iterable[Report]) -> int:
    """Number of reports within ``radius_m`` meters of ``reference``."""
    return len(filter_nearby(reference, radius_m, reports))
