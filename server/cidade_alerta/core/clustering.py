"""Map marker clustering: groups nearby reports into grid buckets.

Uses axis-aligned grid snapping: each coordinate is rounded to the nearest
multiple of ``bucket_size`` degrees on each axis and reports sharing the
rounded pair are grouped. The mobile map zooms into a cluster at its
rounded center, so the rounding must match the client's exactly
(``Math.round``: halves go toward +infinity).
"""

from __future__ import annotations

import math
from collections.abc import Iterable

import structlog

from cidade_alerta.core.geo import is_usable
from cidade_alerta.core.models import Cluster, Coordinate, Marker, Report, Severity
from cidade_alerta.core.proximity import filter_nearby

log = structlog.get_logger()

# Default bucket size in degrees (roughly 500 m of latitude).
DEFAULT_BUCKET_SIZE = 0.005

# Heatmap intensity per severity.
SEVERITY_WEIGHTS = {
    Severity.HIGH: 1.0,
    Severity.MEDIUM: 0.7,
    Severity.LOW: 0.4,
}


def _snap_index(value: float, bucket_size: float) -> int:
    return math.floor(value / bucket_size + 0.5)


def bucket_key(coord: Coordinate, bucket_size: float) -> tuple[int, int]:
    """Grid indices of the bucket a coordinate falls into."""
    return (
        _snap_index(coord.latitude, bucket_size),
        _snap_index(coord.longitude, bucket_size),
    )


def cluster(reports: Iterable[Report], bucket_size: float = DEFAULT_BUCKET_SIZE) -> list[Marker | Cluster]:
    """Group reports into grid buckets.

    A bucket with one report yields a Marker at the report's own position;
    a bucket with several yields a Cluster at the bucket center holding all
    of them. Buckets come out in the order they were first seen. Reports
    without a usable location are dropped.
    """
    if not bucket_size > 0:
        raise ValueError(f"bucket_size must be positive, got {bucket_size!r}")

    buckets: dict[tuple[int, int], list[Report]] = {}
    for report in reports:
        if not is_usable(report.location):
            log.debug("report_skipped_invalid_location", report_id=report.id)
            continue
        key = bucket_key(report.location, bucket_size)
        buckets.setdefault(key, []).append(report)

    result: list[Marker | Cluster] = []
    for key, members in buckets.items():
        if len(members) == 1:
            result.append(Marker(report=members[0]))
        else:
            result.append(Cluster(
                key=key,
                latitude=key[0] * bucket_size,
                longitude=key[1] * bucket_size,
                members=members,
            ))
    return result


def map_markers(
    reports: Iterable[Report],
    bucket_size: float = DEFAULT_BUCKET_SIZE,
    reference: Coordinate | None = None,
    radius_m: float | None = None,
) -> list[Marker | Cluster]:
    """Markers for the map view.

    Without a reference point every usable report gets its own marker.
    With one, only reports within ``radius_m`` are kept and those are
    clustered.
    """
    if reference is None:
        return [Marker(report=r) for r in reports if is_usable(r.location)]

    if radius_m is None:
        raise ValueError("radius_m is required when a reference is given")
    nearby = [item.report for item in filter_nearby(reference, radius_m, reports)]
    return cluster(nearby, bucket_size)


def heatmap_points(reports: Iterable[Report]) -> list[dict]:
    """Weighted heatmap points, one per report with a usable location."""
    return [
        {
            "latitude": r.location.latitude,
            "longitude": r.location.longitude,
            "weight": SEVERITY_WEIGHTS.get(r.severity, SEVERITY_WEIGHTS[Severity.LOW]),
        }
        for r in reports
        if is_usable(r.location)
    ]


def _marker_feature(marker: Marker | Cluster) -> dict:
    if isinstance(marker, Cluster):
        properties = {
            "id": marker.id,
            "is_cluster": True,
            "count": marker.count,
            "report_ids": [r.id for r in marker.members],
        }
    else:
        report = marker.report
        properties = {
            "id": report.id,
            "is_cluster": False,
            "count": 1,
            "title": report.title,
            "severity": report.severity.value,
            "category": report.category.value,
            "status": report.status.value,
        }
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [round(marker.longitude, 6), round(marker.latitude, 6)],
        },
        "properties": properties,
    }


def markers_to_geojson(markers: list[Marker | Cluster]) -> dict:
    """Convert markers to a GeoJSON FeatureCollection."""
    return {
        "type": "FeatureCollection",
        "features": [_marker_feature(m) for m in markers],
    }
