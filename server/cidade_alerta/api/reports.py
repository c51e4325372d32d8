"""Report listing, proximity, map marker and heatmap endpoints.

This is the thin FastAPI adapter. The store does equality filtering; the
geo work is done by cidade_alerta.core.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from cidade_alerta.core.clustering import heatmap_points, map_markers, markers_to_geojson
from cidade_alerta.core.geo import format_distance
from cidade_alerta.core.models import (
    Category,
    Coordinate,
    DistanceAnnotatedReport,
    Severity,
    Status,
    report_to_dict,
)
from cidade_alerta.core.proximity import filter_nearby

router = APIRouter(prefix="/api/v1")

log = structlog.get_logger()


def _reference(lat: float | None, lon: float | None) -> Coordinate | None:
    if lat is None and lon is None:
        return None
    return Coordinate(latitude=lat, longitude=lon)


def _half_reference_error() -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "lat and lon must be given together"},
    )


def _annotated_to_dict(item: DistanceAnnotatedReport) -> dict:
    result = report_to_dict(item.report)
    result["distance"] = round(item.distance_m, 1)
    result["distanceLabel"] = format_distance(item.distance_m)
    return result


@router.get("/reports")
async def list_reports(
    category: Category | None = None,
    severity: Severity | None = None,
    status: Status | None = None,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lon: float | None = Query(default=None, ge=-180, le=180),
    radius_m: float | None = Query(default=None, ge=0),
) -> JSONResponse:
    """List reports, optionally limited to a radius around ``lat``/``lon``.

    Without a reference point reports come back in store order. With one,
    they are sorted by distance and carry ``distance`` (meters) and
    ``distanceLabel``.
    """
    from cidade_alerta.main import get_config, get_store

    if (lat is None) != (lon is None):
        return _half_reference_error()

    reports = get_store().query(category=category, severity=severity, status=status)
    reference = _reference(lat, lon)
    if reference is None:
        return JSONResponse(content={
            "reports": [report_to_dict(r) for r in reports],
            "total": len(reports),
        })

    if radius_m is None:
        radius_m = get_config().geo.query_radius_m
    nearby = filter_nearby(reference, radius_m, reports)
    log.debug("reports_filtered", candidates=len(reports), kept=len(nearby), radius_m=radius_m)
    return JSONResponse(content={
        "reports": [_annotated_to_dict(item) for item in nearby],
        "total": len(nearby),
    })


@router.get("/reports/nearby")
async def nearby_reports(
    lat: float = Query(ge=-90, le=90),
    lon: float = Query(ge=-180, le=180),
    radius_m: float | None = Query(default=None, ge=0),
) -> JSONResponse:
    """Reports close to the device, nearest first."""
    from cidade_alerta.main import get_config, get_store

    if radius_m is None:
        radius_m = get_config().geo.nearby_radius_m
    nearby = filter_nearby(Coordinate(lat, lon), radius_m, get_store().query())
    return JSONResponse(content={
        "radius_m": radius_m,
        "count": len(nearby),
        "reports": [_annotated_to_dict(item) for item in nearby],
    })


@router.get("/reports/{report_id}")
async def get_report(report_id: str) -> JSONResponse:
    from cidade_alerta.main import get_store

    return JSONResponse(content=report_to_dict(get_store().get(report_id)))


@router.get("/markers")
async def get_markers(
    category: Category | None = None,
    severity: Severity | None = None,
    lat: float | None = Query(default=None, ge=-90, le=90),
    lon: float | None = Query(default=None, ge=-180, le=180),
    radius_m: float | None = Query(default=None, ge=0),
    bucket_size: float | None = Query(default=None, gt=0),
) -> JSONResponse:
    """Return map markers as a GeoJSON FeatureCollection.

    With ``lat``/``lon`` only reports within ``radius_m`` are shown and they
    are grouped into grid clusters; without, every report is its own marker.
    """
    from cidade_alerta.main import get_config, get_store

    if (lat is None) != (lon is None):
        return _half_reference_error()

    geo = get_config().geo
    reports = get_store().query(category=category, severity=severity)
    markers = map_markers(
        reports,
        bucket_size=bucket_size if bucket_size is not None else geo.bucket_size_deg,
        reference=_reference(lat, lon),
        radius_m=radius_m if radius_m is not None else geo.nearby_radius_m,
    )
    return JSONResponse(content=markers_to_geojson(markers), media_type="application/geo+json")


@router.get("/heatmap")
async def get_heatmap() -> JSONResponse:
    """Weighted points for the heatmap layer."""
    from cidade_alerta.main import get_store

    points = heatmap_points(get_store().query())
    return JSONResponse(content={"points": points, "total": len(points)})
