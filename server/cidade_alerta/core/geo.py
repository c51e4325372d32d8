"""Great-circle distance between coordinates.

All distances in this package are in meters.
"""

from __future__ import annotations

import math

from cidade_alerta.core.errors import InvalidCoordinateError
from cidade_alerta.core.models import Coordinate

# Earth radius in meters (for Haversine).
EARTH_RADIUS_M = 6_371_000.0


def _is_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def is_usable(coord: object) -> bool:
    """True if both components are finite real numbers."""
    if coord is None:
        return False
    return _is_number(getattr(coord, "latitude", None)) and _is_number(
        getattr(coord, "longitude", None)
    )


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points."""
    rlat1, rlat2 = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = math.sin(dlat / 2) ** 2 + math.cos(rlat1) * math.cos(rlat2) * math.sin(dlon / 2) ** 2
    # Rounding can push a slightly above 1 for antipodal points.
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(a, 1.0)))


def distance(a: Coordinate, b: Coordinate) -> float:
    """Haversine distance in meters between two coordinates.

    Raises InvalidCoordinateError if either coordinate is unusable.
    """
    if not is_usable(a):
        raise InvalidCoordinateError(f"unusable coordinate {a!r}")
    if not is_usable(b):
        raise InvalidCoordinateError(f"unusable coordinate {b!r}")
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def format_distance(meters: float) -> str:
    """Human-readable distance: whole meters below 1 km, else km with one decimal."""
    if meters < 1000:
        return f"{round(meters)}m"
    return f"{meters / 1000:.1f}km"
