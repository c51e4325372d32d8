"""Tests for haversine distance and distance formatting."""

from __future__ import annotations

import math

import pytest

from cidade_alerta.core.errors import InvalidCoordinateError
from cidade_alerta.core.geo import distance, format_distance, is_usable
from cidade_alerta.core.models import Coordinate, Location


def test_same_point_is_zero():
    for coord in [Coordinate(0, 0), Coordinate(-23.5505, -46.6333), Coordinate(89.9, 179.9)]:
        assert distance(coord, coord) == 0


def test_symmetry():
    a = Coordinate(-23.5505, -46.6333)
    b = Coordinate(-22.9068, -43.1729)
    assert distance(a, b) == pytest.approx(distance(b, a))


def test_known_distances_in_meters():
    # One thousandth of a degree of longitude on the equator is ~111 m.
    assert distance(Coordinate(0, 0), Coordinate(0, 0.003)) == pytest.approx(333.6, abs=0.5)
    assert distance(Coordinate(0, 0), Coordinate(0, 0.01)) == pytest.approx(1112, abs=2)
    # São Paulo to Rio de Janeiro, roughly 360 km.
    sp_rio = distance(Coordinate(-23.5505, -46.6333), Coordinate(-22.9068, -43.1729))
    assert 355_000 < sp_rio < 365_000


def test_antipodal_points():
    d = distance(Coordinate(0, 0), Coordinate(0, 180))
    assert d == pytest.approx(math.pi * 6_371_000, rel=1e-9)


@pytest.mark.parametrize("bad", [
    Coordinate(float("nan"), 0),
    Coordinate(0, float("inf")),
    Coordinate(None, 0),
    Coordinate("12.5", 0),
    Coordinate(True, 0),
])
def test_unusable_coordinate_raises(bad):
    with pytest.raises(InvalidCoordinateError):
        distance(bad, Coordinate(0, 0))
    with pytest.raises(ValueError):
        distance(Coordinate(0, 0), bad)


def test_is_usable():
    assert is_usable(Coordinate(0, 0))
    assert is_usable(Location(latitude=-23.5, longitude=-46, address="Av. Paulista"))
    assert not is_usable(Location(latitude=None, longitude=-46))
    assert not is_usable(None)


@pytest.mark.parametrize("meters, label", [
    (0, "0m"),
    (333.6, "334m"),
    (999.4, "999m"),
    (1000, "1.0km"),
    (1234, "1.2km"),
    (15_760, "15.8km"),
])
def test_format_distance(meters, label):
    assert format_distance(meters) == label
