# tests/test_geo.py
from __future__ import annotations
import math
import pytest

from errors import InvalidArgument
from blueprints.navigation.services import (
    Coordinate, haversine_distance, proximity_alert,
)

KHE = Coordinate(43.65196973085074, -79.37990394697654)
ENG = Coordinate(43.65897, -79.37834)

# ~1e-5 градуса широты ≈ 1.11 м
def north_of(c: Coordinate, meters: float) -> Coordinate:
    return Coordinate(c.lat + meters / 111_195.0, c.lon)


def test_zero_distance_and_symmetry():
    assert haversine_distance(KHE, KHE) == 0.0
    assert haversine_distance(KHE, ENG) == pytest.approx(haversine_distance(ENG, KHE))


def test_known_distance_campus():
    # KHE → ENG примерно 790 м
    assert haversine_distance(KHE, ENG) == pytest.approx(790, rel=0.02)


def test_antipodes_do_not_blow_up():
    d = haversine_distance(Coordinate(0, 0), Coordinate(0, 180))
    assert d == pytest.approx(math.pi * 6_371_000, rel=1e-9)


def test_proximity_threshold():
    assert proximity_alert(north_of(KHE, 9.99), KHE) is True
    assert proximity_alert(north_of(KHE, 11), KHE) is False
    assert proximity_alert(north_of(KHE, 11), KHE, threshold_m=20) is True


def test_proximity_boundary_inclusive():
    p = north_of(KHE, 10)
    d = haversine_distance(p, KHE)
    assert proximity_alert(p, KHE, threshold_m=d) is True
    assert proximity_alert(p, KHE, threshold_m=d - 1e-6) is False


@pytest.mark.parametrize("lat,lon", [(91, 0), (-91, 0), (0, 181), (float("nan"), 0), (0, float("inf"))])
def test_coordinate_out_of_range(lat, lon):
    with pytest.raises(InvalidArgument):
        Coordinate(lat, lon)


def test_coordinate_parse():
    assert Coordinate.parse(" 43.65, -79.38 ").as_tuple() == (43.65, -79.38)
    for raw in (None, "", "43.65", "a,b", "1,2,3", "100,0"):
        with pytest.raises(InvalidArgument) as ei:
            Coordinate.parse(raw, "from")
        assert ei.value.field == "from"
