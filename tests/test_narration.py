# tests/test_narration.py
from __future__ import annotations
import pytest

from app import create_app
from blueprints.navigation.narration import format_distance, narrate
from blueprints.navigation.providers import DIRECTIONS_KEY, DirectionsProvider, ProviderError
from blueprints.navigation.services import Coordinate, RouteResult, RouteStep, fallback_route


@pytest.mark.parametrize("meters,text", [
    (0, "0 meters"),
    (12.4, "12 meters"),
    (12.5, "13 meters"),
    (999.4, "999 meters"),
    (1000, "1.0 kilometers"),
    (1549, "1.5 kilometers"),
])
def test_format_distance(meters, text):
    assert format_distance(meters) == text


def test_narrate_steps():
    route = RouteResult(
        status="ok",
        polyline=[Coordinate(0, 0), Coordinate(0, 0.01)],
        steps=[RouteStep(120, "Head south"), RouteStep(1500, "Turn left")],
        distance_m=1620,
    )
    assert narrate("KHE-123", route) == (
        "Directions to KHE-123. Total distance: 1.6 kilometers. "
        "Step 1: Head south. Distance: 120 meters. "
        "Step 2: Turn left. Distance: 1.5 kilometers."
    )


def test_narrate_nothing_to_say():
    assert narrate("KHE-123", fallback_route(Coordinate(0, 0), Coordinate(0, 1))) is None


class Fixed(DirectionsProvider):
    def __init__(self, payload=None, error=None):
        self.payload, self.error = payload, error

    def route(self, start, end):
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture()
def app():
    return create_app("test")


def test_readout_endpoint(app):
    app.extensions[DIRECTIONS_KEY] = Fixed({
        "distance": 40.0, "duration": 30.0,
        "geometry": [(43.6577, -79.3788), (43.65197, -79.3799)],
        "steps": [{"distance": 40.0, "instruction": "Walk south"}],
    })
    with app.test_client() as c:
        r = c.get("/api/v1/directions/readout?from=43.6577,-79.3788&classroom=KHE-123")
    assert r.status_code == 200
    assert r.get_json()["text"].startswith("Directions to KHE-123. Total distance: 40 meters.")


def test_readout_without_route_is_conflict(app):
    app.extensions[DIRECTIONS_KEY] = Fixed(error=ProviderError("down"))
    with app.test_client() as c:
        r = c.get("/api/v1/directions/readout?from=43.6577,-79.3788&classroom=KHE-123")
        assert r.status_code == 409
        assert r.get_json()["error"] == "no_route"
        assert c.get("/api/v1/directions/readout?from=43.6577,-79.3788").status_code == 400
