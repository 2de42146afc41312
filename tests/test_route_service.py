# tests/test_route_service.py
from __future__ import annotations
import pytest
import requests

from app import create_app
from errors import STATUS_APPROXIMATE, STATUS_OK
from blueprints.navigation.providers import (
    DIRECTIONS_KEY, DirectionsProvider, MapboxDirectionsClient, ProviderError,
)
from blueprints.navigation.services import (
    FALLBACK_WARNING, Coordinate, resolve_route,
)

START = Coordinate(43.6577, -79.3788)
END = Coordinate(43.65197, -79.3799)

ROUTE_PAYLOAD = {
    "distance": 320.0,
    "duration": 240.0,
    "geometry": [(43.6577, -79.3788), (43.6550, -79.3792), (43.65197, -79.3799)],
    "steps": [
        {"distance": 120.0, "instruction": "Head south on Church St", "maneuver": "depart"},
        {"distance": 200.0, "instruction": "Turn right onto Gould St", "maneuver": "turn"},
    ],
}


class StubProvider(DirectionsProvider):
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def route(self, start, end):
        self.calls.append((start, end))
        if self.error:
            raise self.error
        return self.result


def assert_fallback(result):
    assert result.status == STATUS_APPROXIMATE
    assert result.is_approximate
    assert result.polyline == [START, END]
    assert result.steps == []
    assert result.warning == FALLBACK_WARNING


def test_provider_route_used():
    provider = StubProvider(ROUTE_PAYLOAD)
    result = resolve_route(START, END, provider)
    assert result.status == STATUS_OK
    assert len(result.polyline) == 3
    assert [s.instruction for s in result.steps][1] == "Turn right onto Gould St"
    assert result.distance_m == 320.0
    assert provider.calls == [(START.as_tuple(), END.as_tuple())]


@pytest.mark.parametrize("provider", [
    StubProvider(error=ProviderError("timeout")),
    StubProvider(result=None),
    StubProvider(result=dict(ROUTE_PAYLOAD, geometry=[(43.6577, -79.3788)])),
    StubProvider(result=dict(ROUTE_PAYLOAD, geometry=[(999, 0), (0, 0)])),
    StubProvider(result={"distance": 1.0}),
])
def test_fallback_straight_line(provider):
    assert_fallback(resolve_route(START, END, provider))


# ----- Mapbox client -----

MAPBOX_OK = {
    "code": "Ok",
    "routes": [{
        "distance": 320.4,
        "duration": 241.0,
        "geometry": {"coordinates": [[-79.3788, 43.6577], [-79.3799, 43.65197]]},
        "legs": [{"steps": [
            {"distance": 320.4, "maneuver": {"instruction": "Walk south", "type": "depart"}},
            {"distance": 0, "maneuver": {"instruction": "You have arrived", "type": "arrive"}},
        ]}],
    }],
}


def make_client(session, token="tok"):
    return MapboxDirectionsClient(token, "https://example.test/directions/v5/mapbox/",
                                  profile="walking", session=session)


def test_mapbox_request_and_parse(fake_session, fake_response):
    sess = fake_session(fake_response(MAPBOX_OK))
    data = make_client(sess).route(START.as_tuple(), END.as_tuple())
    call = sess.calls[0]
    assert call["url"] == "https://example.test/directions/v5/mapbox/walking/-79.3788,43.6577;-79.3799,43.65197"
    assert call["params"]["access_token"] == "tok"
    assert data["geometry"] == [(43.6577, -79.3788), (43.65197, -79.3799)]
    assert [s["maneuver"] for s in data["steps"]] == ["depart", "arrive"]
    assert data["distance"] == 320.4


def test_mapbox_no_route_is_none(fake_session, fake_response):
    sess = fake_session(fake_response({"code": "NoRoute", "routes": []}))
    assert make_client(sess).route(START.as_tuple(), END.as_tuple()) is None


@pytest.mark.parametrize("resp", [
    requests.ConnectionError("boom"),
    "http401",
    "nonjson",
    "badshape",
])
def test_mapbox_failures_raise(fake_session, fake_response, resp):
    if resp == "http401":
        resp = fake_response({"message": "Not Authorized - Invalid Token"}, status_code=401)
    elif resp == "nonjson":
        resp = fake_response(raw="<html>", status_code=502)
    elif resp == "badshape":
        resp = fake_response({"code": "Ok", "routes": [{"geometry": {}}]})
    with pytest.raises(ProviderError):
        make_client(fake_session(resp)).route(START.as_tuple(), END.as_tuple())


def test_mapbox_missing_token_raises_without_request(fake_session, fake_response):
    sess = fake_session(fake_response(MAPBOX_OK))
    with pytest.raises(ProviderError):
        make_client(sess, token="").route(START.as_tuple(), END.as_tuple())
    assert sess.calls == []


# ----- /route endpoint -----

@pytest.fixture()
def app():
    app = create_app("test")
    app.extensions[DIRECTIONS_KEY] = StubProvider(ROUTE_PAYLOAD)
    return app


def test_route_endpoint_to_classroom(app):
    with app.test_client() as c:
        r = c.get("/api/v1/route?from=43.6577,-79.3788&classroom=KHE-123")
    assert r.status_code == 200
    body = r.get_json()
    assert body["status"] == "ok"
    assert body["classroom"] == "KHE-123"
    assert body["arrived"] is False
    assert len(body["steps"]) == 2


def test_route_endpoint_fallback(app):
    app.extensions[DIRECTIONS_KEY] = StubProvider(error=ProviderError("down"))
    with app.test_client() as c:
        r = c.get("/api/v1/route?from=43.6577,-79.3788&to=43.65197,-79.3799")
    body = r.get_json()
    assert r.status_code == 200
    assert body["approximate"] is True
    assert body["polyline"] == [[43.6577, -79.3788], [43.65197, -79.3799]]
    assert body["warning"] == FALLBACK_WARNING


def test_route_endpoint_errors(app):
    with app.test_client() as c:
        assert c.get("/api/v1/route?from=43.6577,-79.3788&classroom=NOPE-1").status_code == 404
        r = c.get("/api/v1/route?classroom=KHE-123")
        assert r.status_code == 400
        assert r.get_json()["field"] == "from"
        assert c.get("/api/v1/route?from=43.6577,-79.3788&to=91,0").status_code == 400


def test_distance_endpoint(app):
    with app.test_client() as c:
        r = c.get("/api/v1/distance?from=43.65197,-79.3799&classroom=KHE-123")
        body = r.get_json()
        assert body["arrived"] is True
        assert body["distance_m"] < 10
        r = c.get("/api/v1/distance?from=43.6577,-79.3788&classroom=KHE-123&threshold=1000")
        assert r.get_json()["arrived"] is True
        assert c.get("/api/v1/distance?from=43.6577,-79.3788&classroom=KHE-123&threshold=-1").status_code == 400


def test_route_bad_threshold_skips_provider(app):
    provider = app.extensions[DIRECTIONS_KEY]
    with app.test_client() as c:
        r = c.get("/api/v1/route?from=43.6577,-79.3788&classroom=KHE-123&threshold=abc")
    assert r.status_code == 400
    assert r.get_json()["field"] == "threshold"
    assert provider.calls == []
