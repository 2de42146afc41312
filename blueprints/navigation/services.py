# blueprints/navigation/services.py
from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional

from errors import InvalidArgument, STATUS_APPROXIMATE, STATUS_OK
from blueprints.directory.validators import ensure_coordinate_range
from .providers import DirectionsProvider, GeocodeCandidate, Geocoder, ProviderError

log = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_PROXIMITY_M = 10.0
FALLBACK_WARNING = "Directions unavailable, showing a straight line; the route may be approximate."


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float

    def __post_init__(self):
        for name in ("lat", "lon"):
            val = getattr(self, name)
            if isinstance(val, bool) or not isinstance(val, Real) or not math.isfinite(val):
                raise InvalidArgument("coordinates", f"{name} must be a finite number")
        try:
            ensure_coordinate_range(self.lat, self.lon)
        except ValueError as e:
            raise InvalidArgument("coordinates", str(e)) from e

    @classmethod
    def parse(cls, raw: str | None, field_name: str = "coordinates") -> "Coordinate":
        """'43.65,-79.38' -> Coordinate"""
        if raw is None or not str(raw).strip():
            raise InvalidArgument(field_name)
        parts = str(raw).split(",")
        if len(parts) != 2:
            raise InvalidArgument(field_name, f"{field_name} must be 'lat,lon'")
        try:
            lat, lon = float(parts[0]), float(parts[1])
        except ValueError as e:
            raise InvalidArgument(field_name, f"{field_name} must be 'lat,lon'") from e
        try:
            return cls(lat, lon)
        except InvalidArgument as e:
            raise InvalidArgument(field_name, str(e)) from e

    def as_tuple(self):
        return (self.lat, self.lon)


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Расстояние по большому кругу в метрах."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    d_phi = math.radians(b.lat - a.lat)
    d_lambda = math.radians(b.lon - a.lon)

    h = (math.sin(d_phi / 2) ** 2
         + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2)
    # h может чуть вылезти за 1 из-за округления
    h = min(1.0, max(0.0, h))
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def proximity_alert(user: Coordinate, destination: Coordinate,
                    threshold_m: float = DEFAULT_PROXIMITY_M) -> bool:
    return haversine_distance(user, destination) <= threshold_m


@dataclass(frozen=True)
class RouteStep:
    distance: float
    instruction: str
    maneuver: Optional[str] = None


@dataclass
class RouteResult:
    status: str
    polyline: List[Coordinate]
    steps: List[RouteStep] = field(default_factory=list)
    distance_m: Optional[float] = None
    duration_s: Optional[float] = None
    warning: Optional[str] = None

    @property
    def is_approximate(self) -> bool:
        return self.status == STATUS_APPROXIMATE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "approximate": self.is_approximate,
            "distance_m": self.distance_m,
            "duration_s": self.duration_s,
            "polyline": [[p.lat, p.lon] for p in self.polyline],
            "steps": [
                {"distance": s.distance, "instruction": s.instruction, "maneuver": s.maneuver}
                for s in self.steps
            ],
            "warning": self.warning,
        }


def fallback_route(start: Coordinate, end: Coordinate, warning: str = FALLBACK_WARNING) -> RouteResult:
    return RouteResult(status=STATUS_APPROXIMATE, polyline=[start, end], warning=warning)


def resolve_route(start: Coordinate, end: Coordinate, provider: DirectionsProvider) -> RouteResult:
    """Маршрут от провайдера; при любой его неудаче прямая из двух точек."""
    if start is None:
        raise InvalidArgument("start")
    if end is None:
        raise InvalidArgument("end")
    try:
        payload = provider.route(start.as_tuple(), end.as_tuple())
    except ProviderError as e:
        log.warning("directions provider failed, using straight line: %s", e,
                    extra={"event": "route_fallback"})
        return fallback_route(start, end)

    if not payload:
        log.warning("no route between %s and %s, using straight line",
                    start.as_tuple(), end.as_tuple(), extra={"event": "route_fallback"})
        return fallback_route(start, end)

    try:
        polyline = [Coordinate(lat, lon) for lat, lon in payload["geometry"]]
        steps = [
            RouteStep(
                distance=max(0.0, float(s["distance"])),
                instruction=s.get("instruction") or "",
                maneuver=s.get("maneuver"),
            )
            for s in payload.get("steps", [])
        ]
    except (InvalidArgument, KeyError, TypeError, ValueError) as e:
        log.warning("unusable route geometry, using straight line: %s", e,
                    extra={"event": "route_fallback"})
        return fallback_route(start, end)
    if len(polyline) < 2:
        return fallback_route(start, end)

    return RouteResult(
        status=STATUS_OK,
        polyline=polyline,
        steps=steps,
        distance_m=payload.get("distance"),
        duration_s=payload.get("duration"),
    )


def geocode(geocoder: Geocoder, text: str) -> List[GeocodeCandidate]:
    if text is None or not text.strip():
        raise InvalidArgument("q")
    return geocoder.search(text.strip())


def geocode_first(geocoder: Geocoder, text: str) -> Optional[GeocodeCandidate]:
    candidates = geocode(geocoder, text)
    return candidates[0] if candidates else None
