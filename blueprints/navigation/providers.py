# blueprints/navigation/providers.py
#Адаптеры внешних сервисов: маршруты (Mapbox Directions) и геокодинг (Nominatim).
#Единственная задача: сходить по HTTP и вернуть нормализованный ответ.
#Внутри везде (lat, lon); перевод в (lon, lat) только на границе с Mapbox.
#Никаких повторов: одна неудачная попытка -> ProviderError, решение о фолбэке выше.
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

log = logging.getLogger(__name__)

# Internal coordinate type: (lat, lon)
LatLon = Tuple[float, float]


class ProviderError(Exception):
    """Внешний сервис недоступен или вернул ошибку."""


@dataclass(frozen=True)
class GeocodeCandidate:
    name: str
    coordinates: LatLon


class DirectionsProvider(ABC):
    @abstractmethod
    def route(self, start: LatLon, end: LatLon) -> Optional[Dict[str, Any]]:
        """
        Пеший маршрут между двумя точками.

        Returns:
            {
                "distance": float,           # meters, total
                "duration": float | None,    # seconds
                "geometry": [(lat, lon), ...],
                "steps": [{"distance", "instruction", "maneuver"}, ...],
            }
            или None, если маршрута нет (это штатный исход).
        Raises:
            ProviderError: сеть, статус не 2xx, неразборчивый ответ.
        """


class Geocoder(ABC):
    @abstractmethod
    def search(self, text: str) -> List[GeocodeCandidate]:
        """Кандидаты по свободному тексту; первый считается основным."""


class MapboxDirectionsClient(DirectionsProvider):
    def __init__(self, token: str, base_url: str, *, profile: str = "walking",
                 timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout = timeout
        self.session = session or requests.Session()

    def format_coordinates(self, coords: List[LatLon]) -> str:
        """(lat, lon) -> 'lon,lat;lon,lat'"""
        return ";".join(f"{lon},{lat}" for lat, lon in coords)

    def route(self, start: LatLon, end: LatLon) -> Optional[Dict[str, Any]]:
        if not self.token:
            raise ProviderError("MAPBOX_TOKEN is not configured")
        url = f"{self.base_url}/{self.profile}/{self.format_coordinates([start, end])}"
        params = {
            "geometries": "geojson",
            "steps": "true",
            "access_token": self.token,
        }
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"directions request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"directions returned non-JSON (HTTP {response.status_code})") from e

        if not response.ok:
            msg = data.get("message") if isinstance(data, dict) else None
            raise ProviderError(msg or f"directions HTTP {response.status_code}")
        if not isinstance(data, dict):
            raise ProviderError("directions returned unexpected payload")

        code = data.get("code", "Ok")
        routes = data.get("routes") or []
        if code == "NoRoute" or not routes:
            return None
        if code != "Ok":
            raise ProviderError(f"directions error: {data.get('message', code)}")

        route = routes[0]  # берём первый маршрут
        try:
            geometry = [(float(lat), float(lon)) for lon, lat in route["geometry"]["coordinates"]]
            steps = []
            for leg in route.get("legs", [])[:1]:
                for step in leg.get("steps", []):
                    maneuver = step.get("maneuver") or {}
                    steps.append({
                        "distance": float(step.get("distance", 0.0)),
                        "instruction": maneuver.get("instruction", ""),
                        "maneuver": maneuver.get("type"),
                    })
            return {
                "distance": float(route["distance"]),
                "duration": float(route["duration"]) if route.get("duration") is not None else None,
                "geometry": geometry,
                "steps": steps,
            }
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"cannot parse directions response: {e}") from e


class NominatimGeocoder(Geocoder):
    def __init__(self, url: str, *, user_agent: str, timeout: float = 5.0,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, text: str) -> List[GeocodeCandidate]:
        try:
            response = self.session.get(
                self.url,
                params={"format": "json", "q": text},
                headers={"User-Agent": self.user_agent},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"geocoding request failed: {e}") from e
        except ValueError as e:
            raise ProviderError("geocoding returned non-JSON") from e

        if not isinstance(data, list):
            raise ProviderError("geocoding returned unexpected payload")
        out: List[GeocodeCandidate] = []
        for item in data:
            try:
                out.append(GeocodeCandidate(
                    name=item.get("display_name") or "",
                    coordinates=(float(item["lat"]), float(item["lon"])),
                ))
            except (KeyError, TypeError, ValueError):
                log.warning("skipping malformed geocoding candidate: %r", item)
        return out


DIRECTIONS_KEY = "directions_provider"
GEOCODER_KEY = "geocoder"

def init_providers(app) -> None:
    cfg = app.config
    if not cfg.get("MAPBOX_TOKEN"):
        log.warning("MAPBOX_TOKEN is empty: routes will be approximate straight lines")
    app.extensions.setdefault(DIRECTIONS_KEY, MapboxDirectionsClient(
        cfg.get("MAPBOX_TOKEN", ""),
        cfg["DIRECTIONS_BASE_URL"],
        profile=cfg.get("DIRECTIONS_PROFILE", "walking"),
        timeout=cfg.get("PROVIDER_TIMEOUT", 5.0),
    ))
    app.extensions.setdefault(GEOCODER_KEY, NominatimGeocoder(
        cfg["GEOCODER_URL"],
        user_agent=cfg.get("GEOCODER_USER_AGENT", "campus-navigator"),
        timeout=cfg.get("PROVIDER_TIMEOUT", 5.0),
    ))
