# blueprints/navigation/routes.py
from __future__ import annotations
from flask import current_app, jsonify, request

from errors import InvalidArgument, STATUS_DEGRADED, STATUS_OK
from blueprints.directory.services import get_store
from . import bp
from .narration import narrate
from .providers import DIRECTIONS_KEY, GEOCODER_KEY, ProviderError
from . import services as svc

def _json_err(code: str, http: int = 400, detail: str | None = None):
    body = {"error": code}
    if detail:
        body["detail"] = detail
    return jsonify(body), http

def _threshold() -> float:
    raw = request.args.get("threshold")
    if raw is None or raw == "":
        return float(current_app.config.get("PROXIMITY_THRESHOLD_M", svc.DEFAULT_PROXIMITY_M))
    try:
        val = float(raw)
    except ValueError as e:
        raise InvalidArgument("threshold", "threshold must be a number") from e
    if val < 0:
        raise InvalidArgument("threshold", "threshold must be >= 0")
    return val

def _destination():
    """(Coordinate, classroom_id | None) по ?to=lat,lon или ?classroom=ID."""
    code = (request.args.get("classroom") or "").strip()
    if code:
        rec = get_store().get(code)
        if rec is None:
            return None, code
        return svc.Coordinate(*rec.coordinates), rec.id
    return svc.Coordinate.parse(request.args.get("to"), "to"), None

@bp.get("/distance")
def distance():
    start = svc.Coordinate.parse(request.args.get("from"), "from")
    end, code = _destination()
    if end is None:
        return _json_err("not_found", 404)
    threshold = _threshold()
    meters = svc.haversine_distance(start, end)
    return jsonify({
        "distance_m": meters,
        "threshold_m": threshold,
        "arrived": meters <= threshold,
        "classroom": code,
    })

@bp.get("/route")
def route():
    start = svc.Coordinate.parse(request.args.get("from"), "from")
    end, code = _destination()
    if end is None:
        return _json_err("not_found", 404)
    threshold = _threshold()
    result = svc.resolve_route(start, end, current_app.extensions[DIRECTIONS_KEY])
    body = result.to_dict()
    body["classroom"] = code
    body["arrived"] = svc.proximity_alert(start, end, threshold)
    return jsonify(body)

@bp.get("/directions/readout")
def directions_readout():
    start = svc.Coordinate.parse(request.args.get("from"), "from")
    if not (request.args.get("classroom") or "").strip():
        raise InvalidArgument("classroom")
    end, code = _destination()
    if end is None:
        return _json_err("not_found", 404)
    result = svc.resolve_route(start, end, current_app.extensions[DIRECTIONS_KEY])
    text = narrate(code, result)
    if text is None:
        return _json_err("no_route", 409, "Cannot speak directions: No route available")
    return jsonify({"text": text, "status": result.status, "classroom": code})

@bp.get("/geocode")
def geocode():
    q = request.args.get("q")
    geocoder = current_app.extensions[GEOCODER_KEY]
    try:
        items = svc.geocode(geocoder, q)
        status = STATUS_OK
    except ProviderError as e:
        current_app.logger.warning("geocoding failed: %s", e)
        items, status = [], STATUS_DEGRADED
    return jsonify({
        "status": status,
        "items": [{"name": c.name, "coordinates": list(c.coordinates)} for c in items],
    })
