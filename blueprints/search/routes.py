# blueprints/search/routes.py
from __future__ import annotations
from flask import jsonify, request

from blueprints.directory.services import get_store
from . import bp
from .client import StoreDirectorySource
from .session import SearchSession

def _csv_arg(name: str) -> list[str]:
    raw = request.args.get(name) or ""
    return [x.strip() for x in raw.split(",") if x.strip()]

# ----- SUGGEST (typeahead) -----
@bp.get("/suggest")
def suggest():
    q = request.args.get("q") or ""
    try:
        limit = int(request.args.get("limit", 0) or 0)
    except ValueError:
        return jsonify({"error": "invalid_argument", "field": "limit"}), 400
    favorites = _csv_arg("favorites")

    # сессия на один запрос; отбрасывание устаревших ответов работает у долгоживущего клиента (scripts/find_classroom.py)
    session = SearchSession(StoreDirectorySource(get_store()), favorites)
    outcome = session.search(q)
    items = outcome.results if outcome else []
    if limit > 0:
        items = items[:limit]
    return jsonify({
        "items": [dict(r.to_dict(), favorite=r.id in favorites) for r in items],
        "degraded": bool(outcome and outcome.degraded),
    })
