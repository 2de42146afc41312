from __future__ import annotations
import json, logging
from datetime import datetime
from uuid import uuid4

from flask import current_app, g, jsonify, request
from werkzeug.wrappers.response import Response

from errors import InvalidArgument
from blueprints.directory.services import STORE_KEY
from . import bp                 # используем bp из __init__.py

VISITOR_COOKIE = "visitor_id"
VISITOR_MAX_AGE = 60 * 60 * 24 * 180  # 180 дней

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in ("event","path","method","status","duration_ms","visitor_id","count"):
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(payload, ensure_ascii=False)

def _setup_structured_logging(app):
    # корневой логгер: сюда же пишут модули через logging.getLogger(__name__)
    for logger in (app.logger, logging.getLogger()):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    app.logger.propagate = False

@bp.before_app_request
def _ensure_visitor_and_start_timer():
    g._req_start = datetime.utcnow()
    vid = request.cookies.get(VISITOR_COOKIE)
    if not vid:
        vid = uuid4().hex
        g._set_visitor_cookie = vid
    g.visitor_id = vid

@bp.after_app_request
def _maybe_set_cookie_and_log(response: Response):
    if getattr(g, "_set_visitor_cookie", None):
        response.set_cookie(
            VISITOR_COOKIE,
            g._set_visitor_cookie,
            max_age=VISITOR_MAX_AGE,
            httponly=False,
            secure=request.is_secure,
            samesite="Lax",
            path="/",
        )
    start = getattr(g, "_req_start", None)
    duration_ms = int((datetime.utcnow() - start).total_seconds() * 1000) if start else None
    extra = {
        "event":"http_request",
        "path":request.path,
        "method":request.method,
        "status":response.status_code,
        "duration_ms":duration_ms,
        "visitor_id":getattr(g, "visitor_id", None),
    }
    # логгер уже настроен в _on_register
    logging.getLogger().info("request handled", extra=extra)
    return response

@bp.app_errorhandler(InvalidArgument)
def _invalid_argument(ex: InvalidArgument):
    return jsonify({"error": "invalid_argument", "field": ex.field, "detail": str(ex)}), 400

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    store = current_app.extensions.get(STORE_KEY)
    return jsonify({
        "status":"ok",
        "storage": getattr(store, "mode", None),
        "ts": datetime.utcnow().isoformat(timespec="seconds")+"Z",
        "visitor_id": getattr(g, "visitor_id", None),
    })
