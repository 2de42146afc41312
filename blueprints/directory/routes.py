from __future__ import annotations
import logging
from typing import Any
from pydantic import ValidationError

from flask import jsonify, request, url_for
from sqlalchemy.exc import IntegrityError

from . import bp
from .schemas import ClassroomIn, ClassroomOut, ClassroomPatch
from .services import DatabaseUnavailable, get_store
from extensions import db

log = logging.getLogger(__name__)

# ----------------------- Helpers -----------------------
def ok(data: Any, status: int = 200):
    return jsonify(data), status

def created(location: str, data: Any):
    resp = jsonify(data)
    resp.status_code = 201
    resp.headers["Location"] = location
    return resp

def error(msg: str, status: int = 400, code: str | None = None, field: str | None = None):
    payload = {"error": msg}
    if code: payload["code"] = code
    if field: payload["field"] = field
    return jsonify(payload), status

def _handle_integrity_error(ex: IntegrityError):
    # Нормализуем в 409 CONFLICT
    return error("Unique constraint violation", status=409, code="UNIQUE_CONSTRAINT")

def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors()  # список dict
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs

def _out(record) -> dict:
    return ClassroomOut.model_validate(record.to_dict()).model_dump(mode="json")

def _unavailable():
    return error("database_unavailable", status=503)

# ----------------------- Classrooms JSON API -----------------------
# URL: /api/v1/classrooms[/<id>]

@bp.get("/classrooms")
def api_classrooms_list():
    store = get_store()
    return ok([_out(r) for r in store.list_all()])

@bp.get("/classrooms/<code>")
def api_classrooms_get(code: str):
    rec = get_store().get(code)
    if rec is None:
        return error("not_found", status=404)
    return ok(_out(rec))

@bp.get("/classrooms/search/<path:query>")
def api_classrooms_search(query: str):
    return ok([_out(r) for r in get_store().search(query)])

@bp.post("/classrooms")
def api_classrooms_create():
    payload = request.get_json(silent=True) or {}
    try:
        parsed = ClassroomIn.model_validate(payload)
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": _pydantic_errors_safe(ve)}), 422

    store = get_store()
    try:
        rec = store.create(parsed.model_dump())
    except DatabaseUnavailable:
        return _unavailable()
    except ValueError as ve:
        # CLASSROOM_EXISTS
        return error("Unique constraint violation", status=409, code=str(ve), field="id")
    except IntegrityError as ex:
        db.session.rollback()
        return _handle_integrity_error(ex)
    log.info("classroom created", extra={"event": "classroom_created"})
    return created(url_for("directory.api_classrooms_get", code=rec.id), _out(rec))

@bp.route("/classrooms/<code>", methods=["PUT", "PATCH"])
def api_classrooms_update(code: str):
    payload = request.get_json(silent=True) or {}
    try:
        parsed = ClassroomPatch.model_validate(payload)
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": _pydantic_errors_safe(ve)}), 422

    fields = parsed.model_dump(exclude_unset=True)
    # обязательные поля нельзя обнулить
    for key in ("id", "coordinates"):
        if key in fields and fields[key] is None:
            fields.pop(key)
    try:
        rec = get_store().update(code, fields)
    except DatabaseUnavailable:
        return _unavailable()
    except LookupError:
        return error("not_found", status=404)
    except IntegrityError as ex:
        db.session.rollback()
        return _handle_integrity_error(ex)
    return ok(_out(rec))

@bp.delete("/classrooms/<code>")
def api_classrooms_delete(code: str):
    try:
        get_store().delete(code)
    except DatabaseUnavailable:
        return _unavailable()
    except LookupError:
        return error("not_found", status=404)
    return "", 204
