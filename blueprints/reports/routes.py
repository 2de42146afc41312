# blueprints/reports/routes.py
from __future__ import annotations
from dataclasses import asdict
from typing import Optional

from flask import Response, jsonify, request
from pydantic import BaseModel, Field, ValidationError, field_validator

from blueprints.directory.services import DatabaseUnavailable, get_store
from . import bp
from .services import reports_csv, submit_report

class ReportIn(BaseModel):
    building: str = Field(min_length=1, max_length=255)
    room_number: str = Field(min_length=1, max_length=50)
    description: str = Field(min_length=1, max_length=5000)
    email: Optional[str] = Field(None, max_length=255)

    @field_validator("building", "room_number", "description")
    @classmethod
    def _non_empty(cls, v: str):
        if not v.strip():
            raise ValueError("required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def _email(cls, v: Optional[str]):
        if v is None or not v.strip():
            return None
        v = v.strip()
        if "@" not in v:
            raise ValueError("invalid_email")
        return v

def _csv_resp(content: str, filename: str) -> Response:
    return Response(
        content,
        mimetype="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

@bp.post("/reports")
def create_report():
    payload = request.get_json(silent=True) or {}
    try:
        data = ReportIn.model_validate(payload)
    except ValidationError as ve:
        return jsonify({"error": "validation_error", "detail": ve.errors(include_context=False)}), 422
    try:
        out = submit_report(**data.model_dump())
    except DatabaseUnavailable:
        return jsonify({"error": "database_unavailable"}), 503
    return jsonify({"ok": True, "report": asdict(out)}), 201

@bp.get("/reports/missing-classrooms.csv")
def missing_classrooms_csv():
    if not get_store().writable:
        return jsonify({"error": "database_unavailable"}), 503
    try:
        content = reports_csv()
    except DatabaseUnavailable:
        return jsonify({"error": "database_unavailable"}), 503
    return _csv_resp(content, "missing_classrooms.csv")
