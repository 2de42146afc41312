# blueprints/reports/services.py
from __future__ import annotations
import csv
import logging
from dataclasses import dataclass
from io import StringIO
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from models import ClassroomReport
from blueprints.directory.services import DatabaseUnavailable, get_store

log = logging.getLogger(__name__)

@dataclass
class ReportOut:
    id: int
    building: str
    room_number: str
    description: str
    email: Optional[str]
    created_at: str

def _out(r: ClassroomReport) -> ReportOut:
    return ReportOut(
        id=r.id,
        building=r.building,
        room_number=r.room_number,
        description=r.description,
        email=r.email,
        created_at=r.created_at.isoformat(timespec="seconds"),
    )

def submit_report(*, building: str, room_number: str, description: str,
                  email: Optional[str] = None) -> ReportOut:
    """Сохраняет сообщение о недостающей аудитории."""
    if not get_store().writable:
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE")
    rep = ClassroomReport(building=building, room_number=room_number,
                          description=description, email=email)
    db.session.add(rep)
    try:
        db.session.commit()
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE") from ex
    log.info("missing classroom reported", extra={"event": "classroom_report"})
    return _out(rep)

def reports_csv() -> str:
    """
    CSV: id;created_at;building;room_number;description;email
    """
    q = ClassroomReport.query.order_by(ClassroomReport.created_at.asc(), ClassroomReport.id.asc())
    try:
        rows = q.all()
    except SQLAlchemyError as ex:
        db.session.rollback()
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE") from ex
    buf = StringIO()
    w = csv.writer(buf, delimiter=";")
    w.writerow(["id", "created_at", "building", "room_number", "description", "email"])
    for r in rows:
        w.writerow([r.id, r.created_at.isoformat(timespec="seconds"), r.building,
                    r.room_number, r.description, r.email or ""])
    return buf.getvalue()
