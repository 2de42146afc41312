# blueprints/directory/services.py
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from extensions import db
from models import Classroom

log = logging.getLogger(__name__)

STORE_KEY = "classroom_store"

@dataclass(frozen=True)
class ClassroomRecord:
    id: str
    coordinates: Tuple[float, float]
    building: Optional[str] = None
    floor: Optional[int] = None
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClassroomRecord":
        lat, lon = data["coordinates"]
        return cls(
            id=data["id"],
            coordinates=(float(lat), float(lon)),
            building=data.get("building"),
            floor=data.get("floor"),
            description=data.get("description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "coordinates": list(self.coordinates),
            "building": self.building,
            "floor": self.floor,
            "description": self.description,
        }

# Фиксированный список: им наполняется пустая БД и он же отдаётся, если БД недоступна
SEED_CLASSROOMS: Tuple[ClassroomRecord, ...] = (
    ClassroomRecord("KHE-123", (43.65196973085074, -79.37990394697654), "Kerr Hall East", 1),
    ClassroomRecord("KHE-321", (43.65196973085074, -79.37990394697654), "Kerr Hall East", 3),
    ClassroomRecord("ENG-101", (43.65897, -79.37834), "Engineering Building", 1),
    ClassroomRecord("ENG-202", (43.65897, -79.37834), "Engineering Building", 2),
    ClassroomRecord("RCC-201", (43.65834, -79.38189), "Rogers Communications Centre", 2),
    ClassroomRecord("RCC-301", (43.65834, -79.38189), "Rogers Communications Centre", 3),
)

class DatabaseUnavailable(RuntimeError):
    pass

class NoSchema(RuntimeError):
    pass

def _row_to_record(row: Classroom) -> ClassroomRecord:
    return ClassroomRecord.from_dict(row.to_record())

def _apply(row: Classroom, fields: Dict[str, Any]) -> None:
    for key, value in fields.items():
        if key == "id":
            row.code = value.strip()
        elif key == "coordinates":
            row.latitude, row.longitude = float(value[0]), float(value[1])
        else:
            setattr(row, key, value)


class DatabaseClassroomStore:
    mode = "database"
    writable = True

    def __init__(self, fallback: Optional["FallbackClassroomStore"] = None):
        # БД может отвалиться и после старта: чтение тогда идёт из seed-списка
        self._fallback = fallback or FallbackClassroomStore()

    def _degrade(self, ex: SQLAlchemyError):
        db.session.rollback()
        log.warning("database read failed, serving fallback classrooms: %s", ex,
                    extra={"event": "storage_fallback"})
        return self._fallback

    def list_all(self) -> List[ClassroomRecord]:
        try:
            rows = db.session.query(Classroom).order_by(Classroom.pk.asc()).all()
        except SQLAlchemyError as ex:
            return self._degrade(ex).list_all()
        return [_row_to_record(r) for r in rows]

    def get(self, code: str) -> Optional[ClassroomRecord]:
        try:
            row = db.session.query(Classroom).filter_by(code=code).first()
        except SQLAlchemyError as ex:
            return self._degrade(ex).get(code)
        return _row_to_record(row) if row else None

    def search(self, query: str) -> List[ClassroomRecord]:
        from blueprints.search.services import match
        return match(query, self.list_all(), [])

    def _write(self, fn):
        # IntegrityError пропускаем наверх (409), прочие ошибки БД -> 503
        try:
            return fn()
        except IntegrityError:
            raise
        except SQLAlchemyError as ex:
            db.session.rollback()
            log.warning("database write failed: %s", ex, extra={"event": "storage_write_failed"})
            raise DatabaseUnavailable("DATABASE_UNAVAILABLE") from ex

    def create(self, fields: Dict[str, Any]) -> ClassroomRecord:
        def _do():
            if db.session.query(Classroom).filter_by(code=fields["id"]).first():
                raise ValueError("CLASSROOM_EXISTS")
            row = Classroom()
            _apply(row, fields)
            db.session.add(row)
            db.session.commit()
            return _row_to_record(row)
        return self._write(_do)

    def update(self, code: str, fields: Dict[str, Any]) -> ClassroomRecord:
        def _do():
            row = db.session.query(Classroom).filter_by(code=code).first()
            if not row:
                raise LookupError("CLASSROOM_NOT_FOUND")
            _apply(row, fields)
            db.session.commit()
            return _row_to_record(row)
        return self._write(_do)

    def delete(self, code: str) -> None:
        def _do():
            row = db.session.query(Classroom).filter_by(code=code).first()
            if not row:
                raise LookupError("CLASSROOM_NOT_FOUND")
            db.session.delete(row)
            db.session.commit()
        self._write(_do)


class FallbackClassroomStore:
    """Read-only справочник из SEED_CLASSROOMS, когда БД недоступна."""
    mode = "fallback"
    writable = False

    def __init__(self, records=SEED_CLASSROOMS):
        self._records = tuple(records)

    def list_all(self) -> List[ClassroomRecord]:
        return list(self._records)

    def get(self, code: str) -> Optional[ClassroomRecord]:
        return next((r for r in self._records if r.id == code), None)

    def search(self, query: str) -> List[ClassroomRecord]:
        from blueprints.search.services import match
        return match(query, self.list_all(), [])

    def create(self, fields):
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE")

    def update(self, code, fields):
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE")

    def delete(self, code):
        raise DatabaseUnavailable("DATABASE_UNAVAILABLE")


def seed_classrooms(records=SEED_CLASSROOMS) -> int:
    """Наполняет пустую таблицу. Возвращает число добавленных записей."""
    if db.session.query(Classroom).count():
        return 0
    for rec in records:
        row = Classroom()
        _apply(row, rec.to_dict())
        db.session.add(row)
    db.session.commit()
    return len(records)

def init_store(app) -> None:
    """Проверяет БД при старте; при ошибке переключает справочник на фолбэк."""
    with app.app_context():
        try:
            db.session.execute(text("SELECT 1"))
            # таблицы может ещё не быть (alembic upgrade не запускали)
            if not inspect(db.engine).has_table(Classroom.__tablename__):
                if not app.config.get("AUTO_CREATE_TABLES"):
                    raise NoSchema("classroom table is missing, run `flask db upgrade`")
                db.create_all()
            if app.config.get("SEED_CLASSROOMS"):
                added = seed_classrooms()
                if added:
                    log.info("classroom table seeded", extra={"event": "seed", "count": added})
            store = DatabaseClassroomStore()
        except (SQLAlchemyError, NoSchema) as ex:
            db.session.rollback()
            log.warning("database unavailable, serving fallback classrooms: %s", ex,
                        extra={"event": "storage_fallback"})
            store = FallbackClassroomStore()
        finally:
            db.session.remove()
    app.extensions[STORE_KEY] = store

def get_store():
    return current_app.extensions[STORE_KEY]
