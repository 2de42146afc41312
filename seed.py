"""
Idempotent seed-скрипт справочника аудиторий.
Запуск:
  python seed.py --reset            # дропнуть и пересоздать таблицы + базовый список
  python seed.py --from-json f.json # добавить недостающие аудитории из JSON-файла
  python seed.py                    # мягкое наполнение недостающих записей (idempotent)
"""
import argparse
import json
from pathlib import Path

from app import create_app
from extensions import db
from models import Classroom
from blueprints.directory.services import SEED_CLASSROOMS, ClassroomRecord

def get_or_create(record: ClassroomRecord):
    """Идемпотентное создание по уникальному коду."""
    inst = db.session.query(Classroom).filter_by(code=record.id).first()
    if inst:
        return inst, False
    lat, lon = record.coordinates
    inst = Classroom(code=record.id, latitude=lat, longitude=lon, building=record.building,
                     floor=record.floor, description=record.description)
    db.session.add(inst)
    db.session.flush()
    return inst, True

def seed_records(records) -> int:
    created = 0
    for rec in records:
        _, is_new = get_or_create(rec)
        created += int(is_new)
    db.session.commit()
    return created

def load_json(path: Path):
    data = json.loads(path.read_text(encoding="utf-8"))
    return [ClassroomRecord.from_dict(item) for item in data]

# ---- main ----
def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--reset", action="store_true", help="drop + create + seed")
    parser.add_argument("--from-json", type=Path, help="JSON list of classrooms to add")
    args = parser.parse_args()

    app = create_app(overrides={"SEED_CLASSROOMS": False})
    with app.app_context():
        if args.reset:
            db.drop_all()
            db.create_all()
            n = seed_records(SEED_CLASSROOMS)
            print(f"[seed] reset+seed complete, {n} classrooms")
            return

        db.create_all()
        records = load_json(args.from_json) if args.from_json else SEED_CLASSROOMS
        n = seed_records(records)
        print(f"[seed] soft seed complete, {n} new classrooms")

if __name__ == "__main__":
    main()
