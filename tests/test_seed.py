from __future__ import annotations
import json

from app import create_app
from blueprints.directory.services import SEED_CLASSROOMS
from seed import load_json, seed_records

def test_seed_records_idempotent():
    app = create_app("test", overrides={"SEED_CLASSROOMS": False})
    with app.app_context():
        assert seed_records(SEED_CLASSROOMS) == 6
        assert seed_records(SEED_CLASSROOMS) == 0

def test_load_json(tmp_path):
    path = tmp_path / "extra.json"
    path.write_text(json.dumps([
        {"id": "KHW-071", "coordinates": [43.6584, -79.3802], "building": "Kerr Hall West"},
    ]), encoding="utf-8")
    app = create_app("test", overrides={"SEED_CLASSROOMS": False})
    with app.app_context():
        assert seed_records(load_json(path)) == 1
        with app.test_client() as c:
            body = c.get("/api/v1/classrooms/KHW-071").get_json()
    assert body["building"] == "Kerr Hall West"
    assert body["floor"] is None
