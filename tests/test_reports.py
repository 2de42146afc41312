# tests/test_reports.py
from __future__ import annotations
import pytest
from app import create_app

@pytest.fixture()
def client():
    app = create_app("test")
    with app.test_client() as c:
        yield c

REPORT = {"building": "Kerr Hall West", "room_number": "KHW-071",
          "description": "Not on the map", "email": " me@example.com "}

def test_submit_report(client):
    r = client.post("/api/v1/reports", json=REPORT)
    assert r.status_code == 201
    rep = r.get_json()["report"]
    assert rep["room_number"] == "KHW-071"
    assert rep["email"] == "me@example.com"
    assert rep["id"] >= 1

def test_submit_report_validation(client):
    r = client.post("/api/v1/reports", json=dict(REPORT, building="  "))
    assert r.status_code == 422
    r = client.post("/api/v1/reports", json=dict(REPORT, email="nope"))
    assert r.status_code == 422
    r = client.post("/api/v1/reports", data="not json")
    assert r.status_code == 422

def test_reports_csv(client):
    client.post("/api/v1/reports", json=REPORT)
    client.post("/api/v1/reports", json=dict(REPORT, room_number="KHW-072", email=None))
    r = client.get("/api/v1/reports/missing-classrooms.csv")
    assert r.status_code == 200
    assert r.mimetype == "text/csv"
    lines = r.get_data(as_text=True).strip().splitlines()
    assert lines[0] == "id;created_at;building;room_number;description;email"
    assert len(lines) == 3
    assert lines[2].endswith(";KHW-072;Not on the map;")
