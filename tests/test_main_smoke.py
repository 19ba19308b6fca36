# tests/test_main_smoke.py
from fastapi.testclient import TestClient

from app.main import app


def test_root_alive():
    client = TestClient(app)
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "running"


def test_health():
    client = TestClient(app)
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert "inventory" in data["modules"]
