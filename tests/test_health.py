from fastapi.testclient import TestClient

from helpers import client, make_subject
from main import app


def test_root():
    assert client.get("/").json() == {"ok": True}


def test_health_db():
    r = client.get("/health/db")
    assert r.status_code == 200
    assert r.json() == {"ok": True, "questions": 0}


def test_health_migrations_basic():
    r = client.get("/health/migrations")
    assert r.status_code == 200
    b = r.json()
    assert "code_heads" in b and isinstance(b["code_heads"], list)
    assert "db_version" in b


def test_unexpected_errors_are_opaque(monkeypatch):
    import routers.subjects as subjects_router

    def boom(*args, **kwargs):
        raise RuntimeError("secret connection string")

    make_subject()
    monkeypatch.setattr(subjects_router, "SubjectListItem", type("Broken", (), {"model_validate": boom}))
    quiet = TestClient(app, raise_server_exceptions=False)
    r = quiet.get("/subjects")
    assert r.status_code == 500
    assert r.json() == {"detail": "internal_error"}
