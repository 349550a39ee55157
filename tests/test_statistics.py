from sqlalchemy import func, select

from db import SessionLocal
from helpers import client, make_question, make_section, make_subject, make_system, make_tree, upload
from models import Statistics
from stats import marks_distribution, refresh_statistics


def test_statistics_track_inserts():
    subject, system, section = make_tree()
    q = make_question(subject, system, section, years=["2021", "2020"], isBookmarked=True)
    upload(q["id"])

    r = client.get("/statistics")
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["totalSubjects"] == 1
    assert data["totalSystems"] == 1
    assert data["totalQuestions"] == 1
    assert data["totalFiles"] == 1
    assert data["bookmarkedQuestions"] == 1
    assert data["totalRepeatCount"] == 2
    assert data["questionsWithFiles"] == 1
    assert data["recentQuestions"] == 1
    assert data["subjectBreakdown"][0]["questionCount"] == 1
    assert data["subjectBreakdown"][0]["systemCount"] == 1


def test_singleton_row():
    make_subject()
    with SessionLocal() as db:
        refresh_statistics(db)
        refresh_statistics(db)
        assert db.scalar(select(func.count()).select_from(Statistics)) == 1


def test_refresh_creates_row_when_missing():
    body = client.post("/statistics/refresh").json()
    assert body["totalSubjects"] == 0
    assert body["id"] is not None


def test_marks_distribution_groups_by_value():
    s = make_subject()
    a = make_system(s["id"], "Cardiovascular")
    b = make_system(s["id"], "Respiratory")
    a10, a5 = make_section(a["id"], 10), make_section(a["id"], 5)
    b10 = make_section(b["id"], 10)
    make_question(s, a, a10, title="q1")
    make_question(s, a, a5, title="q2")
    make_question(s, b, b10, title="q3")

    with SessionLocal() as db:
        dist = marks_distribution(db)
    assert dist == [
        {"marks": 10, "label": "10 Markers", "count": 2},
        {"marks": 5, "label": "5 Markers", "count": 1},
    ]

    data = client.get("/statistics").json()["data"]
    assert data["marksBreakdown"] == dist


def test_refresh_overwrites_row_created_concurrently(monkeypatch):
    # both creates refresh statistics, so the row already exists
    make_subject()
    make_subject("Pharmacology")
    with SessionLocal() as db:
        real_get = db.get
        calls = []

        def stale_get(model, ident, **kw):
            # first lookup misses, as if another refresh had not committed yet
            calls.append(ident)
            if len(calls) == 1:
                return None
            return real_get(model, ident, **kw)

        monkeypatch.setattr(db, "get", stale_get)
        stats = refresh_statistics(db)
        assert stats.id == 1
        assert stats.total_subjects == 2

    with SessionLocal() as db:
        assert db.scalar(select(func.count()).select_from(Statistics)) == 1
        assert db.get(Statistics, 1).total_subjects == 2
