from catalog import STANDARD_MARKS, SeedCatalog
from helpers import client


def test_catalog_loads_bundled_data():
    assert len(SeedCatalog.subjects()) >= 3
    assert SeedCatalog.marks_options() == STANDARD_MARKS
    assert len(SeedCatalog.questions()) > 0


def test_status_before_seeding():
    body = client.get("/seed").json()
    assert body["data"]["isSeeded"] is False
    assert client.get("/seed/questions").json()["data"]["hasQuestions"] is False


def test_seed_structure_is_idempotent():
    first = client.post("/seed").json()["data"]
    assert first["errors"] == []
    assert first["subjects"] == len(SeedCatalog.subjects())
    systems = sum(len(s.systems) for s in SeedCatalog.subjects())
    assert first["systems"] == systems
    assert first["marksSections"] == systems * len(STANDARD_MARKS)

    second = client.post("/seed").json()["data"]
    assert (second["subjects"], second["systems"], second["marksSections"]) == (0, 0, 0)

    status = client.get("/seed").json()["data"]
    assert status["isSeeded"] is True
    assert status["counts"]["marksSections"] == first["marksSections"]


def test_seed_questions_is_idempotent():
    client.post("/seed")
    first = client.post("/seed/questions").json()
    assert first["data"]["errors"] == []
    added = first["data"]["questionsAdded"]
    assert added > 0
    assert first["message"] == f"Successfully added {added} questions"

    second = client.post("/seed/questions").json()["data"]
    assert second["questionsAdded"] == 0

    assert client.get("/seed/questions").json()["data"]["questionsCount"] == added
    stats = client.get("/statistics").json()["data"]
    assert stats["totalQuestions"] == added


def test_seeded_scores_are_computed():
    client.post("/seed")
    client.post("/seed/questions")
    items = client.get("/questions", params={"limit": 20}).json()["items"]
    for q in items:
        assert q["repeatCount"] == len(q["years"])
        assert 0.0 <= q["importanceScore"] <= 1.0


def test_questions_skipped_without_structure():
    body = client.post("/seed/questions").json()["data"]
    assert body["questionsAdded"] == 0
    assert body["skipped"] == len(SeedCatalog.questions())
