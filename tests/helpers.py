"""Small builders shared by the API tests."""

from fastapi.testclient import TestClient

from main import app

client = TestClient(app)


def make_subject(name="Pathology", **extra):
    r = client.post("/subjects", json={"name": name, **extra})
    assert r.status_code == 201, r.text
    return r.json()


def make_system(subject_id, name="Cardiovascular", **extra):
    r = client.post("/systems", json={"name": name, "subjectId": subject_id, **extra})
    assert r.status_code == 201, r.text
    return r.json()


def make_section(system_id, marks=10, **extra):
    r = client.post("/marks-sections", json={"marks": marks, "systemId": system_id, **extra})
    assert r.status_code == 201, r.text
    return r.json()


def make_tree(subject="Pathology", system="Cardiovascular", marks=10):
    """Subject, system and marks section in one go."""
    s = make_subject(subject)
    sy = make_system(s["id"], system)
    return s, sy, make_section(sy["id"], marks)


def make_question(subject, system, section, title="Describe rheumatic heart disease", **extra):
    body = {
        "title": title,
        "subjectId": subject["id"],
        "systemId": system["id"],
        "marksSectionId": section["id"],
        **extra,
    }
    r = client.post("/questions", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def upload(question_id, filename="notes.pdf", content=b"%PDF-1.4 test", **form):
    data = {"questionId": question_id, **form}
    r = client.post("/files", data=data, files={"file": (filename, content)})
    assert r.status_code == 201, r.text
    return r.json()
