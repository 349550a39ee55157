from helpers import client, make_question, make_section, make_subject, make_system, make_tree


def test_label_defaults_from_marks():
    s = make_subject()
    sy = make_system(s["id"])
    assert make_section(sy["id"], 8)["label"] == "8 Markers"
    assert make_section(sy["id"], 3, label="Short notes")["label"] == "Short notes"


def test_duplicate_marks_in_system_rejected():
    s = make_subject()
    sy = make_system(s["id"])
    make_section(sy["id"], 10)

    r = client.post("/marks-sections", json={"marks": 10, "systemId": sy["id"]})
    assert r.status_code == 409
    assert r.json()["detail"] == "Marks section with 10 marks already exists in this system"

    listed = client.get("/marks-sections", params={"systemId": sy["id"]}).json()
    assert listed["count"] == 1


def test_marks_must_be_positive():
    s = make_subject()
    sy = make_system(s["id"])
    r = client.post("/marks-sections", json={"marks": 0, "systemId": sy["id"]})
    assert r.status_code == 400


def test_same_marks_in_different_systems():
    s = make_subject()
    a = make_system(s["id"], "Cardiovascular")
    b = make_system(s["id"], "Respiratory")
    make_section(a["id"], 10)
    make_section(b["id"], 10)
    assert client.get("/marks-sections").json()["count"] == 2


def test_detail_orders_questions_by_importance():
    subject, system, section = make_tree()
    make_question(subject, system, section, title="rare", years=[])
    make_question(subject, system, section, title="common", years=["2024", "2023", "2022", "2021"])

    r = client.get(f"/marks-sections/{section['id']}")
    assert r.status_code == 200
    body = r.json()
    assert [q["title"] for q in body["questions"]] == ["common", "rare"]
    assert body["questionCount"] == 2
    assert body["system"]["subject"]["name"] == "Pathology"


def test_update_to_taken_marks_conflicts():
    s = make_subject()
    sy = make_system(s["id"])
    make_section(sy["id"], 10)
    five = make_section(sy["id"], 5)

    r = client.patch(f"/marks-sections/{five['id']}", json={"marks": 10})
    assert r.status_code == 409

    r = client.patch(f"/marks-sections/{five['id']}", json={"marks": 4})
    assert r.status_code == 200
    assert r.json()["marks"] == 4


def test_delete_refreshes_statistics():
    subject, system, section = make_tree()
    make_question(subject, system, section)
    assert client.post("/statistics/refresh").json()["totalQuestions"] == 1

    assert client.delete(f"/marks-sections/{section['id']}").json() == {"ok": True}
    stats = client.get("/statistics").json()["data"]
    assert stats["totalQuestions"] == 0
