from helpers import client, make_question, make_subject, make_tree, upload


def test_create_subject_defaults():
    r = client.post("/subjects", json={"name": "  Pharmacology  "})
    assert r.status_code == 201
    body = r.json()
    assert body["name"] == "Pharmacology"
    assert body["color"] == "#3b82f6"
    assert {"id", "createdAt", "updatedAt"}.issubset(body.keys())


def test_blank_name_rejected():
    r = client.post("/subjects", json={"name": "   "})
    assert r.status_code == 400
    assert "name" in r.json()["detail"].lower()


def test_duplicate_name_conflicts():
    make_subject("Microbiology")
    r = client.post("/subjects", json={"name": "Microbiology"})
    assert r.status_code == 409
    assert len(client.get("/subjects").json()["items"]) == 1


def test_list_subjects_with_counts_and_featured():
    subject, system, section = make_tree()
    make_question(subject, system, section, title="low", years=["2001"])
    make_question(subject, system, section, title="high", years=["2024", "2023", "2022"],
                  globalImportance=1.0)

    r = client.get("/subjects")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True and body["count"] == 1
    item = body["items"][0]
    assert item["systemCount"] == 1
    assert item["questionCount"] == 2
    assert [s["name"] for s in item["systems"]] == ["Cardiovascular"]
    assert [q["title"] for q in item["featuredQuestions"]] == ["high", "low"]


def test_get_subject_and_missing():
    s = make_subject()
    r = client.get(f"/subjects/{s['id']}")
    assert r.status_code == 200 and r.json()["name"] == "Pathology"

    r = client.get("/subjects/does-not-exist")
    assert r.status_code == 404
    assert r.json()["detail"] == "Subject not found"


def test_partial_update():
    s = make_subject(description="General pathology", icon="microscope")
    r = client.patch(f"/subjects/{s['id']}", json={"color": "#ff0000"})
    assert r.status_code == 200
    body = r.json()
    assert body["color"] == "#ff0000"
    assert body["description"] == "General pathology"
    assert body["icon"] == "microscope"


def test_rename_onto_existing_conflicts():
    make_subject("Pathology")
    other = make_subject("Anatomy")
    r = client.patch(f"/subjects/{other['id']}", json={"name": "Pathology"})
    assert r.status_code == 409


def test_delete_cascades_everything():
    subject, system, section = make_tree()
    q = make_question(subject, system, section)
    f = upload(q["id"])

    r = client.delete(f"/subjects/{subject['id']}")
    assert r.status_code == 200 and r.json() == {"ok": True}

    assert client.get(f"/systems/{system['id']}").status_code == 404
    assert client.get(f"/marks-sections/{section['id']}").status_code == 404
    assert client.get(f"/questions/{q['id']}").status_code == 404
    assert client.get(f"/files/{f['id']}").status_code == 404

    stats = client.post("/statistics/refresh").json()
    assert stats["totalSubjects"] == 0
    assert stats["totalQuestions"] == 0
    assert stats["totalFiles"] == 0
