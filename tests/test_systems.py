from helpers import client, make_section, make_subject, make_system


def test_order_defaults_to_next_in_subject():
    s = make_subject()
    first = make_system(s["id"], "Cardiovascular")
    second = make_system(s["id"], "Respiratory")
    assert first["order"] == 0
    assert second["order"] == 1

    explicit = make_system(s["id"], "Renal", order=7)
    assert explicit["order"] == 7
    assert make_system(s["id"], "Hepatobiliary")["order"] == 8


def test_name_unique_per_subject_only():
    a = make_subject("Pathology")
    b = make_subject("Pharmacology")
    make_system(a["id"], "Cardiovascular")
    # same name under another subject is fine
    make_system(b["id"], "Cardiovascular")

    r = client.post("/systems", json={"name": "Cardiovascular", "subjectId": a["id"]})
    assert r.status_code == 409


def test_unknown_subject_is_404():
    r = client.post("/systems", json={"name": "Renal", "subjectId": "nope"})
    assert r.status_code == 404


def test_list_filtered_and_ordered():
    a = make_subject("Pathology")
    b = make_subject("Pharmacology")
    make_system(a["id"], "Respiratory", order=2)
    make_system(a["id"], "Cardiovascular", order=1)
    make_system(b["id"], "Autonomic")

    r = client.get("/systems", params={"subjectId": a["id"]})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 2
    assert [s["name"] for s in body["items"]] == ["Cardiovascular", "Respiratory"]
    assert body["items"][0]["subject"]["name"] == "Pathology"

    assert client.get("/systems").json()["count"] == 3


def test_detail_lists_marks_sections_descending():
    s = make_subject()
    sy = make_system(s["id"])
    for m in (2, 10, 5):
        make_section(sy["id"], m)

    r = client.get(f"/systems/{sy['id']}")
    assert r.status_code == 200
    body = r.json()
    assert [m["marks"] for m in body["marksSections"]] == [10, 5, 2]
    assert body["marksSectionCount"] == 3
    assert body["subject"]["id"] == s["id"]


def test_update_and_delete():
    s = make_subject()
    sy = make_system(s["id"])
    r = client.patch(f"/systems/{sy['id']}", json={"description": "Heart and vessels"})
    assert r.status_code == 200
    assert r.json()["name"] == "Cardiovascular"
    assert r.json()["description"] == "Heart and vessels"

    make_section(sy["id"], 10)
    assert client.delete(f"/systems/{sy['id']}").json() == {"ok": True}
    assert client.get("/marks-sections").json()["count"] == 0
    assert client.delete(f"/systems/{sy['id']}").status_code == 404
