from helpers import client, make_question, make_section, make_tree


def test_server_computes_repeat_count_and_score():
    subject, system, section = make_tree()
    q = make_question(
        subject,
        system,
        section,
        years=["2023", 2022, "2021"],
        globalImportance=0.5,
        repeatCount=99,
        importanceScore=1.0,
    )
    assert q["years"] == ["2023", "2022", "2021"]
    assert q["repeatCount"] == 3
    assert q["importanceScore"] != 1.0
    assert 0.0 <= q["importanceScore"] <= 1.0
    assert q["globalImportance"] == 0.5
    assert q["isBookmarked"] is False


def test_no_years_scores_global_weight_only():
    subject, system, section = make_tree()
    q = make_question(subject, system, section, globalImportance=0.5)
    assert q["years"] == []
    assert q["repeatCount"] == 0
    assert q["importanceScore"] == 0.1


def test_global_importance_clamped_on_create():
    subject, system, section = make_tree()
    q = make_question(subject, system, section, globalImportance=4)
    assert q["globalImportance"] == 1.0
    assert q["importanceScore"] == 0.2


def test_missing_parents_rejected():
    r = client.post("/questions", json={"title": "Orphan", "subjectId": "", "systemId": "x",
                                        "marksSectionId": "y"})
    assert r.status_code == 400

    subject, system, section = make_tree()
    r = client.post("/questions", json={"title": "Lost", "subjectId": subject["id"],
                                        "systemId": system["id"], "marksSectionId": "missing"})
    assert r.status_code == 404


def test_blank_title_rejected():
    subject, system, section = make_tree()
    r = client.post("/questions", json={"title": "  ", "subjectId": subject["id"],
                                        "systemId": system["id"], "marksSectionId": section["id"]})
    assert r.status_code == 400


def test_partial_update_recomputes_metrics():
    subject, system, section = make_tree()
    q = make_question(subject, system, section, years=["2023"], notes="see Robbins ch. 12")

    r = client.patch(f"/questions/{q['id']}", json={"years": ["2023", "2022"]})
    assert r.status_code == 200
    body = r.json()
    assert body["repeatCount"] == 2
    assert body["importanceScore"] > q["importanceScore"]
    assert body["title"] == q["title"]
    assert body["notes"] == "see Robbins ch. 12"

    r = client.patch(f"/questions/{q['id']}", json={"isBookmarked": True, "repeatCount": 50})
    body = r.json()
    assert body["isBookmarked"] is True
    assert body["repeatCount"] == 2


def test_detail_includes_relations():
    subject, system, section = make_tree()
    q = make_question(subject, system, section)

    r = client.get(f"/questions/{q['id']}")
    assert r.status_code == 200
    body = r.json()
    assert body["subject"]["name"] == "Pathology"
    assert body["system"]["name"] == "Cardiovascular"
    assert body["marksSection"]["marks"] == 10
    assert body["files"] == [] and body["folders"] == []


def test_list_filters_and_search():
    subject, system, section = make_tree()
    five = make_section(system["id"], 5)
    make_question(subject, system, section, title="Mitral stenosis", description="valvular")
    make_question(subject, system, five, title="Atherosclerosis", isBookmarked=True)

    body = client.get("/questions", params={"marksSectionId": five["id"]}).json()
    assert body["count"] == 1 and body["items"][0]["title"] == "Atherosclerosis"
    assert body["items"][0]["marksSection"]["marks"] == 5
    assert body["items"][0]["fileCount"] == 0

    body = client.get("/questions", params={"search": "VALV"}).json()
    assert [q["title"] for q in body["items"]] == ["Mitral stenosis"]

    body = client.get("/questions", params={"bookmarked": "true"}).json()
    assert [q["title"] for q in body["items"]] == ["Atherosclerosis"]

    body = client.get("/questions", params={"subjectId": subject["id"], "limit": 1}).json()
    assert body["count"] == 1


def test_list_ordering():
    subject, system, section = make_tree()
    make_question(subject, system, section, title="b", years=["2020"])
    make_question(subject, system, section, title="a", years=["2020", "2021", "2022"])
    make_question(subject, system, section, title="c")

    by_title = client.get("/questions", params={"orderBy": "title", "orderDir": "asc"}).json()
    assert [q["title"] for q in by_title["items"]] == ["a", "b", "c"]

    by_repeat = client.get("/questions", params={"orderBy": "repeatCount"}).json()
    assert [q["repeatCount"] for q in by_repeat["items"]] == [3, 1, 0]


def test_featured_ranked_by_importance():
    subject, system, section = make_tree()
    make_question(subject, system, section, title="low", globalImportance=0.0)
    make_question(subject, system, section, title="top", years=["2024", "2023"], globalImportance=1.0)
    make_question(subject, system, section, title="mid", globalImportance=1.0)

    body = client.get("/featured").json()
    assert [q["title"] for q in body["items"]] == ["top", "mid", "low"]

    body = client.get("/featured", params={"systemId": system["id"], "limit": 2}).json()
    assert body["count"] == 2


def test_delete_question():
    subject, system, section = make_tree()
    q = make_question(subject, system, section)
    assert client.delete(f"/questions/{q['id']}").json() == {"ok": True}
    assert client.get(f"/questions/{q['id']}").status_code == 404
    assert client.delete(f"/questions/{q['id']}").status_code == 404


def test_years_must_be_a_list():
    subject, system, section = make_tree()
    body = {"title": "Shock", "subjectId": subject["id"], "systemId": system["id"],
            "marksSectionId": section["id"], "years": "2023"}
    r = client.post("/questions", json=body)
    assert r.status_code == 422
    assert client.get("/questions").json()["count"] == 0

    q = make_question(subject, system, section, years=["2023"])
    r = client.patch(f"/questions/{q['id']}", json={"years": {"2023": True}})
    assert r.status_code == 422
    assert client.get(f"/questions/{q['id']}").json()["repeatCount"] == 1
