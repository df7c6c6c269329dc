# tests/test_api/test_search_routes.py


def test_search_local(client, fake_provider, sample_work):
    response = client.get("/search", params={"q": "project hail"})
    assert response.status_code == 200
    assert [w["id"] for w in response.json()] == [sample_work.id]
    assert fake_provider.calls == []


def test_search_too_short(client):
    response = client.get("/search", params={"q": "a"})
    assert response.status_code == 400
    assert response.json() == {"error": "Query too short"}
    assert client.get("/search").status_code == 400


def test_search_fallback_end_to_end(client, fake_provider, martian_volume):
    fake_provider.volume = martian_volume

    response = client.get("/search", params={"q": "the martian"})

    assert response.status_code == 200
    results = response.json()
    assert [w["title"] for w in results] == ["The Martian"]

    edition = client.get("/editions/lookup", params={"isbn": "9780804139201"}).json()
    assert edition["work_id"] == results[0]["id"]
    assert client.get("/authors", params={"name": "Andy Weir"}).json()["name"] == "Andy Weir"


def test_search_rate_limited(client, fake_provider):
    first = client.get("/search", params={"q": "dune"})
    second = client.get("/search", params={"q": "dune"})

    assert first.status_code == 404
    assert first.json() == {"error": "No external results found."}
    assert second.status_code == 429
    assert second.json() == {"error": "Rate limited. Try again shortly."}
    assert fake_provider.calls == ["dune"]


def test_external_ingest_log(client, fake_provider, martian_volume):
    client.get("/search", params={"q": "Dune"})
    fake_provider.volume = martian_volume
    work_id = client.get("/search", params={"q": "the martian"}).json()[0]["id"]

    rows = client.get("/external_ingests").json()
    assert [(r["query"], r["status"], r["work_id"]) for r in rows] == [
        ("the martian", "success", work_id),
        ("dune", "not_found", None),
    ]
    assert all(r["source"] == "fake" and r["created_at"] for r in rows)

    only_dune = client.get("/external_ingests", params={"query": "DUNE"}).json()
    assert [r["status"] for r in only_dune] == ["not_found"]

    page = client.get("/external_ingests", params={"limit": 1, "offset": 1}).json()
    assert [r["query"] for r in page] == ["dune"]


def test_external_ingest_log_rejects_bad_paging(client):
    assert client.get("/external_ingests", params={"limit": -1}).status_code == 400
