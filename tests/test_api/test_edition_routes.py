# tests/test_api/test_edition_routes.py
import pytest


@pytest.fixture
def edition_body(sample_work):
    return {
        "work_id": sample_work.id,
        "type": "audiobook",
        "format": "mp3",
        "isbn": "978-0-593-13520-4",
        "narrator": "Ray Porter",
        "runtime": "58020",
        "explicit": False,
        "genres": ["Sci-Fi", "Space"],
    }


def test_upsert_edition_created_then_updated(client, edition_body):
    response = client.post("/editions", json=edition_body)
    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "created"

    response = client.post("/editions", json=edition_body)
    assert response.status_code == 200
    assert response.json() == {"status": "updated", "id": created["id"]}

    page = client.get("/editions").json()
    assert page["total"] == 1


def test_upsert_edition_missing_fields(client, edition_body):
    del edition_body["format"]

    response = client.post("/editions", json=edition_body)

    assert response.status_code == 400
    assert response.json()["error"].startswith("Missing required fields")
    assert client.get("/editions").json()["total"] == 0


def test_upsert_edition_with_taken_id(client, edition_body):
    client.post("/editions", json={**edition_body, "id": "ed-x", "isbn": "9780804139201"})

    response = client.post("/editions", json={**edition_body, "id": "ed-x", "isbn": "9780553418026"})

    assert response.status_code == 400
    assert response.json() == {"error": "Edition id ed-x is already used by another edition"}


def test_upsert_edition_malformed_field(client, edition_body):
    response = client.post("/editions", json={**edition_body, "page_count": "many"})
    assert response.status_code == 400
    assert response.json()["detail"]


def test_get_edition_is_normalized(client, edition_body):
    edition_id = client.post("/editions", json=edition_body).json()["id"]

    edition = client.get(f"/editions/{edition_id}").json()

    assert edition["isbn"] == "9780593135204"
    assert edition["runtime"] == "16:07:00"
    assert edition["genres"] == ["Sci-Fi", "Space"]
    assert edition["tags"] == []
    assert edition["abridged"] is False
    assert edition["asin"] is None
    assert client.get("/editions/missing").status_code == 404


def test_lookup(client, edition_body):
    client.post("/editions", json={**edition_body, "asin": "B08FHBV4ZX"})

    assert client.get("/editions/lookup", params={"isbn": "9780593135204"}).json()["narrator"] == "Ray Porter"
    assert client.get("/editions/lookup", params={"asin": "b08fhbv4zx"}).json()["isbn"] == "9780593135204"
    assert client.get("/editions/lookup", params={"isbn": "0000000000"}).json() == {"found": False}


def test_lookup_requires_identifier(client):
    response = client.get("/editions/lookup")
    assert response.status_code == 400
    assert response.json() == {"error": "ISBN or ASIN required."}


def test_work_editions(client, sample_work, edition_body):
    client.post("/editions", json=edition_body)
    editions = client.get(f"/works/{sample_work.id}/editions").json()
    assert [e["isbn"] for e in editions] == ["9780593135204"]


def test_discover(client, make_edition):
    make_edition(isbn="1", type="audiobook", language="en", explicit=True, release_date="2021-01-01")
    make_edition(isbn="2", type="audiobook", language="en", explicit=False, release_date="2022-01-01")
    make_edition(isbn="3", type="audiobook", language="fr", release_date="2023-01-01")
    make_edition(isbn="4", type="print", language="en", release_date="2024-01-01")

    response = client.get("/discover/editions", params={
        "type": "audiobook", "explicit": "false", "sort": "bogus", "limit": 1, "offset": 0, "unknown": "x",
    })

    assert response.status_code == 200
    page = response.json()
    assert page["total"] == 2
    assert page["limit"] == 1
    assert [e["isbn"] for e in page["results"]] == ["3"]

    page = client.get("/discover/editions", params={"language": "en", "order": "asc"}).json()
    assert [e["isbn"] for e in page["results"]] == ["1", "2", "4"]


@pytest.mark.parametrize("params", [{"limit": -1}, {"offset": -5}, {"limit": "ten"}])
def test_discover_rejects_bad_paging(client, params):
    response = client.get("/discover/editions", params=params)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request."
