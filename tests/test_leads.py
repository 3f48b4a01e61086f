PROFILES = [
    {
        "name": "Ada Lovelace",
        "job_title": "Founder",
        "company": "Analytical Engines Ltd",
        "location": "London",
        "summary": "Builds lead generation pipelines for B2B agencies",
        "profile_url": "https://linkedin.com/in/ada",
    },
    {
        "name": "Grace Hopper",
        "job_title": "Head of Growth",
        "company": "Compiler Co",
        "location": "New York",
        "summary": "Outbound sales and automation",
    },
]


def test_store_and_list_profiles(client):
    response = client.post("/api/leads", json=PROFILES)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "2 profiles stored successfully"
    assert len(body["insertedIds"]) == 2

    listing = client.get("/api/leads").json()
    assert listing["total"] == 2
    assert listing["limit"] == 50
    assert {item["name"] for item in listing["items"]} == {"Ada Lovelace", "Grace Hopper"}


def test_search_is_case_insensitive_across_fields(client):
    client.post("/api/leads", json=PROFILES)
    assert [p["name"] for p in client.get("/api/leads", params={"search": "LONDON"}).json()["items"]] == ["Ada Lovelace"]
    assert [p["name"] for p in client.get("/api/leads", params={"search": "growth"}).json()["items"]] == ["Grace Hopper"]
    assert client.get("/api/leads", params={"search": "%"}).json()["total"] == 0


def test_rejects_empty_and_incomplete_batches(client):
    response = client.post("/api/leads", json=[])
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid profiles data"

    response = client.post("/api/leads", json=[{"name": "No details"}])
    assert response.status_code == 400
    assert response.json()["type"] == "VALIDATION_ERROR"


def test_duplicate_profile_url_rejected(client):
    client.post("/api/leads", json=PROFILES[:1])
    response = client.post("/api/leads", json=PROFILES[:1])
    assert response.status_code == 400
    assert client.get("/api/leads").json()["total"] == 1
