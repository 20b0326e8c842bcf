"""Routes anyone can call."""

from tests.helpers import VISITOR_USER_ID, as_user

MISSING_UUID = "6f1c2d3e-4b5a-4c7d-8e9f-0a1b2c3d4e5f"


def test_health(client):
    response = client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Commit-Sha" in response.headers

    assert client.get("/api/v1/health/lite").json() == {"status": "ok"}


def test_project_listing_hides_private_projects(client, admin_user):
    headers = as_user(admin_user)
    client.post(
        "/api/v1/projects",
        json={"title": "Public", "image": "a.jpg", "category": "Film", "role": "DP"},
        headers=headers,
    )
    client.post(
        "/api/v1/projects",
        json={"title": "Hidden", "image": "b.jpg", "category": "Film", "role": "DP", "is_public": False},
        headers=headers,
    )

    body = client.get("/api/v1/projects").json()

    assert body["count"] == 1
    assert body["data"][0]["title"] == "Public"


def test_include_private_requires_admin(client, admin_user):
    assert client.get("/api/v1/projects?include_private=true").status_code == 403
    assert (
        client.get("/api/v1/projects?include_private=true", headers=as_user(VISITOR_USER_ID)).status_code
        == 403
    )
    assert client.get("/api/v1/projects?include_private=true", headers=as_user(admin_user)).status_code == 200


def test_project_detail_not_found_is_problem_json(client):
    response = client.get(f"/api/v1/projects/{MISSING_UUID}")

    assert response.status_code == 404
    problem = response.json()
    assert problem["detail"] == "Project not found"
    assert problem["code"] == "PROJECT_NOT_FOUND"
    assert problem["instance"] == f"/api/v1/projects/{MISSING_UUID}"


def test_sample_project_served_for_slug_ids(client):
    response = client.get("/api/v1/projects/directed-1")

    assert response.status_code == 200
    assert response.json()["id"] == "directed-1"
    assert client.get("/api/v1/projects/no-such-sample").status_code == 404


def test_project_search(client, admin_user):
    client.post(
        "/api/v1/projects",
        json={"title": "Harbour Lights", "image": "a.jpg", "category": "Documentary", "role": "Editor"},
        headers=as_user(admin_user),
    )

    body = client.get("/api/v1/projects/search", params={"q": "harbour"}).json()

    assert body["count"] == 1
    assert body["query"] == "harbour"
    assert client.get("/api/v1/projects/search", params={"category": "Music Video"}).json()["count"] == 0


def test_settings_are_public_to_read(client):
    assert client.get("/api/v1/settings").json() == {}


def test_tag_order_public_read(client):
    assert client.get("/api/v1/tag-order", params={"tagType": "category"}).json() == []


def test_contact_submission(client):
    response = client.post(
        "/api/v1/contact",
        json={"name": " Ana ", "email": "ana@example.com", "message": "Loved the reel"},
    )

    assert response.status_code == 200
    assert response.json()["success"] is True


def test_contact_validation_errors(client):
    response = client.post("/api/v1/contact", json={"name": "Ana", "email": "nope", "message": " "})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_media_listing_and_count(client):
    assert client.get("/api/v1/media").json()["count"] == 0
    assert client.get("/api/v1/media/count").json() == {"total": 0, "by_filetype": {}}
    assert client.get("/api/v1/media", params={"limit": 0}).status_code == 422


def test_storage_usage(client):
    body = client.get("/api/v1/storage/usage").json()
    assert body["file_count"] == 0
    assert body["total_bytes"] == 0


def test_system_status_simple(client):
    response = client.get(
        "/api/v1/system/status", params={"checks": "database,tables,storage", "format": "simple"}
    )

    assert response.status_code == 200
    assert response.headers["Cache-Control"] == "public, max-age=30, s-maxage=30"
    body = response.json()
    assert body["system"]["status"] == "healthy"
    assert body["summary"]["api"] == "not-checked"
    assert body["results"]["storage"]["has_all_required"] is True


def test_system_status_rejects_unknown_check(client):
    response = client.get("/api/v1/system/status", params={"checks": "database,cache"})
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_CHECK"


def test_metrics_endpoint(client):
    client.get("/api/v1/system/status", params={"checks": "database"})

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "portfolio_status_check_total" in response.text
