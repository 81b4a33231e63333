"""Tests for wiki page endpoints and page protection."""
import pytest


class TestPages:
    """Test page CRUD."""

    def test_seeded_pages(self, client):
        response = client.get("/api/wiki/")
        assert response.status_code == 200
        titles = [page["title"] for page in response.json()["pages"]]
        assert "Home" in titles
        assert "Getting Started" in titles

    def test_create_and_get_by_id_or_title(self, client, contributor_headers):
        response = client.post(
            "/api/wiki/",
            json={"title": "Recipes", "content": "# Recipes", "icon": "book"},
            headers=contributor_headers
        )
        assert response.status_code == 201
        page = response.json()["page"]
        assert page["author"] == "contributor"
        assert page["commentsEnabled"] is False

        by_id = client.get(f"/api/wiki/{page['id']}")
        by_title = client.get("/api/wiki/Recipes")
        assert by_id.status_code == 200
        assert by_title.json()["page"]["id"] == page["id"]

    def test_create_requires_permission(self, client, visitor_headers):
        response = client.post("/api/wiki/", json={"title": "Nope", "content": ""}, headers=visitor_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Insufficient permissions. Required: create_pages"

    def test_create_requires_authentication(self, client):
        response = client.post("/api/wiki/", json={"title": "Nope", "content": ""})
        assert response.status_code == 401

    def test_duplicate_title(self, client, admin_headers, sample_page):
        response = client.post("/api/wiki/", json={"title": "Sample Page", "content": ""}, headers=admin_headers)
        assert response.status_code == 409

    def test_unknown_page(self, client):
        response = client.get("/api/wiki/does-not-exist")
        assert response.status_code == 404
        assert response.json()["message"] == "Page not found"

    def test_update_requires_content_or_icon(self, client, admin_headers, sample_page):
        response = client.put(f"/api/wiki/{sample_page['id']}", json={}, headers=admin_headers)
        assert response.status_code == 400

    def test_update_icon_only(self, client, admin_headers, sample_page):
        response = client.put(f"/api/wiki/{sample_page['id']}", json={"icon": "star"}, headers=admin_headers)
        assert response.status_code == 200
        page = response.json()["page"]
        assert page["icon"] == "star"
        assert page["content"] == "Original content"

    def test_rename_conflict(self, client, admin_headers, sample_page):
        response = client.put(
            f"/api/wiki/{sample_page['id']}/rename", json={"title": "Home"}, headers=admin_headers
        )
        assert response.status_code == 409

    def test_rename(self, client, admin_headers, sample_page):
        response = client.put(
            f"/api/wiki/{sample_page['id']}/rename", json={"title": "Renamed"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert client.get("/api/wiki/Renamed").json()["page"]["id"] == sample_page["id"]

    def test_toggle_comments(self, client, admin_headers, sample_page):
        response = client.put(
            f"/api/wiki/{sample_page['id']}/comments", json={"commentsEnabled": True}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["page"]["commentsEnabled"] is True

    def test_delete(self, client, admin_headers, sample_page):
        response = client.delete(f"/api/wiki/{sample_page['id']}", headers=admin_headers)
        assert response.status_code == 200
        assert client.get(f"/api/wiki/{sample_page['id']}").status_code == 404

    def test_contributor_cannot_delete(self, client, contributor_headers, sample_page):
        response = client.delete(f"/api/wiki/{sample_page['id']}", headers=contributor_headers)
        assert response.status_code == 403


@pytest.fixture
def protected_page(client, admin_headers, sample_page):
    response = client.put(
        f"/api/wiki/{sample_page['id']}/protect", json={"isProtected": True}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["page"]["isProtected"] is True
    return response.json()["page"]


@pytest.fixture
def protector_headers(client, admin_headers, login_as):
    """A user with edit_pages, delete_pages and protect_pages but no admin flag."""
    tag = client.post("/api/tags/", json={"name": "Guardians", "color": "#0F0"}, headers=admin_headers).json()["tag"]
    permissions = client.get("/api/permissions/", headers=admin_headers).json()["permissions"]
    ids = [p["id"] for p in permissions if p["name"] in ("edit_pages", "delete_pages", "protect_pages")]
    client.put(f"/api/permissions/tags/{tag['id']}", json={"permissionIds": ids}, headers=admin_headers)
    client.post(
        "/api/auth/users",
        json={"username": "guardian", "email": "guardian@test.com", "password": "pw123456", "tags": ["Guardians"]},
        headers=admin_headers
    )
    return login_as("guardian", "pw123456")


class TestProtectedPages:
    """Protected pages need admin or protect_pages on top of the action's permission."""

    def test_contributor_cannot_edit(self, client, contributor_headers, protected_page):
        response = client.put(
            f"/api/wiki/{protected_page['id']}", json={"content": "vandalism"}, headers=contributor_headers
        )
        assert response.status_code == 403
        assert "protected" in response.json()["message"]

    def test_contributor_cannot_rename(self, client, contributor_headers, protected_page):
        response = client.put(
            f"/api/wiki/{protected_page['id']}/rename", json={"title": "Taken over"}, headers=contributor_headers
        )
        assert response.status_code == 403

    def test_contributor_cannot_protect(self, client, contributor_headers, protected_page):
        response = client.put(
            f"/api/wiki/{protected_page['id']}/protect", json={"isProtected": False}, headers=contributor_headers
        )
        assert response.status_code == 403

    def test_admin_can_edit(self, client, admin_headers, protected_page):
        response = client.put(
            f"/api/wiki/{protected_page['id']}", json={"content": "Official"}, headers=admin_headers
        )
        assert response.status_code == 200

    def test_protect_pages_holder_can_edit_rename_and_delete(self, client, protector_headers, protected_page):
        page_id = protected_page["id"]
        assert client.put(f"/api/wiki/{page_id}", json={"content": "Guarded"}, headers=protector_headers).status_code == 200
        assert client.put(
            f"/api/wiki/{page_id}/rename", json={"title": "Guarded Page"}, headers=protector_headers
        ).status_code == 200
        assert client.delete(f"/api/wiki/{page_id}", headers=protector_headers).status_code == 200
