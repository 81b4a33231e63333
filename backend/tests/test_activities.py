"""Tests for the activity feed."""


class TestActivityFeed:

    def test_member_sees_own_feed(self, client, contributor_headers):
        response = client.get("/api/activities/", headers=contributor_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["activities"]
        assert {a["username"] for a in data["activities"]} == {"contributor"}
        assert data["activities"][0]["title"] == "Successful login"
        assert data["page"] == 1
        assert "hasMore" in data

    def test_guest_feed_hides_admin_entries(self, client, admin_headers):
        client.post("/api/tags/", json={"name": "Hidden", "color": "#123"}, headers=admin_headers)

        response = client.get("/api/activities/")
        assert response.status_code == 200
        types = {a["type"] for a in response.json()["activities"]}
        assert "admin" not in types
        assert "auth" in types

    def test_guest_needs_view_activity(self, client, admin_headers):
        tags = client.get("/api/permissions/tags", headers=admin_headers).json()["tags"]
        guest = next(tag for tag in tags if tag["name"] == "Unauthenticated User")
        client.put(f"/api/permissions/tags/{guest['id']}", json={"permissionIds": []}, headers=admin_headers)

        assert client.get("/api/activities/").status_code == 401

    def test_pagination(self, client, contributor_headers):
        for index in range(3):
            client.post("/api/activities/", json={"type": "note", "title": f"Note {index}"}, headers=contributor_headers)

        first = client.get("/api/activities/?page=1&limit=2", headers=contributor_headers).json()
        assert len(first["activities"]) == 2
        assert first["hasMore"] is True
        assert first["total"] == 4

        last = client.get("/api/activities/?page=2&limit=2", headers=contributor_headers).json()
        assert len(last["activities"]) == 2
        assert last["hasMore"] is False

    def test_create_parses_metadata(self, client, contributor_headers):
        response = client.post(
            "/api/activities/",
            json={"type": "note", "title": "Bookmarked", "metadata": {"pageId": 1}},
            headers=contributor_headers
        )
        assert response.status_code == 201
        activity = response.json()["activity"]
        assert activity["metadata"] == {"pageId": 1}
        assert activity["icon"] == "star"

    def test_create_requires_title(self, client, contributor_headers):
        response = client.post("/api/activities/", json={"type": "note"}, headers=contributor_headers)
        assert response.status_code == 422

    def test_today(self, client, contributor_headers):
        response = client.get("/api/activities/today", headers=contributor_headers)
        assert response.status_code == 200
        assert any(a["title"] == "Successful login" for a in response.json()["activities"])

    def test_search(self, client, contributor_headers):
        client.post("/api/activities/", json={"type": "note", "title": "Read the manual"}, headers=contributor_headers)

        response = client.get("/api/activities/search?q=manual", headers=contributor_headers)
        assert response.status_code == 200
        assert [a["title"] for a in response.json()["activities"]] == ["Read the manual"]

        assert client.get("/api/activities/search", headers=contributor_headers).status_code == 422

    def test_search_treats_wildcards_literally(self, client, contributor_headers):
        client.post("/api/activities/", json={"type": "note", "title": "100% done"}, headers=contributor_headers)
        client.post("/api/activities/", json={"type": "note", "title": "read_me"}, headers=contributor_headers)

        response = client.get("/api/activities/search", params={"q": "%"}, headers=contributor_headers)
        assert [a["title"] for a in response.json()["activities"]] == ["100% done"]

        response = client.get("/api/activities/search", params={"q": "_"}, headers=contributor_headers)
        assert [a["title"] for a in response.json()["activities"]] == ["read_me"]

    def test_page_edits_are_logged(self, client, admin_headers, sample_page):
        activities = client.get("/api/activities/", headers=admin_headers).json()["activities"]
        created = next(a for a in activities if a["title"] == "Page created")
        assert created["type"] == "wiki"
        assert created["metadata"] == {"pageId": sample_page["id"], "pageTitle": "Sample Page"}

    def test_admin_feed(self, client, admin_headers, contributor_headers):
        assert client.get("/api/activities/admin/all", headers=contributor_headers).status_code == 403

        response = client.get("/api/activities/admin/all", headers=admin_headers)
        assert response.status_code == 200
        usernames = {a["username"] for a in response.json()["activities"]}
        assert {"admin", "contributor"} <= usernames
