"""Tests for page history and restore."""


def _update(client, headers, page_id, content):
    response = client.put(f"/api/wiki/{page_id}", json={"content": content}, headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["page"]


class TestHistory:

    def test_each_update_archives_previous_content(self, client, admin_headers, sample_page):
        page_id = sample_page["id"]
        for version in range(1, 4):
            _update(client, admin_headers, page_id, f"Version {version}")

        response = client.get(f"/api/wiki/{page_id}/history")
        assert response.status_code == 200
        history = response.json()["history"]
        assert len(history) == 3
        # Newest first, without content in the list
        assert "content" not in history[0]
        assert [entry["id"] for entry in history] == sorted((entry["id"] for entry in history), reverse=True)

        latest = client.get(f"/api/wiki/{page_id}/history/{history[0]['id']}").json()["version"]
        oldest = client.get(f"/api/wiki/{page_id}/history/{history[-1]['id']}").json()["version"]
        assert latest["content"] == "Version 2"
        assert oldest["content"] == "Original content"
        assert latest["author"] == "admin"

    def test_rename_does_not_archive(self, client, admin_headers, sample_page):
        client.put(f"/api/wiki/{sample_page['id']}/rename", json={"title": "Other Name"}, headers=admin_headers)
        history = client.get(f"/api/wiki/{sample_page['id']}/history").json()["history"]
        assert history == []

    def test_change_reason_is_kept(self, client, admin_headers, sample_page):
        client.put(
            f"/api/wiki/{sample_page['id']}",
            json={"content": "Fixed", "changeReason": "typo"},
            headers=admin_headers
        )
        history = client.get(f"/api/wiki/{sample_page['id']}/history").json()["history"]
        assert history[0]["changeReason"] == "typo"

    def test_entry_of_other_page_is_not_found(self, client, admin_headers, sample_page):
        _update(client, admin_headers, sample_page["id"], "Changed")
        entry_id = client.get(f"/api/wiki/{sample_page['id']}/history").json()["history"][0]["id"]

        response = client.get(f"/api/wiki/Home/history/{entry_id}")
        assert response.status_code == 404

    def test_restore(self, client, admin_headers, sample_page):
        page_id = sample_page["id"]
        _update(client, admin_headers, page_id, "Second")
        _update(client, admin_headers, page_id, "Third")
        history = client.get(f"/api/wiki/{page_id}/history").json()["history"]
        original = history[-1]

        response = client.post(f"/api/wiki/{page_id}/history/{original['id']}/restore", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["page"]["content"] == "Original content"

        history = client.get(f"/api/wiki/{page_id}/history").json()["history"]
        assert len(history) == 3
        newest = client.get(f"/api/wiki/{page_id}/history/{history[0]['id']}").json()["version"]
        assert newest["content"] == "Third"
        assert newest["changeReason"] == f"Restored version {original['id']}"

    def test_restore_requires_edit_permission(self, client, admin_headers, visitor_headers, sample_page):
        _update(client, admin_headers, sample_page["id"], "Changed")
        entry_id = client.get(f"/api/wiki/{sample_page['id']}/history").json()["history"][0]["id"]

        response = client.post(
            f"/api/wiki/{sample_page['id']}/history/{entry_id}/restore", headers=visitor_headers
        )
        assert response.status_code == 403
