"""Tests for authentication and account endpoints."""


class TestRegister:
    """Test /api/auth/register endpoint."""

    def test_register_then_login(self, client):
        """New accounts get the Contributor tag and a working token."""
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "alice@test.com", "password": "pw123456"}
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token"]
        assert data["user"]["tags"] == ["Contributor"]

        response = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-password"})
        assert response.status_code == 401
        assert "token" not in response.json()

        response = client.post("/api/auth/login", json={"username": "alice", "password": "pw123456"})
        assert response.status_code == 200
        data = response.json()
        assert data["token"]
        assert data["user"]["username"] == "alice"
        assert "Contributor" in data["user"]["tags"]
        assert "create_pages" in data["user"]["permissions"]

    def test_register_duplicate_username(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "admin", "email": "other@test.com", "password": "pw123456"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "This username is already taken"

    def test_register_duplicate_email(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "someone", "email": "admin@openbookwiki.com", "password": "pw123456"}
        )
        assert response.status_code == 400

    def test_register_short_password(self, client):
        response = client.post(
            "/api/auth/register",
            json={"username": "bob", "email": "bob@test.com", "password": "123"}
        )
        assert response.status_code == 422


class TestLogin:
    """Test /api/auth/login endpoint."""

    def test_login_unknown_user(self, client):
        response = client.post("/api/auth/login", json={"username": "nobody", "password": "whatever"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_login_updates_last_login(self, client, admin_headers):
        response = client.get("/api/auth/me", headers=admin_headers)
        assert response.status_code == 200
        assert response.json()["user"]["lastLogin"] is not None


class TestTokens:
    """Test bearer token handling."""

    def test_me_requires_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "Access token required"

    def test_me_rejects_invalid_token(self, client):
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_verify_returns_permissions(self, client, admin_headers):
        response = client.get("/api/auth/verify", headers=admin_headers)
        assert response.status_code == 200
        user = response.json()["user"]
        assert user["isAdmin"] is True
        assert "permission_management" in user["permissions"]

    def test_token_of_deleted_user_is_rejected(self, client, admin_headers, login_as):
        client.post(
            "/api/auth/register",
            json={"username": "shortlived", "email": "short@test.com", "password": "pw123456"}
        )
        headers = login_as("shortlived", "pw123456")
        users = client.get("/api/auth/users", headers=admin_headers).json()["users"]
        user_id = next(u["id"] for u in users if u["username"] == "shortlived")

        response = client.delete(f"/api/auth/users/{user_id}", headers=admin_headers)
        assert response.status_code == 200

        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 401

    def test_logout(self, client, contributor_headers):
        response = client.post("/api/auth/logout", headers=contributor_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True


class TestGuestPermissions:

    def test_guest_permissions(self, client):
        response = client.get("/api/auth/guest-permissions")
        assert response.status_code == 200
        assert response.json()["permissions"] == ["view_activity"]


class TestProfile:
    """Test profile and password changes."""

    def test_update_bio(self, client, contributor_headers):
        response = client.put("/api/auth/profile", json={"bio": "Writes docs"}, headers=contributor_headers)
        assert response.status_code == 200
        assert response.json()["user"]["bio"] == "Writes docs"

    def test_update_profile_requires_data(self, client, contributor_headers):
        response = client.put("/api/auth/profile", json={}, headers=contributor_headers)
        assert response.status_code == 400
        assert response.json()["message"] == "No data to update"

    def test_update_profile_taken_username(self, client, contributor_headers):
        response = client.put("/api/auth/profile", json={"username": "visitor"}, headers=contributor_headers)
        assert response.status_code == 400

    def test_change_password(self, client, contributor_headers, login_as):
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "contrib123", "newPassword": "newpass123"},
            headers=contributor_headers
        )
        assert response.status_code == 200
        assert login_as("contributor", "newpass123")

    def test_change_password_wrong_current(self, client, contributor_headers):
        response = client.put(
            "/api/auth/password",
            json={"currentPassword": "nope", "newPassword": "newpass123"},
            headers=contributor_headers
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"


class TestUserManagement:
    """Test the administrator user endpoints."""

    def test_list_users_requires_permission(self, client, contributor_headers):
        response = client.get("/api/auth/users", headers=contributor_headers)
        assert response.status_code == 403

    def test_create_user_with_tags(self, client, admin_headers):
        response = client.post(
            "/api/auth/users",
            json={
                "username": "carol",
                "email": "carol@test.com",
                "password": "pw123456",
                "tags": ["Visitor"]
            },
            headers=admin_headers
        )
        assert response.status_code == 201
        user = response.json()["user"]
        assert user["tags"] == ["Visitor"]
        assert user["isAdmin"] is False

    def test_create_user_unknown_tag(self, client, admin_headers):
        response = client.post(
            "/api/auth/users",
            json={"username": "dave", "email": "dave@test.com", "password": "pw123456", "tags": ["Ghosts"]},
            headers=admin_headers
        )
        assert response.status_code == 400

    def test_admin_cannot_delete_self(self, client, admin_headers):
        me = client.get("/api/auth/me", headers=admin_headers).json()["user"]
        response = client.delete(f"/api/auth/users/{me['id']}", headers=admin_headers)
        assert response.status_code == 400

    def test_admin_cannot_drop_own_admin_flag(self, client, admin_headers):
        me = client.get("/api/auth/me", headers=admin_headers).json()["user"]
        response = client.put(f"/api/auth/users/{me['id']}", json={"isAdmin": False}, headers=admin_headers)
        assert response.status_code == 400

    def test_update_unknown_user(self, client, admin_headers):
        response = client.put("/api/auth/users/9999", json={"bio": "x"}, headers=admin_headers)
        assert response.status_code == 404

    def test_user_managers_cannot_grant_admin(self, client, admin_headers, login_as):
        """Holding user_management is not enough to hand out the admin flag."""
        tag = client.post("/api/tags/", json={"name": "Managers", "color": "#222"}, headers=admin_headers).json()["tag"]
        permissions = client.get("/api/permissions/", headers=admin_headers).json()["permissions"]
        ids = [p["id"] for p in permissions if p["name"] == "user_management"]
        client.put(f"/api/permissions/tags/{tag['id']}", json={"permissionIds": ids}, headers=admin_headers)
        client.post(
            "/api/auth/users",
            json={"username": "manager", "email": "manager@test.com", "password": "pw123456", "tags": ["Managers"]},
            headers=admin_headers
        )
        headers = login_as("manager", "pw123456")

        response = client.post(
            "/api/auth/users",
            json={"username": "sneaky", "email": "sneaky@test.com", "password": "pw123456", "isAdmin": True},
            headers=headers
        )
        assert response.status_code == 403

        response = client.post(
            "/api/auth/users",
            json={"username": "regular", "email": "regular@test.com", "password": "pw123456"},
            headers=headers
        )
        assert response.status_code == 201
