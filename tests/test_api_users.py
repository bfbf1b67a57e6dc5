import uuid


class TestProfileEndpoint:
    def test_profile(self, client, auth_headers, person):
        resp = client.get("/users/profile", headers=auth_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["id"] == str(person.id)
        assert data["department"] == "Finance"
        assert data["role"] == "user"
        assert "password" not in data

    def test_profile_requires_token(self, client):
        resp = client.get("/users/profile")
        assert resp.status_code == 401
        assert resp.json()["code"] == "unauthorized"
        assert resp.headers["www-authenticate"] == "Bearer"


class TestUserAdminEndpoints:
    def test_list_users(self, client, admin_headers, person):
        resp = client.get("/users", headers=admin_headers)
        assert resp.status_code == 200
        emails = {u["email"] for u in resp.json()}
        assert person.email in emails

    def test_list_users_requires_admin(self, client, auth_headers):
        resp = client.get("/users", headers=auth_headers)
        assert resp.status_code == 403

    def test_create_user(self, client, admin_headers):
        resp = client.post(
            "/users",
            json={
                "name": "New Clerk",
                "email": "clerk@example.com",
                "department": "Legal",
            },
            headers=admin_headers,
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["role"] == "user"
        assert data["is_active"] is True

    def test_create_duplicate_user(self, client, admin_headers, person):
        resp = client.post(
            "/users",
            json={"name": "Dup", "email": person.email},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "User already exists"

    def test_update_user(self, client, admin_headers, person):
        resp = client.put(
            f"/users/{person.id}",
            json={"department": "Treasury", "role": "admin"},
            headers=admin_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["department"] == "Treasury"
        assert resp.json()["role"] == "admin"

    def test_update_user_email_taken(self, client, admin_headers, person, colleague):
        resp = client.put(
            f"/users/{person.id}",
            json={"email": colleague.email},
            headers=admin_headers,
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Email already in use"

    def test_delete_user(self, client, admin_headers, other_person):
        resp = client.delete(f"/users/{other_person.id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json() == {"message": "User deleted successfully"}

    def test_cannot_delete_self(self, client, admin_headers, admin):
        resp = client.delete(f"/users/{admin.id}", headers=admin_headers)
        assert resp.status_code == 400
        assert resp.json()["message"] == "Cannot delete your own account"

    def test_delete_missing_user(self, client, admin_headers):
        resp = client.delete(f"/users/{uuid.uuid4()}", headers=admin_headers)
        assert resp.status_code == 404
