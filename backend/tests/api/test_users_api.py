"""HTTP tests for /api/v1/users and /api/v1/profile."""

from __future__ import annotations

from tests.factories.user import AdminFactory, SuperAdminFactory, UserFactory


def test_profile_update_and_password_change(client, api_headers, login):
    user = UserFactory()
    tokens = login(user.email)
    headers = api_headers(tokens["access_token"])

    updated = client.put("/api/v1/profile", json={"full_name": "Alice Liddell"}, headers=headers)
    assert updated.status_code == 200
    assert updated.get_json()["data"]["full_name"] == "Alice Liddell"

    wrong = client.put(
        "/api/v1/profile/password",
        json={"old_password": "not-it-at-all", "new_password": "brandnewpass"},
        headers=headers,
    )
    assert wrong.status_code == 400

    changed = client.put(
        "/api/v1/profile/password",
        json={"old_password": "Passw0rd!", "new_password": "brandnewpass"},
        headers=headers,
    )
    assert changed.status_code == 200
    assert changed.get_json()["message"] == "password changed successfully"

    # every session was revoked
    stale = client.post(
        "/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}, headers=api_headers()
    )
    assert stale.status_code == 401
    assert login(user.email, "brandnewpass")["access_token"]


def test_super_admin_creates_and_deletes_users(client, api_headers, login):
    tokens = login(SuperAdminFactory().email)
    headers = api_headers(tokens["access_token"])

    created = client.post(
        "/api/v1/users",
        json={
            "username": "editor",
            "email": "editor@example.com",
            "password": "editorpass1",
            "role": "admin",
        },
        headers=headers,
    )
    assert created.status_code == 201
    data = created.get_json()["data"]
    assert data["role"] == "admin"

    deleted = client.delete(f"/api/v1/users/{data['id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"/api/v1/users/{data['id']}", headers=headers).status_code == 404


def test_admin_cannot_change_roles(client, api_headers, login):
    target = UserFactory()
    tokens = login(AdminFactory().email)

    resp = client.put(
        f"/api/v1/users/{target.id}", json={"role": "admin"}, headers=api_headers(tokens["access_token"])
    )
    assert resp.status_code == 403


def test_super_admin_cannot_delete_self(client, api_headers, login):
    root = SuperAdminFactory()
    tokens = login(root.email)

    resp = client.delete(f"/api/v1/users/{root.id}", headers=api_headers(tokens["access_token"]))
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "cannot delete your own account"
