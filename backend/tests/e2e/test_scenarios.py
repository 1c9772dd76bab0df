"""End-to-end flows through the HTTP API."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tests.factories.content import CategoryFactory, PostFactory
from tests.factories.user import AdminFactory, UserFactory


def _when(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def _register(client, api_headers, username: str, email: str, password: str = "longenough1"):
    return client.post(
        "/api/v1/auth/register",
        json={"username": username, "email": email, "password": password},
        headers=api_headers(),
    )


def test_register_returns_tokens_and_profile(client, api_headers):
    resp = _register(client, api_headers, "alice", "alice@x.com")

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["token_type"] == "Bearer"
    assert data["user"]["role"] == "user"
    assert data["user"]["is_active"] is True
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]


def test_register_validation_error(client, api_headers):
    resp = _register(client, api_headers, "al", "not-an-email", password="short")

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert set(body["details"]["errors"]) >= {"username", "email", "password"}


def test_login_with_wrong_password(client, api_headers):
    _register(client, api_headers, "alice", "alice@x.com")

    resp = client.post(
        "/api/v1/auth/login",
        json={"email": "alice@x.com", "password": "wrongpassword"},
        headers=api_headers(),
    )

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["detail"] == "invalid email or password"
    assert "Traceback" not in resp.get_data(as_text=True)


def test_other_user_cannot_update_post(client, api_headers, login):
    category = CategoryFactory()
    alice = _register(client, api_headers, "alice", "alice@x.com").get_json()["data"]
    created = client.post(
        "/api/v1/posts",
        json={
            "title": "My first post",
            "slug": "my-first-post",
            "content": "<p>Hello there, <script>x()</script>world.</p>",
            "category_id": str(category.id),
            "tags": ["intro"],
        },
        headers=api_headers(alice["access_token"]),
    )
    assert created.status_code == 201
    post = created.get_json()["data"]
    assert post["status"] == "draft"
    assert "<script>" not in post["content"]

    bob = UserFactory(username="bob")
    bob_tokens = login(bob.email)
    resp = client.put(
        f"/api/v1/posts/{post['id']}",
        json={"title": "Hijacked title"},
        headers=api_headers(bob_tokens["access_token"]),
    )

    assert resp.status_code == 403
    assert resp.get_json()["detail"] == "you don't have permission to update this post"


def test_refresh_rotation(client, api_headers):
    tokens = _register(client, api_headers, "alice", "alice@x.com").get_json()["data"]

    def refresh(token):
        return client.post(
            "/api/v1/auth/refresh", json={"refresh_token": token}, headers=api_headers()
        )

    first = refresh(tokens["refresh_token"])
    assert first.status_code == 200
    rotated = first.get_json()["data"]["refresh_token"]

    second = refresh(rotated)
    assert second.status_code == 200

    stale = refresh(tokens["refresh_token"])
    assert stale.status_code == 401
    assert stale.get_json()["detail"] == "refresh token has been revoked"


def test_admin_publishes_draft_once(client, api_headers, login):
    bob = UserFactory(username="bob")
    draft = PostFactory(author=bob)
    admin_tokens = login(AdminFactory().email)
    bob_tokens = login(bob.email)

    before = datetime.now(UTC)
    resp = client.post(
        f"/api/v1/posts/{draft.id}/publish", headers=api_headers(admin_tokens["access_token"])
    )
    assert resp.status_code == 200
    published = resp.get_json()["data"]
    assert published["status"] == "published"
    stamped = _when(published["published_at"])
    assert before - timedelta(seconds=1) <= stamped <= datetime.now(UTC) + timedelta(seconds=1)

    again = client.post(
        f"/api/v1/posts/{draft.id}/publish", headers=api_headers(admin_tokens["access_token"])
    )
    assert again.status_code == 400

    resp = client.put(
        f"/api/v1/posts/{draft.id}",
        json={"title": "An edited title"},
        headers=api_headers(bob_tokens["access_token"]),
    )
    assert resp.status_code == 200
    updated = resp.get_json()["data"]
    assert updated["title"] == "An edited title"
    assert _when(updated["published_at"]) == stamped


def test_plain_user_cannot_publish(client, api_headers, login):
    bob = UserFactory()
    draft = PostFactory(author=bob)
    tokens = login(bob.email)

    resp = client.post(f"/api/v1/posts/{draft.id}/publish", headers=api_headers(tokens["access_token"]))
    assert resp.status_code == 403
