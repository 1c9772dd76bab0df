"""HTTP tests for the API-key check and bearer authentication."""

from __future__ import annotations

import pytest

from blogapi.models.base import utcnow
from tests.factories.content import PostFactory
from tests.factories.user import AdminFactory, UserFactory

PROFILE = "/api/v1/profile"


def _detail(resp) -> str:
    return resp.get_json()["detail"]


class TestApiKey:
    def test_missing_key(self, client):
        resp = client.get("/api/v1/posts")
        assert resp.status_code == 401
        assert _detail(resp) == "API Key is required"

    def test_wrong_key(self, client):
        resp = client.get("/api/v1/posts", headers={"X-API-KEY": "nope"})
        assert resp.status_code == 401
        assert _detail(resp) == "Invalid API KEY"

    def test_health_needs_no_key(self, client):
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["status"] == "ok"
        assert body["db"] == "ok"

    def test_preflight_needs_no_key(self, client):
        resp = client.options(
            "/api/v1/posts",
            headers={"Origin": "http://localhost:3000", "Access-Control-Request-Method": "GET"},
        )
        assert resp.status_code == 200

    def test_valid_key(self, client, api_headers):
        assert client.get("/api/v1/posts", headers=api_headers()).status_code == 200


class TestBearer:
    def test_missing_header(self, client, api_headers):
        resp = client.get(PROFILE, headers=api_headers())
        assert resp.status_code == 401
        assert _detail(resp) == "authorization header is required"

    @pytest.mark.parametrize("value", ["Token abc", "Bearer", "bearer abc"])
    def test_malformed_header(self, client, api_headers, value):
        resp = client.get(PROFILE, headers={**api_headers(), "Authorization": value})
        assert resp.status_code == 401
        assert _detail(resp) == "invalid authorization header format"

    def test_invalid_token(self, client, api_headers):
        resp = client.get(PROFILE, headers=api_headers("not.a.jwt"))
        assert resp.status_code == 401
        assert _detail(resp) == "invalid or expired token"

    def test_refresh_token_is_not_an_access_token(self, client, api_headers, login):
        user = UserFactory()
        tokens = login(user.email)
        resp = client.get(PROFILE, headers=api_headers(tokens["refresh_token"]))
        assert resp.status_code == 401

    def test_deleted_user(self, client, api_headers, login, session):
        user = UserFactory()
        tokens = login(user.email)
        user.deleted_at = utcnow()
        session.commit()

        resp = client.get(PROFILE, headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 401
        assert _detail(resp) == "user not found"

    def test_inactive_user(self, client, api_headers, login, session):
        user = UserFactory()
        tokens = login(user.email)
        user.is_active = False
        session.commit()

        resp = client.get(PROFILE, headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 401
        assert _detail(resp) == "user account is inactive"

    def test_valid_token(self, client, api_headers, login):
        user = UserFactory()
        tokens = login(user.email)

        resp = client.get(PROFILE, headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 200
        assert resp.get_json()["data"]["id"] == str(user.id)

    def test_logged_out_access_token_is_refused(self, client, api_headers, login):
        user = UserFactory()
        tokens = login(user.email)
        resp = client.post(
            "/api/v1/auth/logout",
            json={"refresh_token": tokens["refresh_token"]},
            headers=api_headers(tokens["access_token"]),
        )
        assert resp.status_code == 200

        resp = client.get(PROFILE, headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 401


class TestOptionalAuth:
    def test_bad_token_continues_anonymously(self, client, api_headers):
        author = UserFactory()
        published = PostFactory(author=author, published=True)
        PostFactory(author=author)

        resp = client.get("/api/v1/posts", headers=api_headers("garbage"))
        assert resp.status_code == 200
        ids = {p["id"] for p in resp.get_json()["data"]}
        assert str(published.id) in ids
        assert len([i for i in ids if i != str(published.id)]) == 0

    def test_author_sees_own_draft(self, client, api_headers, login):
        author = UserFactory()
        draft = PostFactory(author=author)
        tokens = login(author.email)

        resp = client.get(f"/api/v1/posts/{draft.id}", headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 200

        anon = client.get(f"/api/v1/posts/{draft.id}", headers=api_headers())
        assert anon.status_code == 404
        assert _detail(anon) == "post not found"


class TestRoles:
    def test_user_cannot_list_users(self, client, api_headers, login):
        user = UserFactory()
        tokens = login(user.email)
        resp = client.get("/api/v1/users", headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 403
        assert _detail(resp) == "you don't have permission to access this resource"

    def test_admin_lists_users(self, client, api_headers, login):
        admin = AdminFactory()
        tokens = login(admin.email)
        resp = client.get("/api/v1/users?limit=5", headers=api_headers(tokens["access_token"]))
        assert resp.status_code == 200
        assert resp.get_json()["meta"]["limit"] == 5
