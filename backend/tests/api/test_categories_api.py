"""HTTP tests for /api/v1/categories."""

from __future__ import annotations

from tests.factories.content import CategoryFactory, PostFactory
from tests.factories.user import AdminFactory, UserFactory

BASE = "/api/v1/categories"


def test_public_listing_and_lookup(client, api_headers):
    category = CategoryFactory(name="Technology", slug="technology")

    listing = client.get(f"{BASE}?search=techno", headers=api_headers())
    assert listing.status_code == 200
    assert [c["slug"] for c in listing.get_json()["data"]] == ["technology"]

    by_id = client.get(f"{BASE}/{category.id}", headers=api_headers())
    by_slug = client.get(f"{BASE}/slug/technology", headers=api_headers())
    assert by_id.get_json()["data"]["id"] == by_slug.get_json()["data"]["id"] == str(category.id)


def test_unknown_category(client, api_headers):
    resp = client.get(f"{BASE}/does-not-exist", headers=api_headers())
    assert resp.status_code == 404
    assert resp.get_json()["detail"] == "category not found"


def test_admin_manages_categories(client, api_headers, login):
    tokens = login(AdminFactory().email)
    headers = api_headers(tokens["access_token"])

    created = client.post(
        BASE, json={"name": "Lifestyle", "slug": "lifestyle", "description": "Life"}, headers=headers
    )
    assert created.status_code == 201
    category_id = created.get_json()["data"]["id"]

    duplicate = client.post(BASE, json={"name": "Other", "slug": "lifestyle"}, headers=headers)
    assert duplicate.status_code == 409

    renamed = client.put(f"{BASE}/{category_id}", json={"name": "Living"}, headers=headers)
    assert renamed.status_code == 200
    assert renamed.get_json()["data"]["name"] == "Living"

    deleted = client.delete(f"{BASE}/{category_id}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"{BASE}/{category_id}", headers=api_headers()).status_code == 404


def test_category_with_posts_cannot_be_deleted(client, api_headers, login):
    post = PostFactory()
    tokens = login(AdminFactory().email)

    resp = client.delete(f"{BASE}/{post.category_id}", headers=api_headers(tokens["access_token"]))
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "cannot delete category with posts"


def test_plain_user_cannot_create(client, api_headers, login):
    tokens = login(UserFactory().email)
    resp = client.post(
        BASE, json={"name": "News", "slug": "news"}, headers=api_headers(tokens["access_token"])
    )
    assert resp.status_code == 403


def test_invalid_slug(client, api_headers, login):
    tokens = login(AdminFactory().email)
    resp = client.post(
        BASE, json={"name": "News", "slug": "Not A Slug"}, headers=api_headers(tokens["access_token"])
    )
    assert resp.status_code == 400
    assert "slug" in resp.get_json()["details"]["errors"]
