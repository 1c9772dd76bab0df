"""Media uploads over HTTP plus the file/row consistency guarantees."""

from __future__ import annotations

import io

import pytest
from PIL import Image
from sqlalchemy.exc import IntegrityError

from blogapi.repositories.media import MediaRepository
from blogapi.services._shared.base import ServiceContext
from blogapi.services._shared.identity import RequestIdentity
from blogapi.services.media.dto import MediaUploadIn
from blogapi.services.media.service import MediaService
from tests.factories.content import MediaFactory, PostFactory
from tests.factories.user import AdminFactory, UserFactory


def _png(size=(32, 24)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color="blue").save(buf, format="PNG")
    return buf.getvalue()


def _files(root) -> set[str]:
    return {str(p.relative_to(root)) for p in root.rglob("*") if p.is_file()}


def _upload(client, headers, **form):
    data = {"file": (io.BytesIO(_png()), "photo.png", "image/png"), **form}
    return client.post("/api/v1/media", data=data, headers=headers, content_type="multipart/form-data")


def test_upload_stores_reencoded_file(client, api_headers, login, upload_dir):
    tokens = login(UserFactory().email)

    resp = _upload(client, api_headers(tokens["access_token"]), alt_text="A blue square")

    assert resp.status_code == 201
    media = resp.get_json()["data"]
    assert media["mime_type"] == "image/jpeg"
    assert media["original_name"] == "photo.png"
    assert (media["width"], media["height"]) == (32, 24)
    assert media["alt_text"] == "A blue square"
    assert media["url"] == f"http://testserver/uploads/media/{media['filename']}"
    assert (upload_dir / "media" / media["filename"]).is_file()

    public = client.get(f"/api/v1/media/{media['id']}", headers=api_headers())
    assert public.status_code == 200


def test_upload_requires_a_file(client, api_headers, login):
    tokens = login(UserFactory().email)
    resp = client.post(
        "/api/v1/media",
        data={"alt_text": "nothing"},
        headers=api_headers(tokens["access_token"]),
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "file is required"


def test_upload_rejects_non_images(client, api_headers, login):
    tokens = login(UserFactory().email)
    resp = client.post(
        "/api/v1/media",
        data={"file": (io.BytesIO(b"%PDF-1.4 not an image"), "doc.pdf", "application/pdf")},
        headers=api_headers(tokens["access_token"]),
        content_type="multipart/form-data",
    )
    assert resp.status_code == 400


def test_featured_flag_is_exclusive_per_post(client, api_headers, login):
    author = UserFactory()
    post = PostFactory(author=author, published=True)
    headers = api_headers(login(author.email)["access_token"])

    first = _upload(client, headers, post_id=str(post.id), is_featured="true").get_json()["data"]
    second = _upload(client, headers, post_id=str(post.id), is_featured="true").get_json()["data"]

    featured = client.get(f"/api/v1/posts/{post.id}/media/featured", headers=api_headers())
    assert featured.get_json()["data"]["id"] == second["id"]
    assert client.get(f"/api/v1/media/{first['id']}", headers=api_headers()).get_json()["data"][
        "is_featured"
    ] is False

    listing = client.get(f"/api/v1/posts/{post.id}/media", headers=api_headers())
    assert {m["id"] for m in listing.get_json()["data"]} == {first["id"], second["id"]}


def test_draft_post_media_hidden_from_anonymous(client, api_headers, login):
    author = UserFactory()
    draft = PostFactory(author=author)
    MediaFactory(user=author, post_id=draft.id, is_featured=True)
    listing_url = f"/api/v1/posts/{draft.id}/media"
    featured_url = f"{listing_url}/featured"

    assert client.get(listing_url, headers=api_headers()).status_code == 404
    assert client.get(featured_url, headers=api_headers()).status_code == 404

    other = api_headers(login(UserFactory().email)["access_token"])
    assert client.get(listing_url, headers=other).status_code == 404

    own = api_headers(login(author.email)["access_token"])
    assert len(client.get(listing_url, headers=own).get_json()["data"]) == 1
    assert client.get(featured_url, headers=own).status_code == 200


def test_upload_to_unknown_post(client, api_headers, login):
    tokens = login(UserFactory().email)
    resp = _upload(client, api_headers(tokens["access_token"]), post_id="missing")
    assert resp.status_code == 404
    assert resp.get_json()["detail"] == "post not found"


def test_delete_removes_file(client, api_headers, login, upload_dir):
    headers = api_headers(login(UserFactory().email)["access_token"])
    media = _upload(client, headers).get_json()["data"]
    stored = upload_dir / "media" / media["filename"]
    assert stored.is_file()

    resp = client.delete(f"/api/v1/media/{media['id']}", headers=headers)

    assert resp.status_code == 200
    assert not stored.exists()
    assert client.get(f"/api/v1/media/{media['id']}", headers=api_headers()).status_code == 404


def test_listing_is_scoped_to_the_caller(client, api_headers, login):
    mine, theirs = UserFactory(), UserFactory()
    own = MediaFactory(user=mine)
    MediaFactory(user=theirs)
    headers = api_headers(login(mine.email)["access_token"])

    listing = client.get("/api/v1/media", headers=headers)
    assert [m["id"] for m in listing.get_json()["data"]] == [str(own.id)]

    foreign = client.get(f"/api/v1/media?user_id={theirs.id}", headers=headers)
    assert foreign.status_code == 403
    assert foreign.get_json()["detail"] == "you can only view your own media"

    admin_headers = api_headers(login(AdminFactory().email)["access_token"])
    assert client.get(f"/api/v1/media?user_id={theirs.id}", headers=admin_headers).status_code == 200


def test_other_user_cannot_delete(client, api_headers, login):
    media = MediaFactory()
    headers = api_headers(login(UserFactory().email)["access_token"])

    resp = client.delete(f"/api/v1/media/{media.id}", headers=headers)
    assert resp.status_code == 403


def test_failed_insert_removes_stored_file(providers, upload_dir, monkeypatch):
    user = UserFactory()
    service = MediaService(
        storage=providers.storage,
        image_processor=providers.images,
        ctx=ServiceContext(identity=RequestIdentity.from_user(user)),
    )
    before = _files(upload_dir)

    def _fail(self, instance):
        raise IntegrityError("INSERT INTO media", {}, Exception("boom"))

    monkeypatch.setattr(MediaRepository, "add", _fail)

    with pytest.raises(IntegrityError):
        service.upload(MediaUploadIn(filename="photo.png", content_type="image/png", data=_png()))

    assert _files(upload_dir) == before
