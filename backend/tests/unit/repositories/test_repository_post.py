"""Unit tests for PostRepository search and visibility filters."""

from __future__ import annotations

import pytest

from blogapi.models.post import PostStatus
from blogapi.repositories.base import Pagination
from blogapi.repositories.post import PostRepository
from tests.factories.content import CategoryFactory, PostFactory
from tests.factories.user import UserFactory


def _page(limit: int = 50, sort: list[str] | None = None) -> Pagination:
    return Pagination(page=1, limit=limit, sort=sort or [])


class TestPostRepository:
    @pytest.fixture()
    def repo(self):
        return PostRepository()

    @pytest.fixture()
    def posts(self):
        alice, bob = UserFactory(), UserFactory()
        return {
            "alice": alice,
            "bob": bob,
            "alice_pub": PostFactory(author=alice, published=True, title="Flask tips and tricks"),
            "alice_draft": PostFactory(author=alice, title="Unfinished thoughts"),
            "bob_draft": PostFactory(author=bob, title="Bob writes about Flask"),
            "bob_archived": PostFactory(author=bob, status=PostStatus.ARCHIVED),
        }

    def _ids(self, page):
        return {p.id for p in page.items}

    def test_published_only(self, repo, posts):
        page = repo.search(_page(), published_only=True)
        assert self._ids(page) == {posts["alice_pub"].id}
        assert page.total == 1

    def test_visible_to_author_adds_own_drafts(self, repo, posts):
        page = repo.search(_page(), visible_to=str(posts["bob"].id))
        assert self._ids(page) == {
            posts["alice_pub"].id,
            posts["bob_draft"].id,
            posts["bob_archived"].id,
        }

    def test_no_visibility_restriction_for_admins(self, repo, posts):
        assert repo.search(_page()).total == 4

    def test_search_is_case_insensitive(self, repo, posts):
        page = repo.search(_page(), search="FLASK")
        assert self._ids(page) == {posts["alice_pub"].id, posts["bob_draft"].id}

    def test_tag_filter(self, repo):
        tagged = PostFactory(tags=["python", "flask"], published=True)
        PostFactory(tags=["pythonic"], published=True)

        page = repo.search(_page(), tag="Python")
        assert self._ids(page) == {tagged.id}

    def test_equality_filters(self, repo, posts):
        category = CategoryFactory()
        in_category = PostFactory(category=category)

        by_category = repo.search(_page(), filters={"category_id": category.id})
        by_author = repo.search(_page(), filters={"author_id": posts["alice"].id, "status": None})

        assert self._ids(by_category) == {in_category.id}
        assert self._ids(by_author) == {posts["alice_pub"].id, posts["alice_draft"].id}

    def test_pagination_window(self, repo):
        author = UserFactory()
        PostFactory.create_batch(5, author=author)

        page = repo.search(Pagination(page=2, limit=2, sort=["title"]), filters={"author_id": author.id})
        assert page.total == 5
        assert page.total_pages == 3
        assert len(page.items) == 2

    def test_soft_deleted_posts_disappear(self, repo, posts):
        repo.delete(posts["alice_pub"])

        assert repo.get(posts["alice_pub"].id) is None
        assert repo.search(_page(), published_only=True).total == 0

    def test_slug_lookup_and_taken(self, repo):
        post = PostFactory(slug="hello-world")

        assert repo.get_by_slug("Hello-World ").id == post.id
        assert repo.slug_taken("hello-world")
        assert not repo.slug_taken("hello-world", exclude_id=post.id)

    def test_increment_views(self, repo, session):
        post = PostFactory(published=True)

        assert repo.increment_views(post.id) is True
        assert repo.increment_views(post.id) is True
        assert repo.increment_views("missing") is False
        session.refresh(post)
        assert post.view_count == 2
