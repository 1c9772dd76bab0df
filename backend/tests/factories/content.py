"""Factories for categories, posts, comments and media."""

from __future__ import annotations

import factory

from blogapi.models.base import utcnow
from blogapi.models.category import Category
from blogapi.models.comment import Comment
from blogapi.models.media import Media, MediaType
from blogapi.models.post import Post, PostStatus
from tests.factories import BaseFactory
from tests.factories.user import UserFactory


class CategoryFactory(BaseFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.Sequence(lambda n: f"category-{n}")
    description = factory.Faker("sentence")


class PostFactory(BaseFactory):
    """Draft post by default; ``published=True`` stamps ``published_at``."""

    class Meta:
        model = Post

    class Params:
        published = factory.Trait(
            status=PostStatus.PUBLISHED,
            published_at=factory.LazyFunction(utcnow),
        )

    title = factory.Sequence(lambda n: f"Post title number {n}")
    slug = factory.Sequence(lambda n: f"post-slug-{n}")
    content = factory.Faker("paragraph", nb_sentences=3)
    excerpt = None
    featured_image = None
    tags = factory.LazyFunction(list)
    status = PostStatus.DRAFT
    view_count = 0
    author = factory.SubFactory(UserFactory)
    category = factory.SubFactory(CategoryFactory)
    published_at = None


class CommentFactory(BaseFactory):
    class Meta:
        model = Comment

    content = factory.Faker("sentence")
    post = factory.SubFactory(PostFactory, published=True)
    user = factory.SubFactory(UserFactory)
    parent_id = None


class MediaFactory(BaseFactory):
    class Meta:
        model = Media

    filename = factory.Sequence(lambda n: f"file-{n}.jpg")
    original_name = factory.LazyAttribute(lambda o: o.filename)
    mime_type = "image/jpeg"
    path = factory.LazyAttribute(lambda o: f"media/{o.filename}")
    url = factory.LazyAttribute(lambda o: f"http://testserver/uploads/{o.path}")
    size = 1024
    width = 64
    height = 64
    media_type = MediaType.IMAGE
    user = factory.SubFactory(UserFactory)
    post_id = None
    is_featured = False
