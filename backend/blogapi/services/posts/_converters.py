from __future__ import annotations

from blogapi.models.base import as_utc
from blogapi.models.post import Post

from .dto import PostAuthorOut, PostCategoryOut, PostOut


def post_to_out(post: Post, *, comment_count: int = 0) -> PostOut:
    author = post.author
    category = post.category
    return PostOut(
        id=str(post.id),
        title=post.title,
        slug=post.slug,
        content=post.content,
        excerpt=post.excerpt,
        featured_image=post.featured_image,
        status=post.status.value,
        views=int(post.view_count or 0),
        author_id=str(post.author_id),
        author=PostAuthorOut(
            id=str(author.id),
            username=author.username,
            full_name=author.full_name,
            avatar=author.avatar,
        ),
        category_id=str(post.category_id),
        category=PostCategoryOut(id=str(category.id), name=category.name, slug=category.slug),
        tags=list(post.tags or []),
        comment_count=int(comment_count),
        published_at=as_utc(post.published_at),
        created_at=as_utc(post.created_at),
        updated_at=as_utc(post.updated_at),
    )
