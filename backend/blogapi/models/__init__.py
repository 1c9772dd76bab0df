from blogapi.models.category import Category
from blogapi.models.comment import Comment
from blogapi.models.media import Media, MediaType
from blogapi.models.post import Post, PostStatus
from blogapi.models.refresh_token import RefreshToken
from blogapi.models.user import Role, User

__all__ = [
    "Category",
    "Comment",
    "Media",
    "MediaType",
    "Post",
    "PostStatus",
    "RefreshToken",
    "Role",
    "User",
]
