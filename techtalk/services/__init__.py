from techtalk.services.auth import AuthService
from techtalk.services.category import DEFAULT_CATEGORIES, CategoryService
from techtalk.services.media import MediaService
from techtalk.services.post import PostService
from techtalk.services.slug import generate_unique_slug, slugify

__all__ = [
    "DEFAULT_CATEGORIES",
    "AuthService",
    "CategoryService",
    "MediaService",
    "PostService",
    "generate_unique_slug",
    "slugify",
]
