from techtalk.repositories.base import BaseRepository
from techtalk.repositories.category import CategoryRepository
from techtalk.repositories.post import PostRepository
from techtalk.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "CategoryRepository",
    "PostRepository",
    "UserRepository",
]
