"""Database models for the application."""

from techtalk.models.category import CategoryDB
from techtalk.models.post import PostDB
from techtalk.models.user import UserDB

__all__ = ["CategoryDB", "PostDB", "UserDB"]
