from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserPublic(BaseModel):
    """User fields safe to return to any client."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    role: str = "user"
    avatar: str | None = None


class AuthorSummary(BaseModel):
    """Post author as embedded in post responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    avatar: str | None = None


class CommentAuthor(BaseModel):
    """Comment author as embedded in comment responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    avatar: str | None = None
