from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from techtalk.configs.settings import COMMENT_MAX_LENGTH
from techtalk.schemas.user import CommentAuthor


class CommentCreate(BaseModel):
    """Comment payload; content must be 1 to 500 characters."""

    content: str = Field(examples=["Great post!"])

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        if not v or not v.strip():
            mssg = "Comment content is required"
            raise ValueError(mssg)
        if len(v) > COMMENT_MAX_LENGTH:
            mssg = f"Comment cannot exceed {COMMENT_MAX_LENGTH} characters"
            raise ValueError(mssg)
        return v


class CommentResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user: CommentAuthor | None = None
    content: str
    created_at: datetime = Field(alias="createdAt")


class MessageResponse(BaseModel):
    message: str
