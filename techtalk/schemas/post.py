"""
Post schemas.

Request models carry the business validation for post writes (trimmed
title length, non-blank content, excerpt length, tag normalization);
response models render posts with their author, category and comment
authors resolved.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from techtalk.configs.settings import EXCERPT_MAX_LENGTH, TITLE_MAX_LENGTH
from techtalk.schemas.category import CategorySummary
from techtalk.schemas.comment import CommentResponse
from techtalk.schemas.user import AuthorSummary


def normalize_tags(value: Any) -> list[str]:
    """
    Normalize tags given as a comma separated string or a list.

    List items are split on commas too, so a multipart form that sends one
    ``"a, b"`` field and one that sends repeated ``tags`` fields agree.

    Examples
    --------
    >>> normalize_tags("python, web,, ")
    ['python', 'web']
    >>> normalize_tags(["a", " b "])
    ['a', 'b']
    """
    if value is None:
        return []
    items = [value] if isinstance(value, str) else list(value)
    return [tag.strip() for item in items for tag in str(item).split(",") if tag.strip()]


class _PostFields(BaseModel):
    @field_validator("title", check_fields=False)
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            mssg = "Title is required"
            raise ValueError(mssg)
        if len(v) > TITLE_MAX_LENGTH:
            mssg = f"Title cannot exceed {TITLE_MAX_LENGTH} characters"
            raise ValueError(mssg)
        return v

    @field_validator("content", check_fields=False)
    @classmethod
    def validate_content(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            mssg = "Content is required"
            raise ValueError(mssg)
        return v

    @field_validator("excerpt", check_fields=False)
    @classmethod
    def validate_excerpt(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if len(v) > EXCERPT_MAX_LENGTH:
            mssg = f"Excerpt cannot exceed {EXCERPT_MAX_LENGTH} characters"
            raise ValueError(mssg)
        return v or None

    @field_validator("tags", mode="before", check_fields=False)
    @classmethod
    def validate_tags(cls, v: Any) -> list[str] | None:
        return None if v is None else normalize_tags(v)


class PostCreate(_PostFields):
    """Validated input for creating a post."""

    title: str
    content: str
    category: UUID
    tags: list[str] = Field(default_factory=list)
    excerpt: str | None = None
    is_published: bool = False


class PostUpdate(_PostFields):
    """
    Validated input for a partial post update.

    Only fields in ``model_fields_set`` are applied. There is deliberately no
    ``slug`` or ``author`` field: neither can change after creation.
    """

    title: str | None = None
    content: str | None = None
    category: UUID | None = None
    tags: list[str] | None = None
    excerpt: str | None = None
    is_published: bool | None = None


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int = Field(alias="currentPage")
    total_pages: int = Field(alias="totalPages")
    total_posts: int = Field(alias="totalPosts")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class PostResponse(BaseModel):
    """A post with its author, category and comment authors resolved."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID
    title: str
    content: str
    slug: str
    excerpt: str | None = None
    featured_image: str = Field(alias="featuredImage")
    author: AuthorSummary | None = None
    category: CategorySummary | None = None
    tags: list[str] = Field(default_factory=list)
    is_published: bool = Field(alias="isPublished")
    view_count: int = Field(alias="viewCount")
    comments: list[CommentResponse] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")


class PostListResponse(BaseModel):
    posts: list[PostResponse]
    pagination: Pagination
