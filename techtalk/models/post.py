"""Post database model using SQLModel."""

from datetime import UTC, datetime
from typing import Any, cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import JSON, Boolean, DateTime, Index, Text, false
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, ForeignKey, SQLModel, String

# JSONB on PostgreSQL, plain JSON everywhere else (SQLite in tests)
JSONList = JSON().with_variant(JSONB(), "postgresql")


class PostDB(SQLModel, table=True):
    """
    Post database model.

    A post owns its comments: they are stored as an ordered JSON list on the
    row, each entry shaped ``{"id", "user_id", "content", "created_at"}``.
    Tags are stored the same way as a list of strings.
    """

    __tablename__ = cast("declared_attr[str]", "posts")

    __table_args__ = (
        Index("ix_posts_category_created", "category_id", "created_at"),
        Index("ix_posts_author_created", "author_id", "created_at"),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="Post ID",
    )

    author_id: UUID = Field(
        sa_column=Column(
            "author_id",
            ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        description="Author ID (foreign key to users.id)",
    )
    category_id: UUID = Field(
        sa_column=Column(
            "category_id",
            ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        ),
        description="Category ID (foreign key to categories.id)",
    )

    title: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Post title",
    )
    slug: str = Field(
        sa_column=Column(String(200), unique=True, nullable=False, index=True),
        description="URL-friendly slug (unique, never reassigned)",
    )
    content: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Post content",
    )
    excerpt: str | None = Field(
        default=None,
        sa_column=Column(String(200)),
        description="Short summary shown in listings",
    )
    featured_image: str = Field(
        default="default-post.jpg",
        sa_column=Column(String(255), nullable=False, server_default="default-post.jpg"),
        description="Stored image filename or the default image sentinel",
    )

    is_published: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, server_default=false()),
        description="Whether the post is published",
    )
    view_count: int = Field(
        default=0,
        nullable=False,
        description="View count",
    )

    tags: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSONList, nullable=False),
        description="Post tags",
    )
    comments: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSONList, nullable=False),
        description="Embedded comments in insertion order",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(tz=UTC),
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "author_id": "123e4567-e89b-12d3-a456-426614174000",
                "category_id": "0b7f2a1e-5c44-4b5e-9d38-1f2e3a4b5c6d",
                "title": "Hello World",
                "slug": "hello-world",
                "content": "First post on the blog.",
                "tags": ["intro", "python"],
                "view_count": 0,
            },
        },
    )
