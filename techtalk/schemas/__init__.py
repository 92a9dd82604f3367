from techtalk.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, TokenData
from techtalk.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySeedResponse,
    CategorySummary,
)
from techtalk.schemas.comment import CommentCreate, CommentResponse, MessageResponse
from techtalk.schemas.post import (
    Pagination,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
    normalize_tags,
)
from techtalk.schemas.system import HealthResponse, MetricsResponse
from techtalk.schemas.user import AuthorSummary, CommentAuthor, UserPublic

__all__ = [
    "AuthResponse",
    "AuthorSummary",
    "CategoryCreate",
    "CategoryResponse",
    "CategorySeedResponse",
    "CategorySummary",
    "CommentAuthor",
    "CommentCreate",
    "CommentResponse",
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "MetricsResponse",
    "Pagination",
    "PostCreate",
    "PostListResponse",
    "PostResponse",
    "PostUpdate",
    "RegisterRequest",
    "TokenData",
    "UserPublic",
    "normalize_tags",
]
