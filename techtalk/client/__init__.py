"""Python client for the blog API with optimistic client-side state."""

from techtalk.client.api import ApiError, BlogApiClient
from techtalk.client.state import (
    AuthState,
    CategoryState,
    MutationResult,
    PostState,
    Speculation,
)

__all__ = [
    "ApiError",
    "AuthState",
    "BlogApiClient",
    "CategoryState",
    "MutationResult",
    "PostState",
    "Speculation",
]
