from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from techtalk.errors.base import BaseAppError, create_exception_handler
from techtalk.monitoring import get_logger

logger = get_logger(__name__)


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class NotFoundError(DatabaseError):
    """Exception raised when a record is not found."""

    def __init__(self, detail: str = "Record not found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class PostNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Post not found")


class CommentNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("Comment not found")


class UserNotFoundError(NotFoundError):
    def __init__(self) -> None:
        super().__init__("User not found")


class ConflictError(DatabaseError):
    """Exception raised when a write collides with a unique constraint."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
        status_code: int = HTTP_409_CONFLICT,
    ) -> None:
        super().__init__(detail, status_code)


class SlugConflictError(ConflictError):
    """
    Raised when a concurrent writer claimed the probed slug first.

    The whole create operation can be retried by the caller.
    """

    def __init__(self, slug: str) -> None:
        super().__init__(f"A post with slug '{slug}' was created concurrently, please retry")
        self.slug = slug


class DuplicateUserError(ConflictError):
    """Registration with an email or username that is already taken."""

    def __init__(self, detail: str = "User already exists") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class DuplicateCategoryError(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Category '{name}' already exists", HTTP_400_BAD_REQUEST)


database_exception_handler = create_exception_handler(logger)
