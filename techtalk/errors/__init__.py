from techtalk.errors.auth import (
    AuthenticationError,
    AuthorizationError,
    InvalidCredentialsError,
    auth_exception_handler,
)
from techtalk.errors.base import (
    BaseAppError,
    create_exception_handler,
    create_unexpected_exception_handler,
)
from techtalk.errors.database import (
    CommentNotFoundError,
    ConflictError,
    DatabaseError,
    DuplicateCategoryError,
    DuplicateUserError,
    NotFoundError,
    PostNotFoundError,
    SlugConflictError,
    UserNotFoundError,
    database_exception_handler,
)
from techtalk.errors.password_hasher import (
    PasswordHashingError,
    password_hashing_exception_handler,
)
from techtalk.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    StorageError,
    UnsupportedImageTypeError,
    UploadError,
    upload_exception_handler,
)
from techtalk.errors.validation import (
    ValidationError,
    field_error,
    request_validation_exception_handler,
    validate_model,
    validation_exception_handler,
)

__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "BaseAppError",
    "CommentNotFoundError",
    "ConflictError",
    "DatabaseError",
    "DuplicateCategoryError",
    "DuplicateUserError",
    "ImageTooLargeError",
    "InvalidCredentialsError",
    "InvalidImageError",
    "NotFoundError",
    "PasswordHashingError",
    "PostNotFoundError",
    "SlugConflictError",
    "StorageError",
    "UnsupportedImageTypeError",
    "UploadError",
    "UserNotFoundError",
    "ValidationError",
    "auth_exception_handler",
    "create_exception_handler",
    "create_unexpected_exception_handler",
    "database_exception_handler",
    "field_error",
    "password_hashing_exception_handler",
    "request_validation_exception_handler",
    "upload_exception_handler",
    "validate_model",
    "validation_exception_handler",
]
