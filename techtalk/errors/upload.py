"""
Featured image upload errors.

Rejections of the client's file map to 4xx statuses (415 wrong type, 413
too large, 400 undecodable); a failure to write the accepted file is a 500.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from techtalk.errors.base import BaseAppError, create_exception_handler
from techtalk.monitoring import get_logger

logger = get_logger(__name__)

SUPPORTED_IMAGE_TYPES = ["image/jpeg", "image/png", "image/gif"]


class UploadError(BaseAppError):
    """Base class for featured image failures."""

    def __init__(
        self,
        detail: str = "Featured image upload failed",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail=detail, status_code=status_code)


class ImageTooLargeError(UploadError):
    def __init__(self, max_size_mb: int = 5, actual_size_mb: float | None = None) -> None:
        size = f" (got {actual_size_mb:.1f}MB)" if actual_size_mb is not None else ""
        super().__init__(
            detail=f"Featured image must be {max_size_mb}MB or smaller{size}",
            status_code=HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        )
        self.max_size_mb = max_size_mb
        self.actual_size_mb = actual_size_mb


class UnsupportedImageTypeError(UploadError):
    """The declared MIME type or the filename extension is not JPEG, PNG or GIF."""

    def __init__(self, content_type: str, allowed_types: list[str] | None = None) -> None:
        super().__init__(
            detail="Only image files are allowed (JPEG, PNG or GIF)",
            status_code=HTTP_415_UNSUPPORTED_MEDIA_TYPE,
        )
        self.content_type = content_type
        self.allowed_types = allowed_types or list(SUPPORTED_IMAGE_TYPES)


class InvalidImageError(UploadError):
    """The bytes could not be decoded as an image."""

    def __init__(self, detail: str = "Featured image could not be read as an image") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class StorageError(UploadError):
    def __init__(self, detail: str = "Featured image could not be stored") -> None:
        super().__init__(detail=detail)


upload_exception_handler = create_exception_handler(logger)
