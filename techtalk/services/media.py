"""
Featured image service.

Validates uploaded images (type, size, decodability) before handing them to
the storage backend, and removes files that a post no longer references.
"""

from io import BytesIO
from pathlib import PurePath

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from techtalk.configs.settings import settings
from techtalk.errors.upload import (
    ImageTooLargeError,
    InvalidImageError,
    UnsupportedImageTypeError,
)
from techtalk.monitoring import get_logger
from techtalk.services.storage import StorageService, get_storage_service

logger = get_logger(__name__)

ALLOWED_EXTENSIONS = frozenset({"jpeg", "jpg", "png", "gif"})
_FORMAT_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "GIF": "gif"}


class MediaService:
    """Service for featured image uploads."""

    def __init__(self, storage: StorageService | None = None) -> None:
        """
        Initialize the media service.

        Args:
            storage: Optional storage backend; the configured one is used otherwise
        """
        self.storage = storage or get_storage_service()
        self.image_max_size_bytes = settings.MAX_FILE_SIZE_MB * 1024 * 1024
        self.image_allowed_types = settings.IMAGE_ALLOWED_TYPES

    def _validate_image_type(self, content_type: str | None, filename: str | None) -> None:
        """Both the declared MIME type and the filename extension must be an image type."""
        extension = PurePath(filename or "").suffix.lower().lstrip(".")
        if (
            not content_type
            or content_type not in self.image_allowed_types
            or (extension and extension not in ALLOWED_EXTENSIONS)
        ):
            raise UnsupportedImageTypeError(
                content_type=content_type or "unknown",
                allowed_types=self.image_allowed_types,
            )

    def _validate_image_size(self, file_data: bytes) -> None:
        actual_size = len(file_data)
        if actual_size > self.image_max_size_bytes:
            raise ImageTooLargeError(
                max_size_mb=settings.MAX_FILE_SIZE_MB,
                actual_size_mb=actual_size / (1024 * 1024),
            )

    def _validate_image_content(self, file_data: bytes) -> str:
        """
        Check that Pillow can read the image.

        Returns:
            str: File extension matching the decoded format
        """
        try:
            with Image.open(BytesIO(file_data)) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            mssg = f"Invalid or corrupted image file: {e!s}"
            raise InvalidImageError(mssg) from e

        extension = _FORMAT_EXTENSIONS.get(image_format or "")
        if extension is None:
            mssg = f"Unsupported image format: {image_format}"
            raise InvalidImageError(mssg)
        return extension

    async def save_featured_image(self, file: UploadFile) -> str:
        """
        Validate and store a post's featured image.

        Args:
            file: Uploaded file from the multipart form

        Returns:
            str: Stored filename

        Raises:
            UnsupportedImageTypeError: Not a JPEG, PNG or GIF (415)
            ImageTooLargeError: Larger than ``MAX_FILE_SIZE_MB`` (413)
            InvalidImageError: Not decodable (400)
            StorageError: The file could not be written (500)
        """
        self._validate_image_type(file.content_type, file.filename)
        file_data = await file.read()
        self._validate_image_size(file_data)
        extension = self._validate_image_content(file_data)
        filename = await self.storage.save_image(file_data, extension)
        logger.info(f"Stored featured image {filename} ({len(file_data)} bytes)")
        return filename

    async def delete_featured_image(self, filename: str | None) -> bool:
        """Remove a stored image; the default image is never touched."""
        if not filename or filename == settings.DEFAULT_FEATURED_IMAGE:
            return False
        return await self.storage.delete_image(filename)
