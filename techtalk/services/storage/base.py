"""
Storage protocol for featured image files.

Backends receive validated bytes and hand back the stored filename; posts
persist only that filename.
"""

from abc import abstractmethod
from typing import Protocol


class StorageService(Protocol):
    """Interface every image storage backend implements."""

    @abstractmethod
    async def save_image(self, file_data: bytes, extension: str) -> str:
        """
        Store an image under a freshly generated name.

        Args:
            file_data: Raw image bytes
            extension: File extension without the dot

        Returns:
            str: The generated filename
        """
        ...

    @abstractmethod
    async def delete_image(self, filename: str) -> bool:
        """
        Remove a stored image.

        Returns:
            bool: True if a file was removed
        """
        ...
