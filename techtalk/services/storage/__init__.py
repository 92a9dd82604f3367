"""
Storage services package.

Featured images are kept on the local filesystem under ``UPLOADS_DIR``.
"""

from techtalk.services.storage.base import StorageService
from techtalk.services.storage.local import LocalStorage


def get_storage_service() -> StorageService:
    """Return the configured storage backend."""
    return LocalStorage()


__all__ = [
    "LocalStorage",
    "StorageService",
    "get_storage_service",
]
