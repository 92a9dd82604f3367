"""
Local filesystem storage.

Images are written flat into ``UPLOADS_DIR`` and served from the
``/uploads`` static mount.
"""

from pathlib import Path
from secrets import randbelow
from time import time_ns

import aiofiles
import aiofiles.os

from techtalk.configs.settings import settings
from techtalk.errors.upload import StorageError
from techtalk.monitoring import get_logger

logger = get_logger(__name__)


class LocalStorage:
    """Stores featured images in the configured uploads directory."""

    def __init__(self, uploads_dir: Path | None = None) -> None:
        self.uploads_dir = uploads_dir or settings.UPLOADS_DIR
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _generate_filename(extension: str) -> str:
        """Build ``post-<epoch ms>-<random>.<ext>``."""
        return f"post-{time_ns() // 1_000_000}-{randbelow(1_000_000_000)}.{extension}"

    def _resolve(self, filename: str) -> Path | None:
        """Map a stored filename to its path, refusing anything outside the directory."""
        path = (self.uploads_dir / filename).resolve()
        if path.parent != self.uploads_dir.resolve():
            return None
        return path

    async def save_image(self, file_data: bytes, extension: str) -> str:
        filename = self._generate_filename(extension)
        file_path = self.uploads_dir / filename
        try:
            async with aiofiles.open(file_path, "wb") as f:
                await f.write(file_data)
        except OSError as e:
            logger.exception(f"Failed to write upload {filename}")
            raise StorageError from e
        return filename

    async def delete_image(self, filename: str) -> bool:
        if filename == settings.DEFAULT_FEATURED_IMAGE:
            return False
        path = self._resolve(filename)
        if path is None or not path.exists():
            return False
        try:
            await aiofiles.os.remove(path)
        except OSError:
            logger.warning(f"Could not delete stored image {filename}")
            return False
        return True
