# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os
from tempfile import mkdtemp

# Settings are read on first import of techtalk, so the environment must be
# prepared before anything imports the app.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["PASSWORD_SECURITY_LEVEL"] = "low"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["UPLOADS_DIR"] = mkdtemp(prefix="techtalk-uploads-")

from collections.abc import AsyncGenerator, Callable  # noqa: E402
from io import BytesIO  # noqa: E402

from PIL import Image  # noqa: E402
from pytest import fixture  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession  # noqa: E402

from techtalk.models import CategoryDB, PostDB, UserDB  # noqa: E402, F401


@fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """In-memory SQLite engine; StaticPool keeps every session on one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker[SQLModelAsyncSession]:
    return async_sessionmaker(
        db_engine,
        class_=SQLModelAsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@fixture
async def session(
    session_maker: async_sessionmaker[SQLModelAsyncSession],
) -> AsyncGenerator[AsyncSession]:
    async with session_maker() as s:
        yield s


def _image_bytes(image_format: str = "JPEG", size: tuple[int, int] = (64, 64)) -> bytes:
    """Encode a solid-colour test image."""
    mode = "RGB" if image_format == "JPEG" else "RGBA" if image_format == "PNG" else "P"
    img = Image.new(mode, size, color="red" if mode != "P" else 1)
    buffer = BytesIO()
    img.save(buffer, format=image_format)
    return buffer.getvalue()


@fixture
def valid_jpeg_bytes() -> bytes:
    return _image_bytes("JPEG")


@fixture
def valid_png_bytes() -> bytes:
    return _image_bytes("PNG")


@fixture
def make_image() -> Callable[..., bytes]:
    """Factory for encoded test images, e.g. ``make_image("GIF")``."""
    return _image_bytes
