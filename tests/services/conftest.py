# tests/services/conftest.py
"""Pytest fixtures for service tests."""

from unittest.mock import AsyncMock, MagicMock

from pytest import fixture
from sqlalchemy.ext.asyncio import AsyncSession

from techtalk.models import CategoryDB, UserDB
from techtalk.repositories import CategoryRepository, PostRepository, UserRepository
from techtalk.services import MediaService, PostService
from techtalk.services.storage import StorageService

PASSWORD_HASH = "$argon2id$v=19$m=8192,t=1,p=1$somehash"


async def _add(session: AsyncSession, record: UserDB | CategoryDB) -> UserDB | CategoryDB:
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


@fixture
async def alice(session: AsyncSession) -> UserDB:
    return await _add(
        session,
        UserDB(username="alice", email="alice@x.com", password_hash=PASSWORD_HASH),
    )


@fixture
async def bob(session: AsyncSession) -> UserDB:
    return await _add(
        session,
        UserDB(username="bob", email="bob@x.com", password_hash=PASSWORD_HASH),
    )


@fixture
async def admin(session: AsyncSession) -> UserDB:
    return await _add(
        session,
        UserDB(username="root", email="root@x.com", password_hash=PASSWORD_HASH, role="admin"),
    )


@fixture
async def technology(session: AsyncSession) -> CategoryDB:
    return await _add(session, CategoryDB(name="Technology", description="Tech posts"))


@fixture
async def design(session: AsyncSession) -> CategoryDB:
    return await _add(session, CategoryDB(name="Design"))


@fixture
def storage() -> MagicMock:
    """Storage backend double that pretends every write succeeds."""
    mock = MagicMock(spec=StorageService)
    mock.save_image = AsyncMock(return_value="post-1700000000000-42.jpg")
    mock.delete_image = AsyncMock(return_value=True)
    return mock


@fixture
def media(storage: MagicMock) -> MediaService:
    return MediaService(storage=storage)


@fixture
def post_repo(session: AsyncSession) -> PostRepository:
    return PostRepository(session)


@fixture
def post_service(
    session: AsyncSession,
    post_repo: PostRepository,
    media: MediaService,
) -> PostService:
    return PostService(post_repo, UserRepository(session), CategoryRepository(session), media)
