# tests/routes/conftest.py
"""Pytest fixtures for route tests."""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from techtalk.db import get_session
from techtalk.dependencies import get_media_service
from techtalk.main import create_app
from techtalk.managers.rate_limiter import limiter
from techtalk.models import UserDB
from techtalk.services import MediaService
from techtalk.services.storage.local import LocalStorage

type Register = Callable[..., Awaitable[dict[str, Any]]]


@pytest.fixture
def uploads_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def app(
    session_maker: async_sessionmaker[SQLModelAsyncSession],
    uploads_dir: Path,
) -> FastAPI:
    """Fresh application wired to the in-memory test database."""
    application = create_app()

    async def override_get_session() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    application.dependency_overrides[get_session] = override_get_session
    application.dependency_overrides[get_media_service] = lambda: MediaService(
        LocalStorage(uploads_dir),
    )
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Client with rate limiting switched off."""
    limiter.enabled = False
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac
    limiter.enabled = True


@pytest.fixture
def register(client: AsyncClient) -> Register:
    """Register a user through the API and return the auth response body."""

    async def _register(
        username: str = "alice",
        email: str | None = None,
        password: str = "secret1",
    ) -> dict[str, Any]:
        response = await client.post(
            "/api/auth/register",
            json={
                "username": username,
                "email": email or f"{username}@x.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        body["headers"] = {"Authorization": f"Bearer {body['token']}"}
        return body

    return _register


@pytest.fixture
async def alice(register: Register) -> dict[str, Any]:
    return await register("alice")


@pytest.fixture
async def bob(register: Register) -> dict[str, Any]:
    return await register("bob")


@pytest.fixture
async def admin(
    register: Register,
    session_maker: async_sessionmaker[SQLModelAsyncSession],
) -> dict[str, Any]:
    auth = await register("admin")
    async with session_maker() as session:
        user = (await session.exec(select(UserDB).where(UserDB.username == "admin"))).one()
        user.role = "admin"
        session.add(user)
        await session.commit()
    return auth


@pytest.fixture
async def category_id(client: AsyncClient) -> str:
    """Id of the seeded Technology category."""
    response = await client.get("/api/categories")
    return next(c["id"] for c in response.json() if c["name"] == "Technology")


@pytest.fixture
def create_post(client: AsyncClient, category_id: str) -> Callable[..., Awaitable[Any]]:
    """Create a post as ``auth`` and return the raw response."""

    async def _create(auth: dict[str, Any], title: str = "Hello World", **fields: Any) -> Any:
        files = fields.pop("files", None)
        data = {"title": title, "content": "Body text", "category": category_id, **fields}
        return await client.post("/api/posts", data=data, files=files, headers=auth["headers"])

    return _create
