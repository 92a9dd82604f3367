"""Application dependencies: sessions, repositories, services and the acting user."""

from dataclasses import dataclass
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Query, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from techtalk.db import get_session
from techtalk.errors.auth import AuthenticationError
from techtalk.managers.metrics import MetricsManager
from techtalk.managers.token_manager import decode_access_token
from techtalk.models import UserDB
from techtalk.repositories import CategoryRepository, PostRepository, UserRepository
from techtalk.services import AuthService, CategoryService, MediaService, PostService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_current_user(
    token: Annotated[str | None, Depends(oauth2_scheme)],
    session: SessionDep,
) -> UserDB:
    """
    Resolve the acting user from the bearer token.

    Parameters
    ----------
    token : str | None
        Bearer token, if one was sent.
    session : AsyncSession
        Database session.

    Returns
    -------
    UserDB
        Current authenticated user.

    Raises
    ------
    AuthenticationError
        If the token is missing, invalid or expired, or its user no longer exists.
    """
    if not token:
        raise AuthenticationError("Not authenticated")

    token_data = decode_access_token(token)
    if not token_data:
        raise AuthenticationError

    user = await UserRepository(session).get_by_id(token_data.user_id)
    if not user:
        raise AuthenticationError("User not found")

    return user


UserDBDep = Annotated[UserDB, Depends(get_current_user)]


def get_user_repository(session: SessionDep) -> UserRepository:
    return UserRepository(session)


def get_category_repository(session: SessionDep) -> CategoryRepository:
    return CategoryRepository(session)


def get_post_repository(session: SessionDep) -> PostRepository:
    return PostRepository(session)


UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]
CategoryRepoDep = Annotated[CategoryRepository, Depends(get_category_repository)]
PostRepoDep = Annotated[PostRepository, Depends(get_post_repository)]


def get_media_service() -> MediaService:
    return MediaService()


def get_auth_service(user_repo: UserRepoDep) -> AuthService:
    return AuthService(user_repo)


def get_category_service(category_repo: CategoryRepoDep) -> CategoryService:
    return CategoryService(category_repo)


def get_post_service(
    post_repo: PostRepoDep,
    user_repo: UserRepoDep,
    category_repo: CategoryRepoDep,
    media: Annotated[MediaService, Depends(get_media_service)],
) -> PostService:
    """Build the post service; all repositories share the request's session."""
    return PostService(post_repo, user_repo, category_repo, media)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
PostServiceDep = Annotated[PostService, Depends(get_post_service)]


@dataclass(frozen=True)
class PostListQuery:
    """
    Query container for post listing.

    Parameters
    ----------
    page : int
        1-based page number.
    limit : int
        Posts per page.
    search : str | None
        Substring matched against title and content.
    category : UUID | None
        Category filter.
    """

    page: int = 1
    limit: int = 10
    search: str | None = None
    category: UUID | None = None


def get_post_list_query(
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=100, description="Posts per page")] = 10,
    search: Annotated[str | None, Query(description="Search title and content")] = None,
    category: Annotated[UUID | None, Query(description="Filter by category ID")] = None,
) -> PostListQuery:
    return PostListQuery(page=page, limit=limit, search=search, category=category)


PostListQueryDep = Annotated[PostListQuery, Depends(get_post_list_query)]


def get_metrics_manager(request: Request) -> MetricsManager:
    """Dependency to get the application's metrics manager."""
    return request.app.state.metrics


MetricsDep = Annotated[MetricsManager, Depends(get_metrics_manager)]
