"""Authentication routes for registration, login and the current identity."""

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from techtalk.decorators import timed
from techtalk.dependencies import AuthServiceDep, UserDBDep
from techtalk.managers import limiter
from techtalk.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from techtalk.schemas.user import UserPublic

router = APIRouter(prefix="/auth", tags=["🔐 Auth"])

_AUTH_EXAMPLE = {
    "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
    "user": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "username": "alice",
        "email": "alice@x.com",
        "role": "user",
        "avatar": None,
    },
}


@router.post(
    "/register",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    status_code=HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and receive an access token.",
    responses={
        201: {"content": {"application/json": {"example": _AUTH_EXAMPLE}}},
        400: {
            "description": "Bad request",
            "content": {"application/json": {"example": {"detail": "User already exists"}}},
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="auth_register",
)
@timed("/auth/register")
@limiter.limit("5/minute")
async def register(
    request: Request,
    response: Response,
    payload: RegisterRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Register a new user.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Response object for middleware/decorators.
    payload : RegisterRequest
        Username, email and password.
    auth_service : AuthService
        Authentication service dependency.

    Returns
    -------
    AuthResponse
        Access token and the new user.

    Raises
    ------
    DuplicateUserError
        If the email or username is taken.
    """
    return await auth_service.register(payload)


@router.post(
    "/login",
    response_class=ORJSONResponse,
    response_model=AuthResponse,
    summary="Login for access token",
    description="Authenticate with email and password to obtain an access token.",
    responses={
        200: {"content": {"application/json": {"example": _AUTH_EXAMPLE}}},
        400: {
            "description": "Bad request",
            "content": {"application/json": {"example": {"detail": "Invalid credentials"}}},
        },
        429: {
            "description": "Rate limit exceeded",
            "content": {"application/json": {"example": {"detail": "Rate limit exceeded"}}},
        },
    },
    operation_id="auth_login",
)
@timed("/auth/login")
@limiter.limit("10/minute")
async def login(
    request: Request,
    response: Response,
    payload: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Login with email and password."""
    return await auth_service.login(payload)


@router.get(
    "/me",
    response_class=ORJSONResponse,
    response_model=UserPublic,
    summary="Get current user",
    description="Return the user the bearer token belongs to.",
    responses={
        401: {
            "description": "Unauthorized",
            "content": {
                "application/json": {"example": {"detail": "Could not validate credentials"}},
            },
        },
    },
    operation_id="auth_me",
)
@timed("/auth/me")
async def me(request: Request, current_user: UserDBDep) -> UserPublic:
    return UserPublic.model_validate(current_user)
