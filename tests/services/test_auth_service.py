"""Tests for the authentication service."""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from techtalk.errors import DuplicateUserError, InvalidCredentialsError
from techtalk.managers.token_manager import decode_access_token
from techtalk.repositories import UserRepository
from techtalk.schemas.auth import LoginRequest, RegisterRequest
from techtalk.services import AuthService


@pytest.fixture
def auth_service(session: AsyncSession) -> AuthService:
    return AuthService(UserRepository(session))


@pytest.fixture
def alice_payload() -> RegisterRequest:
    return RegisterRequest(username="alice", email="Alice@X.com", password="secret1")


class TestRegister:
    """Tests for AuthService.register."""

    async def test_register_issues_token_for_new_user(
        self,
        auth_service: AuthService,
        alice_payload: RegisterRequest,
    ) -> None:
        result = await auth_service.register(alice_payload)

        token_data = decode_access_token(result.token)
        assert token_data is not None
        assert token_data.user_id == result.user.id
        assert result.user.username == "alice"
        assert result.user.email == "alice@x.com"
        assert result.user.role == "user"

    async def test_password_is_stored_hashed(
        self,
        session: AsyncSession,
        auth_service: AuthService,
        alice_payload: RegisterRequest,
    ) -> None:
        result = await auth_service.register(alice_payload)

        user = await UserRepository(session).get_by_id(result.user.id)
        assert user is not None
        assert user.password_hash != "secret1"
        assert user.password_hash.startswith("$argon2")

    @pytest.mark.parametrize(
        ("username", "email"),
        [("alice", "other@x.com"), ("other", "alice@x.com")],
    )
    async def test_taken_username_or_email(
        self,
        auth_service: AuthService,
        alice_payload: RegisterRequest,
        username: str,
        email: str,
    ) -> None:
        await auth_service.register(alice_payload)

        with pytest.raises(DuplicateUserError) as exc_info:
            await auth_service.register(
                RegisterRequest(username=username, email=email, password="secret1"),
            )

        assert exc_info.value.status_code == 400


class TestLogin:
    """Tests for AuthService.login and authenticate."""

    async def test_login_with_correct_password(
        self,
        auth_service: AuthService,
        alice_payload: RegisterRequest,
    ) -> None:
        registered = await auth_service.register(alice_payload)

        result = await auth_service.login(LoginRequest(email="alice@x.com", password="secret1"))

        assert result.user.id == registered.user.id
        assert result.token

    async def test_wrong_password(
        self,
        auth_service: AuthService,
        alice_payload: RegisterRequest,
    ) -> None:
        await auth_service.register(alice_payload)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await auth_service.authenticate("alice@x.com", "wrong-password")

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Invalid credentials"

    async def test_unknown_email_still_verifies_a_dummy_hash(
        self,
        auth_service: AuthService,
    ) -> None:
        with (
            patch("techtalk.services.auth.dummy_verify", AsyncMock()) as dummy,
            pytest.raises(InvalidCredentialsError),
        ):
            await auth_service.authenticate("nobody@x.com", "secret1")

        dummy.assert_awaited_once()
