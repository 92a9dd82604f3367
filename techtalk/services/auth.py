"""Authentication service: registration, login and token issuance."""

from techtalk.errors.auth import InvalidCredentialsError
from techtalk.errors.database import DuplicateUserError
from techtalk.managers.password_manager import dummy_verify, hash_password, verify_password
from techtalk.managers.token_manager import create_access_token
from techtalk.models import UserDB
from techtalk.monitoring import get_logger
from techtalk.repositories import UserRepository
from techtalk.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from techtalk.schemas.user import UserPublic

logger = get_logger(__name__)


class AuthService:
    """Service for handling user registration and authentication."""

    def __init__(self, user_repo: UserRepository) -> None:
        """
        Initialize the auth service.

        Args:
            user_repo: User repository for database operations
        """
        self.user_repo = user_repo

    def issue_token(self, user: UserDB) -> AuthResponse:
        """Create an access token for ``user`` and pair it with the public user view."""
        return AuthResponse(
            token=create_access_token(user_id=user.id),
            user=UserPublic.model_validate(user),
        )

    async def register(self, payload: RegisterRequest) -> AuthResponse:
        """
        Register a new user and sign them in.

        Raises:
            DuplicateUserError: If the email or username is already taken
        """
        if await self.user_repo.email_or_username_taken(payload.email, payload.username):
            raise DuplicateUserError

        user = UserDB(
            username=payload.username,
            email=payload.email,
            password_hash=await hash_password(payload.password),
        )
        user = await self.user_repo.create(user)
        logger.info(f"Registered user {user.id}")
        return self.issue_token(user)

    async def authenticate(self, email: str, password: str) -> UserDB:
        """
        Authenticate a user by email and password.

        Unknown emails still pay for one hash verification so both failure
        paths take about the same time.

        Raises:
            InvalidCredentialsError: If authentication fails
        """
        user = await self.user_repo.get_by_email(email)
        if not user:
            await dummy_verify()
            raise InvalidCredentialsError

        if not await verify_password(password, user.password_hash):
            raise InvalidCredentialsError

        return user

    async def login(self, payload: LoginRequest) -> AuthResponse:
        user = await self.authenticate(payload.email, payload.password)
        return self.issue_token(user)
