"""User repository for database operations."""

from techtalk.errors.database import ConflictError, DuplicateUserError
from techtalk.models import UserDB
from techtalk.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserDB]):
    """Repository for User database operations."""

    model = UserDB

    async def get_by_email(self, email: str) -> UserDB | None:
        return await self.get_by_field("email", email.lower())

    async def get_by_username(self, username: str) -> UserDB | None:
        return await self.get_by_field("username", username)

    async def email_or_username_taken(self, email: str, username: str) -> bool:
        return await self._check_exists_by_field(
            "email",
            email.lower(),
        ) or await self._check_exists_by_field("username", username)

    async def create(self, user: UserDB) -> UserDB:
        """
        Insert a new user.

        Raises:
            DuplicateUserError: If the email or username is already taken
        """
        return await self._add_and_refresh(user)

    def _conflict_error(self, record: UserDB, error_msg: str) -> ConflictError:
        return DuplicateUserError()
