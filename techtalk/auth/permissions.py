"""Role checks layered on top of the authenticated user."""

from typing import Annotated

from fastapi import Depends

from techtalk.dependencies.dependencies import get_current_user
from techtalk.errors.auth import AuthorizationError
from techtalk.models import UserDB


async def require_admin(
    user: Annotated[UserDB, Depends(get_current_user)],
) -> UserDB:
    """
    Dependency that requires admin role.

    Parameters
    ----------
    user : UserDB
        Current authenticated user.

    Returns
    -------
    UserDB
        The user if they have admin role.

    Raises
    ------
    AuthorizationError
        If user is not an admin.
    """
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user


AdminUserDep = Annotated[UserDB, Depends(require_admin)]
