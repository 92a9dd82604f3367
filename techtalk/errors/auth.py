"""Authentication and authorization errors."""

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from techtalk.errors.base import BaseAppError, create_exception_handler
from techtalk.monitoring import get_logger

logger = get_logger(__name__)


class AuthenticationError(BaseAppError):
    """Raised when the bearer token is missing, invalid or expired."""

    def __init__(
        self,
        detail: str = "Could not validate credentials",
        status_code: int = HTTP_401_UNAUTHORIZED,
    ) -> None:
        super().__init__(detail, status_code)
        if status_code == HTTP_401_UNAUTHORIZED:
            self.headers = {"WWW-Authenticate": "Bearer"}


class InvalidCredentialsError(AuthenticationError):
    """Raised when a login presents an unknown email or wrong password."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", HTTP_400_BAD_REQUEST)


class AuthorizationError(BaseAppError):
    """Raised when an authenticated user may not perform the operation."""

    def __init__(
        self,
        detail: str = "You do not have permission to perform this action",
    ) -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


auth_exception_handler = create_exception_handler(logger)
