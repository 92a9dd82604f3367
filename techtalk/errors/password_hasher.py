from techtalk.errors.base import BaseAppError, create_exception_handler
from techtalk.monitoring import get_logger

logger = get_logger(__name__)


class PasswordHashingError(BaseAppError):
    """Raised when the hashing backend fails to hash a password."""

    def __init__(self, detail: str = "Password hashing failed") -> None:
        super().__init__(detail)


password_hashing_exception_handler = create_exception_handler(logger)
