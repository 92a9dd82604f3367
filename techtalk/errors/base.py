from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from techtalk.configs import settings
from techtalk.configs.settings import DEFAULT_ERROR_MESSAGE
from techtalk.utils.helpers import host


def record_error_type(request: Request, exc: Exception) -> None:
    """Count the error type in the app-owned metrics manager, if there is one."""
    if metrics := getattr(request.app.state, "metrics", None):
        metrics.record_error(type(exc).__name__)


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = DEFAULT_ERROR_MESSAGE,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def create_exception_handler(
    logger: Logger | BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        record_error_type(request, exc)
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = DEFAULT_ERROR_MESSAGE

        if hasattr(exc, "status_code"):
            status_code = exc.status_code
        if hasattr(exc, "detail"):
            detail = exc.detail

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Extra exception attributes (e.g. validation errors) go into the body
        content = {"detail": detail}
        content.update(
            {
                k: v
                for k, v in exc.__dict__.items()
                if k not in ("status_code", "detail", "headers")
            },
        )

        return ORJSONResponse(
            content=content,
            status_code=status_code,
            headers=getattr(exc, "headers", None),
        )

    return handler


def create_unexpected_exception_handler(
    logger: Logger | BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create the catch-all handler for exceptions no other handler claimed.

    The stack trace is always logged; the exception text only reaches the
    client when ``DEBUG`` is on.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        record_error_type(request, exc)
        logger.exception(
            f"Unhandled {type(exc).__name__} for ip: {host(request)} "
            f"for endpoint {request.url.path}",
            exc_info=exc,
        )
        content: dict[str, str] = {"detail": DEFAULT_ERROR_MESSAGE}
        if settings.DEBUG:
            content["error"] = str(exc)
        return ORJSONResponse(content=content, status_code=HTTP_500_INTERNAL_SERVER_ERROR)

    return handler
