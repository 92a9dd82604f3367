"""Custom validation error handling for FastAPI."""

from typing import Any, cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.status import HTTP_400_BAD_REQUEST

from techtalk.errors.base import BaseAppError, create_exception_handler, record_error_type
from techtalk.monitoring import get_logger
from techtalk.utils.helpers import host

logger = get_logger(__name__)


class ValidationError(BaseAppError):
    """Raised when request data breaks a business rule (400)."""

    def __init__(
        self,
        detail: str = "Validation failed",
        errors: list[dict] | None = None,
    ) -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)
        self.errors = errors or []


def field_error(field: str, message: str, detail: str | None = None) -> ValidationError:
    """Build a ValidationError for a single offending field."""
    return ValidationError(
        detail=detail or message,
        errors=[{"field": field, "message": message, "type": "value_error"}],
    )


def validate_model[ModelT: BaseModel](model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """
    Validate ``data`` against ``model``, raising the 400 ValidationError on failure.

    Used where input is assembled by hand (multipart forms) instead of being
    parsed by FastAPI, so both paths report errors the same way.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {
                "field": ".".join(str(loc) for loc in error.get("loc", [])),
                "message": error.get("msg", "Invalid value").removeprefix("Value error, "),
                "type": error.get("type", "validation_error"),
            }
            for error in e.errors()
        ]
        detail = errors[0]["message"] if len(errors) == 1 else "Validation failed"
        raise ValidationError(detail=detail, errors=errors) from e


def _serializable(value: object) -> object:
    if isinstance(value, Exception):
        return str(value)
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    return value


async def request_validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Render FastAPI's RequestValidationError in the same 400 shape as ValidationError.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with formatted validation errors.
    """
    exec_error = cast(RequestValidationError, exc)
    record_error_type(request, exec_error)

    formatted_errors = []
    for error in exec_error.errors():
        formatted_error = {
            # Skip the location prefix ('body', 'query', 'path')
            "field": ".".join(str(loc) for loc in error.get("loc", [])[1:]),
            "message": error.get("msg", "Invalid value").removeprefix("Value error, "),
            "type": error.get("type", "validation_error"),
        }
        if "ctx" in error:
            formatted_error["context"] = {k: _serializable(v) for k, v in error["ctx"].items()}
        formatted_errors.append(formatted_error)

    logger.warning(
        f"Validation error for ip: {host(request)} at endpoint {request.url.path}: "
        f"{formatted_errors}",
    )

    return ORJSONResponse(
        status_code=HTTP_400_BAD_REQUEST,
        content={
            "detail": (
                formatted_errors[0]["message"] if len(formatted_errors) == 1 else "Validation failed"
            ),
            "errors": formatted_errors,
        },
    )


validation_exception_handler = create_exception_handler(logger)
