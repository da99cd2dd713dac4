"""Exception handlers that turn failures into ``{"message": ...}`` bodies.

Status codes by exception type:

- ``ValidationError`` and malformed requests: 400
- ``NotFoundError``: 404
- ``HTTPException``: its own status code
- ``ExternalServiceError`` and anything unexpected: 500

Each failure is logged once, with sanitized context and the correlation ID,
before the response is built.
"""

from typing import Any, Final, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from loguru import logger
from starlette.exceptions import HTTPException

from src.api.schemas.errors import ErrorResponse
from src.api.utils.responses import ORJSONResponse
from src.core.config import get_settings
from src.core.context import RequestContext
from src.core.error_context import sanitize_error_context
from src.core.exceptions import NotFoundError, RentasError, ValidationError

GENERIC_ERROR_MESSAGE: Final[str] = "An internal server error occurred"
STATUS_BY_ERROR: Final[dict[type[RentasError], int]] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


def status_code_for(exc: RentasError) -> int:
    for error_type, status_code in STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, message: str) -> Response:
    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(mode="json"),
    )


def _request_context(request: Request, **extra: Any) -> dict[str, Any]:  # noqa: ANN401
    return {
        "request_method": request.method,
        "request_path": request.url.path,
        "correlation_id": RequestContext.get_correlation_id(),
        **extra,
    }


E = TypeVar("E", bound=Exception)


def _require(exc: Exception, expected: type[E]) -> E:
    if not isinstance(exc, expected):
        msg = f"Expected {expected.__name__}, got {type(exc).__name__}"
        raise TypeError(msg)
    return exc


def _field_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Messages per field location; submitted values are left out."""
    by_field: dict[str, list[str]] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        by_field.setdefault(location or "root", []).append(
            error.get("msg", "Invalid value")
        )
    return by_field


async def rentas_error_handler(request: Request, exc: Exception) -> Response:
    """Answer an application exception with its own message.

    Raises:
        TypeError: If ``exc`` is not a ``RentasError``.
    """
    error = _require(exc, RentasError)
    status_code = status_code_for(error)

    log = logger.warning if error.is_expected else logger.error
    log(
        "{} on {} {}: {}",
        type(error).__name__,
        request.method,
        request.url.path,
        error.message,
        **sanitize_error_context(
            error,
            _request_context(
                request, error_code=error.error_code, status_code=status_code
            ),
        ),
    )
    return _error_response(status_code, error.message)


async def validation_error_handler(request: Request, exc: Exception) -> Response:
    """Answer a request FastAPI could not parse with 400.

    Covers non-integer path IDs, wrongly typed JSON fields and unreadable
    bodies. The message names the first problem found.
    """
    error = _require(exc, RequestValidationError)
    field_errors = _field_errors(error)

    logger.warning(
        "Rejected malformed request to {}",
        request.url.path,
        **sanitize_error_context(
            error, _request_context(request, validation_errors=field_errors)
        ),
    )
    message = "Request validation failed"
    if field_errors:
        field, messages = next(iter(field_errors.items()))
        message = f"{message}: {field}: {messages[0]}"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


async def http_exception_handler(request: Request, exc: Exception) -> Response:
    error = _require(exc, HTTPException)

    logger.warning(
        "HTTP {} on {} {}",
        error.status_code,
        request.method,
        request.url.path,
        **sanitize_error_context(error, _request_context(request)),
    )
    response = _error_response(error.status_code, str(error.detail))
    if error.headers:
        response.headers.update(error.headers)
    return response


async def generic_exception_handler(request: Request, exc: Exception) -> Response:
    """Last resort: 500, with the exception text outside production."""
    logger.opt(exception=exc).error(
        "Unhandled {} on {} {}",
        type(exc).__name__,
        request.method,
        request.url.path,
        **sanitize_error_context(exc, _request_context(request)),
    )
    if get_settings().environment == "production":
        message = GENERIC_ERROR_MESSAGE
    else:
        message = f"Internal server error: {type(exc).__name__}: {exc}"
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RentasError, rentas_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
