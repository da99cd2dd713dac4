"""Exception hierarchy shared by every layer of the Rentas backend.

Three kinds of failure reach the HTTP boundary:

- **ValidationError**: caller input broke a precondition (400)
- **NotFoundError**: the referenced entity id does not exist (404)
- **ExternalServiceError**: any other failure, always wrapping its cause (500)

All of them derive from ``RentasError``, which carries an error code, a
severity used to pick the log level, optional structured context and the
original cause.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes used in logs and traces."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    """A collaborator such as the database failed."""


class Severity(Enum):
    """Severity levels for errors."""

    LOW = "LOW"
    """Expected errors caused by caller input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single operation."""

    HIGH = "HIGH"
    """Errors caused by a failing collaborator, worth alerting on."""

    CRITICAL = "CRITICAL"
    """Unhandled errors."""


class RentasError(Exception):
    """Base exception class for all application exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(RentasError):
    """Raised when caller-supplied input fails a precondition.

    Args:
        message: Description of the validation failure
        field: Name of the offending field, if any
        context: Additional context information about the error
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        context = dict(context or {})
        if field is not None:
            context["field"] = field
        self.field = field
        super().__init__(ErrorCode.VALIDATION_ERROR, message, Severity.LOW, context)


class NotFoundError(RentasError):
    """Raised when an entity id does not exist.

    Args:
        entity: Name of the entity that was looked up
        entity_id: The id that was not found
    """

    def __init__(self, entity: str, entity_id: int) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(
            ErrorCode.NOT_FOUND,
            f"{entity} with ID {entity_id} was not found",
            Severity.LOW,
            {"entity": entity, "entity_id": entity_id},
        )


class ExternalServiceError(RentasError):
    """Raised when a collaborator fails; always wraps the original cause.

    Args:
        service: Name of the failing collaborator (e.g. ``"database"``)
        message: Human-readable error message
        cause: The original exception, if there is one
    """

    def __init__(
        self,
        service: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        self.service = service
        super().__init__(
            ErrorCode.EXTERNAL_SERVICE_ERROR,
            message,
            Severity.HIGH,
            {"service": service},
            cause,
        )
