"""
Domain Exceptions

Exception hierarchy for the academic records core.
Every exception carries an error code and structured context naming the
violated invariant, so callers can report it without parsing messages.
"""

from enum import Enum
from typing import Any

from registrar.logging_config import get_logger

logger = get_logger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for domain exceptions."""

    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_KEY = "DUPLICATE_KEY"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    ILLEGAL_STATE = "ILLEGAL_STATE"


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Provides structured error information with an error code and context.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        context: dict[str, Any] | None = None,
    ):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            error_code: Standard error code
            context: Additional context data
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

        logger.debug(
            "Domain exception raised",
            error_code=error_code.value,
            message=message,
            context=self.context,
            exception_type=type(self).__name__,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a plain dictionary."""
        result = {
            "error": self.error_code.value,
            "message": self.message,
            "type": type(self).__name__,
        }
        if self.context:
            result["context"] = self.context
        return result


class NotFoundError(DomainException):
    """Raised when a lookup misses and the caller asked for a hard failure."""

    def __init__(self, entity_type: str, entity_id: str | None = None, **kwargs):
        message = kwargs.pop("message", None) or f"{entity_type} not found"
        if entity_id is not None:
            message += f" (ID: {entity_id})"

        context = kwargs.pop("context", {})
        context["entity_type"] = entity_type
        if entity_id is not None:
            context["entity_id"] = str(entity_id)

        super().__init__(message=message, error_code=ErrorCode.NOT_FOUND, context=context)


class DuplicateKeyError(DomainException):
    """Raised when inserting an entity whose id is already taken for its kind."""

    def __init__(self, entity_type: str, entity_id: str, **kwargs):
        message = kwargs.pop("message", None) or f"{entity_type} ID {entity_id} already exists"

        context = kwargs.pop("context", {})
        context["entity_type"] = entity_type
        context["entity_id"] = str(entity_id)

        super().__init__(message=message, error_code=ErrorCode.DUPLICATE_KEY, context=context)


class InvalidArgumentError(DomainException):
    """Raised for missing references, blank fields and malformed grade scales."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)

        super().__init__(message=message, error_code=ErrorCode.INVALID_ARGUMENT, context=context)


class IllegalStateError(DomainException):
    """Raised when an entity's current state forbids the requested action."""

    def __init__(self, message: str, rule_name: str | None = None, **kwargs):
        context = kwargs.pop("context", {})
        if rule_name:
            context["rule_name"] = rule_name

        super().__init__(message=message, error_code=ErrorCode.ILLEGAL_STATE, context=context)
