"""
Custom error handling for the checkout service.

This module defines the application's exception hierarchy and a few helpers
for consistent error logging. Each exception carries the HTTP status it maps
to, so the FastAPI handlers in ``app.core.exception_handlers`` can render it
without knowing the concrete type.
"""

import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Standardized error codes for the application.
    """

    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Lookups
    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Collaborators and persistence
    UPSTREAM_FAILED = "UPSTREAM_FAILED"
    STORE_FAILED = "STORE_FAILED"

    # Anti-spam
    ORDERS_BLOCKED = "ORDERS_BLOCKED"


class ErrorSeverity(Enum):
    """
    Severity levels for errors.
    """

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class AppException(Exception):
    """
    Base class for every custom exception raised by the application.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        is_retryable: bool = False,
    ):
        """
        Initialize the exception.

        Args:
            message: Caller-safe error message
            error_code: Standardized error code
            details: Extra information for operators (only exposed in DEBUG)
            status_code: HTTP status the error maps to
            severity: Error severity
            is_retryable: Whether the operation may be retried
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        self.severity = severity
        self.is_retryable = is_retryable
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the exception to a dictionary.

        Returns:
            Dict: Exception representation
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "details": self.details,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"


class ValidationException(AppException):
    """
    Missing or malformed input.
    """

    def __init__(
        self,
        message: str,
        field: str,
        invalid_value: Any = None,
        expected_format: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize the validation exception.

        Args:
            message: Error message
            field: Field that failed validation
            invalid_value: Offending value
            expected_format: Expected format, if any
            **kwargs: Extra arguments for AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.VALIDATION_ERROR,
            status_code=400,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.field = field
        self.invalid_value = invalid_value
        self.expected_format = expected_format

        self.details.update(
            {
                "field": field,
                "invalid_value": str(invalid_value) if invalid_value is not None else None,
                "expected_format": expected_format,
            }
        )


class NotFoundException(AppException):
    """
    A referenced entity does not exist.
    """

    def __init__(self, message: str, entity: str, entity_id: Any = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.NOT_FOUND,
            status_code=404,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.entity = entity
        self.entity_id = entity_id
        self.details.update({"entity": entity, "entity_id": str(entity_id) if entity_id is not None else None})


class InactiveException(AppException):
    """
    An entity exists but is disabled.

    The HTTP status depends on the endpoint: 404 for storefront reads and
    order creation, 400 for token issuance.
    """

    def __init__(self, message: str, entity: str, entity_id: Any = None, status_code: int = 404, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.INACTIVE,
            status_code=status_code,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.entity = entity
        self.entity_id = entity_id
        self.details.update({"entity": entity, "entity_id": str(entity_id) if entity_id is not None else None})


class ExpiredException(AppException):
    """
    An order token is past its expiry.
    """

    def __init__(self, message: str, token: str, expires_at: Optional[datetime] = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.TOKEN_EXPIRED,
            status_code=410,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.token = token
        self.expires_at = expires_at
        self.details.update({"token": token, "expires_at": expires_at.isoformat() if expires_at else None})


class UpstreamException(AppException):
    """
    A required collaborator call (invoice, email) failed.
    """

    def __init__(
        self,
        message: str,
        service: str,
        operation: str,
        response_code: Optional[int] = None,
        **kwargs,
    ):
        """
        Initialize the upstream exception.

        Args:
            message: Error message
            service: Collaborator that failed (invoice, email)
            operation: Operation that failed
            response_code: HTTP status returned by the collaborator, if any
            **kwargs: Extra arguments for AppException
        """
        super().__init__(
            message=message,
            error_code=ErrorCode.UPSTREAM_FAILED,
            status_code=500,
            severity=ErrorSeverity.HIGH,
            **kwargs,
        )
        self.service = service
        self.operation = operation
        self.response_code = response_code
        self.details.update({"service": service, "operation": operation, "response_code": response_code})


class StoreException(AppException):
    """
    A persistence read or write failed.
    """

    def __init__(self, message: str, operation: str, table: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            error_code=ErrorCode.STORE_FAILED,
            status_code=500,
            severity=ErrorSeverity.HIGH,
            is_retryable=True,
            **kwargs,
        )
        self.operation = operation
        self.table = table
        self.details.update({"operation": operation, "table": table})


class OrdersBlockedException(AppException):
    """
    Order creation refused by the anti-spam guard.

    The message is deliberately generic so the sender cannot tell a
    blocklist hit from a rate-limit hit.
    """

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            message="Orders are currently not possible. Please try again later.",
            error_code=ErrorCode.ORDERS_BLOCKED,
            status_code=503,
            severity=ErrorSeverity.LOW,
            **kwargs,
        )
        self.reason = reason
        self.details.update({"reason": reason})


# === HELPERS ===


def log_error(
    exception: Exception,
    context: Optional[Dict[str, Any]] = None,
    level: int = logging.ERROR,
) -> None:
    """
    Log an error consistently.

    Args:
        exception: Exception to log
        context: Extra context
        level: Logging level
    """
    context = context or {}

    log_data = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
        "traceback": traceback.format_exc(),
        **context,
    }

    if isinstance(exception, AppException):
        message = f"{exception.error_code.value}: {exception.message}"
        log_data.update(
            {
                "error_code": exception.error_code.value,
                "severity": exception.severity.value,
                "is_retryable": exception.is_retryable,
            }
        )
    else:
        message = f"Unhandled exception: {type(exception).__name__}: {str(exception)}"

    logger.log(level, message, extra=log_data)
