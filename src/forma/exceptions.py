"""Centralized error definitions for the Forma client."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from forma.error_codes import ErrorCode


logger = logging.getLogger(__name__)

@dataclass
class FormaError(Exception):
    """Base exception for all Forma client errors."""
    message: str
    code: ErrorCode
    details: dict[str, Any] | None = None

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Code: {self.code.value}, Details: {self.details})"
        return f"{self.message} (Code: {self.code.value})"

class ApiError(FormaError):
    """Normalized error raised by every API call.

    ``status_code`` is the HTTP status of the response, or 0 when no response
    was received at all (network failure, timeout).
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        code: ErrorCode = ErrorCode.REQUEST_FAILED,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message, code, details)
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message

class ApiTimeoutError(ApiError):
    """The request did not complete within the configured timeout."""
    def __init__(self, message: str):
        super().__init__(0, message, ErrorCode.TIMEOUT)

class ApiConnectionError(ApiError):
    """The server could not be reached."""
    def __init__(self, message: str):
        super().__init__(0, message, ErrorCode.CONNECTION_ERROR)

class ApiResponseError(ApiError):
    """The server answered with a non-2xx status or ``success: false``."""
    def __init__(self, status_code: int, message: str, details: dict[str, Any] | None = None):
        code = ErrorCode.SERVER_ERROR if status_code >= 500 else ErrorCode.REQUEST_FAILED
        super().__init__(status_code, message, code, details)

class ApiInvalidResponseError(ApiError):
    """The response body was not JSON (typically a proxy misconfiguration)."""
    def __init__(self, status_code: int, message: str, details: dict[str, Any] | None = None):
        super().__init__(status_code, message, ErrorCode.INVALID_RESPONSE, details)

class ValidationError(FormaError):
    """Client-side validation failure, keyed by field name."""
    def __init__(self, field_errors: dict[str, str], message: str = "Validation failed"):
        super().__init__(message, ErrorCode.VALIDATION_FAILED, dict(field_errors))
        self.field_errors = dict(field_errors)

    def __str__(self) -> str:
        fields = "; ".join(f"{name}: {error}" for name, error in self.field_errors.items())
        return f"{self.message}: {fields}" if fields else self.message

class AuthError(FormaError):
    """Authentication error."""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.AUTH_FAILED, details: dict[str, Any] | None = None):
        super().__init__(message, code, details)

class ConfigError(FormaError):
    """Configuration error."""
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIG_INVALID, details)

class TransitionError(FormaError):
    """A payment status transition was refused before reaching the API."""
    def __init__(self, message: str, payment_id: str):
        super().__init__(message, ErrorCode.TRANSITION_REFUSED, {"payment_id": payment_id})

class CheckoutError(FormaError):
    """Checkout session creation or gym activation failed."""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.CHECKOUT_FAILED, details: dict[str, Any] | None = None):
        super().__init__(message, code, details)

@contextmanager
def handle_errors(service: str, operation: str) -> Iterator[None]:
    """Log and re-raise errors escaping an operation.

    Expected errors are logged at debug level since the caller reports them;
    anything else is logged with its traceback.

    Args:
        service: The service name
        operation: The operation name
    """
    try:
        yield
    except FormaError as e:
        logger.debug(f"{service}.{operation} failed: {e}")
        raise
    except Exception as e:
        logger.error(
            f"Unexpected error in {service}.{operation}: {e}",
            exc_info=True
        )
        raise
