"""Error codes for the Forma gym administration client."""

from enum import Enum

class ErrorCode(Enum):
    """Stable identifiers carried by every ``FormaError``."""
    # Session
    AUTH_FAILED = "auth_failed"
    NOT_AUTHENTICATED = "not_authenticated"
    NO_TENANT = "no_tenant"

    # Backend requests
    REQUEST_FAILED = "request_failed"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    SERVER_ERROR = "server_error"
    INVALID_RESPONSE = "invalid_response"

    # Client-side checks
    VALIDATION_FAILED = "validation_failed"
    CONFIG_INVALID = "config_invalid"
    TRANSITION_REFUSED = "transition_refused"

    # Subscription
    CHECKOUT_FAILED = "checkout_failed"
    ACTIVATION_FAILED = "activation_failed"
