"""
Forma gym administration client.
"""

__version__ = '0.1.0'

from .exceptions import (
    ApiConnectionError,
    ApiError,
    ApiInvalidResponseError,
    ApiResponseError,
    ApiTimeoutError,
    AuthError,
    CheckoutError,
    ConfigError,
    FormaError,
    TransitionError,
    ValidationError,
)

__all__ = [
    'ApiConnectionError',
    'ApiError',
    'ApiInvalidResponseError',
    'ApiResponseError',
    'ApiTimeoutError',
    'AuthError',
    'CheckoutError',
    'ConfigError',
    'FormaError',
    'TransitionError',
    'ValidationError'
]
