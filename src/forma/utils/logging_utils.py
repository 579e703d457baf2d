"""
Logging helpers shared by the API client and the services.
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any
from typing import TypeVar

from typing_extensions import ParamSpec

from forma.exceptions import ApiError


T = TypeVar('T')
P = ParamSpec('P')

def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name."""
    return logging.getLogger(name)

def log_api_call(func: Callable[P, T]) -> Callable[P, T]:
    """Log an API client method at debug level with its duration.

    Failures are logged with the HTTP status of the ``ApiError`` and re-raised.
    """
    logger = logging.getLogger(func.__module__)

    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        started = time.perf_counter()
        try:
            result = func(*args, **kwargs)
        except ApiError as e:
            elapsed = (time.perf_counter() - started) * 1000
            logger.debug(f"{func.__name__} failed after {elapsed:.0f}ms (status {e.status_code}): {e.message}")
            raise
        elapsed = (time.perf_counter() - started) * 1000
        logger.debug(f"{func.__name__} completed in {elapsed:.0f}ms")
        return result

    return wrapper

class LoggerMixin:
    """Per-class logger whose messages carry ``key=value`` context."""

    def __init__(self) -> None:
        self._logger = logging.getLogger(self.__class__.__module__)
        self._log_context: dict[str, Any] = {}

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def set_log_context(self, **kwargs: Any) -> None:
        """Attach context to every message until ``clear_log_context``."""
        self._log_context.update(kwargs)

    def clear_log_context(self) -> None:
        self._log_context.clear()

    def _format_message(self, msg: str, **kwargs: Any) -> str:
        context = {**self._log_context, **kwargs}
        if not context:
            return msg
        return f"{msg} | Context: " + " | ".join(f"{k}={v}" for k, v in context.items())

    def debug(self, msg: str, **kwargs: Any) -> None:
        self.logger.debug(self._format_message(msg, **kwargs))

    def info(self, msg: str, **kwargs: Any) -> None:
        self.logger.info(self._format_message(msg, **kwargs))

    def warning(self, msg: str, **kwargs: Any) -> None:
        self.logger.warning(self._format_message(msg, **kwargs))
