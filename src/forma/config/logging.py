"""Logging configuration for the CLI and the checkout server."""

import logging
import os
import sys

from forma.config.logging_filters import SensitiveDataFilter
from forma.config.types import AppConfig


FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name when writing to a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def __init__(self, use_color: bool = True):
        super().__init__('%(asctime)s %(levelname)s %(name)s: %(message)s', datefmt='%H:%M:%S')
        self.use_color = use_color

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        color = self.COLORS.get(record.levelname)
        if not self.use_color or color is None:
            return line
        return line.replace(record.levelname, f"{color}{record.levelname}{self.RESET}", 1)

def get_file_handler(log_file: str) -> logging.FileHandler:
    """Create a file handler, creating the log directory if needed."""
    log_dir = os.path.dirname(log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding='utf-8')
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler

def setup_logging(config: AppConfig | None = None, verbose: bool = False, log_file: str | None = None) -> None:
    """Set up logging configuration.

    Console output goes to stderr so that command output on stdout stays
    machine-readable. The log file, when set, always receives debug output.
    """
    level_name = 'DEBUG' if verbose else (config.logging.level if config else 'WARNING')
    level = getattr(logging, level_name.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    sensitive_filter = SensitiveDataFilter(
        set(config.logging.sensitive_fields) if config else None
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(ColoredFormatter(use_color=sys.stderr.isatty()))
    console_handler.addFilter(sensitive_filter)
    root_logger.addHandler(console_handler)

    log_file = log_file or (config.logging.file if config else None)
    if log_file:
        file_handler = get_file_handler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.addFilter(sensitive_filter)
        root_logger.addHandler(file_handler)
        root_logger.setLevel(logging.DEBUG)
    else:
        root_logger.setLevel(level)

    # urllib3 logs every connection at DEBUG
    logging.getLogger('urllib3').setLevel(logging.WARNING)
