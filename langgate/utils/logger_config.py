"""
Logging configuration for LangGate.

The library only creates module loggers under the ``langgate`` namespace;
hosts opt in to handlers by calling ``setup_logging``.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "langgate"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Set up logging for the ``langgate`` logger tree.
    
    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_string: Log message format
        log_file: Optional file to also write logs to
    
    Returns:
        The configured ``langgate`` logger
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT
    
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(numeric_level)
    
    # Replace handlers so repeated calls don't duplicate output
    root_logger.handlers = []
    
    formatter = logging.Formatter(format_string)
    
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    
    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the ``langgate`` namespace.
    
    Args:
        name: Child logger name (None for the root langgate logger)
    """
    if name:
        return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
    return logging.getLogger(ROOT_LOGGER_NAME)


class LogContext:
    """
    Context manager for temporary log level changes.
    
    Example:
        with LogContext(level="DEBUG", logger_name="routing"):
            engine.route(request)
    """
    
    def __init__(self, level: str = "DEBUG", logger_name: Optional[str] = None):
        self.level = level
        self.logger = get_logger(logger_name)
        self.original_level: Optional[int] = None
    
    def __enter__(self) -> "LogContext":
        self.original_level = self.logger.level
        self.logger.setLevel(getattr(logging, self.level.upper(), logging.DEBUG))
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.original_level is not None:
            self.logger.setLevel(self.original_level)
        return False
