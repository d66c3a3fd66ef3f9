"""
Logging configuration for peerwatch.

Console logging plus an optional rotating log file.
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any


LOGGER_NAME = "peerwatch"


class StructuredFormatter(logging.Formatter):
    """Pipe-separated formatter for easier log parsing."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'module_name'):
            record.module_name = record.module
        if not hasattr(record, 'function_name'):
            record.function_name = record.funcName
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_file: str | None = None,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
    enable_console: bool = True,
) -> logging.Logger:
    """
    Set up logging for peerwatch.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Log file path; file logging is off when not given
        max_bytes: Maximum log file size before rotation
        backup_count: Number of backup log files to keep
        enable_console: Enable console logging

    Returns:
        Configured package logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers.clear()

    console_fmt = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_fmt = StructuredFormatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)-24s | %(module_name)-12s | '
            '%(function_name)-20s | %(lineno)-4d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if enable_console:
        # stderr keeps --json output on stdout clean
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logger.level)
        console_handler.setFormatter(console_fmt)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(file_fmt)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        name: Module name (e.g., 'peerwatch.peers.source')
    """
    return logging.getLogger(name)


def configure_logging(debug: bool = False, log_file: str | None = None) -> None:
    """Quick logging configuration used by the CLI."""
    setup_logging(
        level="DEBUG" if debug else "WARNING",
        log_file=log_file,
        enable_console=True,
    )


class ErrorTracker:
    """Track errors for monitoring and alerting."""

    def __init__(self):
        self.errors: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def log_error(
        self,
        error_type: str,
        message: str,
        exception: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        """
        Log an error with tracking.

        Args:
            error_type: Type of error (e.g., 'router_timeout', 'invalid_json')
            message: Error message
            exception: Exception object if available
            context: Additional context data
        """
        self.errors[error_type] = self.errors.get(error_type, 0) + 1

        log_msg = f"{error_type}: {message}"
        if context:
            log_msg += f" | Context: {context}"

        if exception:
            self.logger.error(log_msg, exc_info=exception)
        else:
            self.logger.error(log_msg)

    def get_error_counts(self) -> dict[str, int]:
        """Get error counts by type."""
        return self.errors.copy()

    def reset_counts(self) -> None:
        """Reset error counters."""
        self.errors.clear()


_error_tracker = ErrorTracker()


def track_error(
    error_type: str,
    message: str,
    exception: Exception | None = None,
    context: dict[str, Any] | None = None,
) -> None:
    """Track an error globally."""
    _error_tracker.log_error(error_type, message, exception, context)


def get_error_stats() -> dict[str, int]:
    """Get global error statistics."""
    return _error_tracker.get_error_counts()


def reset_error_stats() -> None:
    """Reset global error statistics."""
    _error_tracker.reset_counts()
