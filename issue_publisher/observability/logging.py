"""
Structured logging configuration.

Provides JSON-formatted logging with context management, so that every
record of a publish cycle carries the repository and pull request.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict

from issue_publisher.config import Settings


# Context variable for storing the current publish cycle context
log_context: ContextVar[Dict[str, Any]] = ContextVar('log_context', default={})

# Attributes every LogRecord has; anything else came in through ``extra``
_RECORD_ATTRIBUTES = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Formats log records as JSON with context and ``extra`` fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        context = log_context.get()
        if context:
            log_data['context'] = context

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES
        }
        if extra:
            log_data['extra'] = extra

        if record.exc_info:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info),
            }

        # Add source location for errors and above
        if record.levelno >= logging.ERROR:
            log_data['source'] = {
                'file': record.pathname,
                'line': record.lineno,
                'function': record.funcName,
            }

        return json.dumps(log_data, default=str)


class ContextFormatter(logging.Formatter):
    """
    Human-readable formatter with context.

    Used for local runs and debugging.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with context."""
        base_msg = super().format(record)

        context = log_context.get()
        if context:
            context_str = ' '.join(f'{k}={v}' for k, v in context.items())
            base_msg = f"{base_msg} [{context_str}]"

        return base_msg


def setup_logging(settings: Settings) -> None:
    """
    Configure logging.

    Sets up JSON logging in production, or when LOG_FORMAT is "json", and
    human-readable logging otherwise.

    Args:
        settings: Publisher settings
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    if settings.ENVIRONMENT == "production" or settings.LOG_FORMAT == "json":
        formatter = JSONFormatter()
    else:
        formatter = ContextFormatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Set levels for noisy libraries
    logging.getLogger('urllib3').setLevel(logging.WARNING)

    root_logger.info(
        f"Logging configured: level={settings.LOG_LEVEL}, "
        f"environment={settings.ENVIRONMENT}"
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


class LogContext:
    """
    Context manager for adding structured context to logs.

    Usage:
        with LogContext(repository="org/repo", pr_number=123):
            logger.info("Publishing findings")  # Includes context in log
    """

    def __init__(self, **kwargs):
        self.context = kwargs
        self.token = None

    def __enter__(self):
        current = log_context.get().copy()
        current.update(self.context)
        self.token = log_context.set(current)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token:
            log_context.reset(self.token)


def get_log_context() -> Dict[str, Any]:
    """
    Get the current log context.

    Returns:
        Current context dictionary
    """
    return log_context.get().copy()
