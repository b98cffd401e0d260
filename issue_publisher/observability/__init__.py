"""
Observability module for logging and error tracking.

This module provides:
- Structured logging setup
- Error tracking and reporting
"""

from issue_publisher.observability.logging import setup_logging, get_logger, LogContext
from issue_publisher.observability.errors import ErrorRecord, ErrorTracker, get_error_tracker

__all__ = [
    "setup_logging",
    "get_logger",
    "LogContext",
    "ErrorRecord",
    "ErrorTracker",
    "get_error_tracker",
]
