"""
Error tracking and reporting.

Keeps a record of the failures that aborted publish cycles, so the host
pipeline can inspect them after the run.
"""

import logging
import traceback
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ErrorRecord:
    """Record of a captured error."""

    error_id: str
    timestamp: datetime
    exception_type: str
    exception_message: str
    traceback: str
    context: Dict[str, Any] = field(default_factory=dict)


class ErrorTracker:
    """
    Error tracker for capturing and reporting errors.

    Only the most recent ``max_errors`` records are kept.
    """

    MAX_ERRORS = 100

    def __init__(self, max_errors: int = MAX_ERRORS):
        self.errors: Deque[ErrorRecord] = deque(maxlen=max_errors)

    def capture_exception(
        self,
        exception: BaseException,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Capture an exception and log it with its traceback.

        Args:
            exception: The exception to capture
            message: Log message describing what failed
            context: Additional context data

        Returns:
            Error ID
        """
        error_id = str(uuid.uuid4())

        record = ErrorRecord(
            error_id=error_id,
            timestamp=datetime.now(timezone.utc),
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            traceback=''.join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            )),
            context=context or {},
        )
        self.errors.append(record)

        logger.error(
            message,
            extra={'error_id': error_id, 'error_context': context},
            exc_info=(type(exception), exception, exception.__traceback__),
        )

        return error_id

    def get_errors(self, limit: int = 100) -> List[ErrorRecord]:
        """
        Get captured errors, most recent first.

        Args:
            limit: Maximum number of errors to return

        Returns:
            List of error records
        """
        return list(reversed(self.errors))[:limit]


# Global error tracker instance
_error_tracker: Optional[ErrorTracker] = None


def get_error_tracker() -> ErrorTracker:
    """
    Get the global error tracker, creating it on first use.

    Returns:
        ErrorTracker instance
    """
    global _error_tracker
    if _error_tracker is None:
        _error_tracker = ErrorTracker()
    return _error_tracker
