"""Exceptions raised by the harness clients."""
from typing import Optional


class HarnessError(Exception):
    """Base error for harness failures."""


class ArithmeticExpressionError(HarnessError, ValueError):
    """Raised when a time expression is not valid integer arithmetic."""

    def __init__(self, message: str, expression: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.expression = expression
        self.position = position


class TimeExpressionError(HarnessError, ValueError):
    """Raised when a line's now() expression cannot be evaluated.

    The untranslated line is kept on ``line`` so callers can fall back to it.
    """

    def __init__(self, message: str, line: str, expression: str) -> None:
        super().__init__(message)
        self.line = line
        self.expression = expression


class DatabaseMonitorError(HarnessError):
    """Raised when a database never reaches the expected state."""

    def __init__(self, message: str, db: str, attempts: int) -> None:
        super().__init__(message)
        self.db = db
        self.attempts = attempts


class DatabaseNotFoundError(DatabaseMonitorError):
    """Raised when a created database never shows up."""


class DatabaseStillFoundError(DatabaseMonitorError):
    """Raised when a dropped database is still listed."""


class TaskLoadError(HarnessError):
    """Raised when Kapacitor rejects a task definition."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ResponseFormatError(HarnessError, ValueError):
    """Raised when a service response does not have the expected JSON shape."""


class TaskStatusError(HarnessError):
    """Raised when a task status response has no usable alert stats."""


class CaseFileError(HarnessError):
    """Raised when a test case file cannot be loaded."""
