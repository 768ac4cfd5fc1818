"""Custom exception classes.

Each exception carries an error_code that maps to the catalog in errors.py.
"""

from typing import Any


class SpendTrackError(Exception):
    """Base exception for all application errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "REC_001")
        details: Additional context about the error (for logging)
        http_status: HTTP status code to return (default: 500)
    """

    def __init__(
        self,
        error_code: str,
        details: dict[str, Any] | None = None,
        http_status: int = 500,
    ):
        self.error_code = error_code
        self.details = details or {}
        self.http_status = http_status
        super().__init__(error_code)


class RuleLookupError(SpendTrackError):
    """Raised when a user's category rules cannot be fetched (CAT_001)."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("CAT_001", details, http_status=503)


class InvalidRecurrencePatternError(SpendTrackError):
    """Raised when a recurring definition carries an unknown pattern (REC_001)."""

    def __init__(self, pattern: Any):
        self.pattern = pattern
        super().__init__("REC_001", {"pattern": pattern}, http_status=422)


class InstanceWriteError(SpendTrackError):
    """Raised when a recurring instance cannot be looked up or written (REC_002)."""

    def __init__(self, details: dict[str, Any] | None = None):
        super().__init__("REC_002", details)


class NotFoundError(SpendTrackError):
    """Raised when a resource is missing or owned by another user.

    Uses API_001 for transactions and API_002 for category rules.
    """

    def __init__(self, error_code: str = "API_001", details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=404)


class ValidationError(SpendTrackError):
    """Raised when input passes schema validation but breaks a business rule."""

    def __init__(self, error_code: str = "VAL_001", details: dict[str, Any] | None = None):
        super().__init__(error_code, details, http_status=400)
