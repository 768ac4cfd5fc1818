"""Error codes and user-friendly messages.

Each error has:
- code: Unique identifier
- message: Technical description (for logs)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the user
- retry_allowed: Whether the error is retryable
"""

ERROR_CATALOG: dict[str, dict] = {
    "CAT_001": {
        "code": "CAT_001",
        "message": "Category rule lookup failed",
        "user_message": "We couldn't load your category rules.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "REC_001": {
        "code": "REC_001",
        "message": "Unrecognized recurrence pattern",
        "user_message": "This recurring transaction has an unsupported schedule.",
        "suggestion": "Use one of: daily, weekly, monthly, yearly.",
        "retry_allowed": False,
    },
    "REC_002": {
        "code": "REC_002",
        "message": "Failed to materialize recurring transaction instance",
        "user_message": "We couldn't create the next occurrence of a recurring transaction.",
        "suggestion": "It will be retried automatically on the next scheduled run.",
        "retry_allowed": True,
    },
    "DB_001": {
        "code": "DB_001",
        "message": "Database operation failed",
        "user_message": "We couldn't save your changes due to a database error.",
        "suggestion": "Please try again in a few moments.",
        "retry_allowed": True,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request data failed validation",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    "VAL_002": {
        "code": "VAL_002",
        "message": "Recurring transaction is missing a valid recurrence pattern",
        "user_message": "Recurring transactions need a schedule.",
        "suggestion": "Choose daily, weekly, monthly or yearly.",
        "retry_allowed": False,
    },
    "API_001": {
        "code": "API_001",
        "message": "Transaction not found",
        "user_message": "We couldn't find this transaction.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
    "API_002": {
        "code": "API_002",
        "message": "Category rule not found",
        "user_message": "We couldn't find this category rule.",
        "suggestion": "Please refresh and try again.",
        "retry_allowed": False,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details. Unknown codes map to a generic error.
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
