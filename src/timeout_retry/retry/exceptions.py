"""
Retry layer exceptions.

These are raised only for programmer errors (invalid configuration,
attaching twice to the same client). HTTP failures seen by the retry
layer are never wrapped: a failure that is not retried reaches the
caller as the original httpx exception object.
"""


class RetryError(Exception):
    """
    Base exception for all retry layer errors.

    All retry-specific exceptions inherit from this to allow catching
    any retry layer error with a single except clause.
    """
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RetryConfigurationError(RetryError, ValueError):
    """
    Raised when a retry configuration cannot be used.

    Examples:
    - Negative max_retries
    - compute_delay or retry_condition is not callable
    - attach_retry called twice on the same client
    - attach_retry called with a non-async client
    """
    pass
