"""
Retry configuration.

Supplied once when the retry layer is attached to a client; every
request sent through that client shares it.
"""

from dataclasses import dataclass, field

from timeout_retry.config import Settings
from timeout_retry.retry.exceptions import RetryConfigurationError
from timeout_retry.retry.strategies import (
    DelayStrategy,
    RetryCondition,
    always_retry,
    exponential_delay,
    is_network_or_timeout_error,
    linear_delay,
    no_delay,
)


@dataclass(frozen=True)
class RetryConfiguration:
    """
    Attachment-time retry policy.

    Attributes:
        max_retries: Maximum number of retries after the initial attempt
        compute_delay: Delay strategy, called with (attempt, failure)
        retry_condition: Extra predicate on the failure (default: retry everything)
    """

    max_retries: int = 3
    compute_delay: DelayStrategy = field(default=no_delay)
    retry_condition: RetryCondition = field(default=always_retry)

    def __post_init__(self) -> None:
        """Validate configuration invariants."""
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise RetryConfigurationError(
                "max_retries must be an integer",
                details={"max_retries": self.max_retries},
            )

        if self.max_retries < 0:
            raise RetryConfigurationError(
                "max_retries must be >= 0",
                details={"max_retries": self.max_retries},
            )

        if not callable(self.compute_delay):
            raise RetryConfigurationError("compute_delay must be callable")

        if not callable(self.retry_condition):
            raise RetryConfigurationError("retry_condition must be callable")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryConfiguration":
        """
        Build a configuration from application settings.

        RETRY_DELAY_STRATEGY selects the delay strategy:
        - none: retry immediately
        - linear: RETRY_DELAY_SECONDS * attempt
        - exponential: RETRY_DELAY_SECONDS * 2^(attempt - 1), capped at
          RETRY_MAX_DELAY_SECONDS, with RETRY_JITTER spread
        """
        compute_delay: DelayStrategy
        if settings.RETRY_DELAY_STRATEGY == "linear":
            compute_delay = linear_delay(settings.RETRY_DELAY_SECONDS)
        elif settings.RETRY_DELAY_STRATEGY == "exponential":
            compute_delay = exponential_delay(
                settings.RETRY_DELAY_SECONDS,
                cap=settings.RETRY_MAX_DELAY_SECONDS,
                jitter=settings.RETRY_JITTER,
            )
        else:
            compute_delay = no_delay

        retry_condition = (
            is_network_or_timeout_error if settings.RETRY_NETWORK_ERRORS_ONLY else always_retry
        )

        return cls(
            max_retries=settings.RETRY_MAX_RETRIES,
            compute_delay=compute_delay,
            retry_condition=retry_condition,
        )
