"""
Timeout-aware retry layer for httpx async clients.

Re-issues failed requests after a computed delay and extends the
request's timeout by the same delay, so a retried attempt is not cut
off by a deadline sized for the first attempt.

Architecture: httpx request event hook + wrapped AsyncClient.send.
configure_logging routes structlog and httpx logs through one renderer,
with replayed attempts tagged by their retry context.
"""

from timeout_retry.client import attach_retry, close_http_client, create_http_client
from timeout_retry.logging_config import (
    configure_logging,
    configure_logging_from_settings,
    retry_context,
)
from timeout_retry.retry import (
    RETRY_STATE_KEY,
    RetryConfiguration,
    RetryConfigurationError,
    RetryState,
    exponential_delay,
    is_network_or_timeout_error,
    linear_delay,
    no_delay,
    retry_on_status,
)

__version__ = "0.1.0"

__all__ = [
    "attach_retry",
    "create_http_client",
    "close_http_client",
    "configure_logging",
    "configure_logging_from_settings",
    "retry_context",
    "RETRY_STATE_KEY",
    "RetryConfiguration",
    "RetryConfigurationError",
    "RetryState",
    "exponential_delay",
    "is_network_or_timeout_error",
    "linear_delay",
    "no_delay",
    "retry_on_status",
]
