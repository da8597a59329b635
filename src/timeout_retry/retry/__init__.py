"""
Timeout-aware retry for httpx.

When an attempt fails, the retry orchestrator decides whether to retry,
waits for the computed delay, extends the request's timeout by that
delay and replays the request through the same client:

1. **Request interceptor**: attaches RetryState, buffers the body
2. **Response-error interceptor**: retry decision, delay, timeout
   extension, replay (or re-raises the original failure)

Main Components:
    - RetryConfiguration: max_retries, compute_delay, retry_condition
    - RetryState: Per-chain retry counter stored in request.extensions
    - RequestInterceptor / ResponseErrorInterceptor: The two hooks
    - Delay strategies: no_delay, linear_delay, exponential_delay

Usage:
    >>> from timeout_retry import attach_retry
    >>> attach_retry(client, RetryConfiguration(compute_delay=linear_delay(1.0)))
"""

from timeout_retry.retry.configuration import RetryConfiguration
from timeout_retry.retry.exceptions import RetryConfigurationError, RetryError
from timeout_retry.retry.interceptors import (
    RequestInterceptor,
    ResponseErrorInterceptor,
    build_replay_request,
    extend_timeout,
)
from timeout_retry.retry.state import RETRY_STATE_KEY, RetryState, get_current_state
from timeout_retry.retry.strategies import (
    DelayStrategy,
    RetryCondition,
    always_retry,
    exponential_delay,
    is_network_or_timeout_error,
    linear_delay,
    no_delay,
    retry_on_status,
)

__all__ = [
    "RetryConfiguration",
    "RetryError",
    "RetryConfigurationError",
    "RequestInterceptor",
    "ResponseErrorInterceptor",
    "build_replay_request",
    "extend_timeout",
    "RETRY_STATE_KEY",
    "RetryState",
    "get_current_state",
    "DelayStrategy",
    "RetryCondition",
    "always_retry",
    "exponential_delay",
    "is_network_or_timeout_error",
    "linear_delay",
    "no_delay",
    "retry_on_status",
]
