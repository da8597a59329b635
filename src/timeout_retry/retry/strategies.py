"""
Delay strategies and retry conditions.

A delay strategy maps the 1-based retry number and the failure that
triggered it to a delay in seconds. A retry condition decides whether a
failure is worth retrying at all; the retry count limit still applies on
top of it.

Delay Strategies:
    - no_delay: Always 0 (the default, retries immediately)
    - linear_delay: attempt * step
    - exponential_delay: base * 2^(attempt - 1), optional cap and jitter

Retry Conditions:
    - always_retry: Every failure is retryable (the default)
    - is_network_or_timeout_error: Only transport-level failures

Response Hooks:
    - retry_on_status: Turns retryable status codes into failures
"""

import random
from typing import Awaitable, Callable, Protocol

import httpx


class DelayStrategy(Protocol):
    """
    Protocol for delay strategies.

    Called once per scheduled retry, after the retry counter has been
    incremented, so ``attempt`` is the number of the retry about to be
    made (1 for the first retry).
    """

    def __call__(self, attempt: int, failure: httpx.HTTPError) -> float:
        """
        Compute the delay before the next attempt.

        Args:
            attempt: Retry number being scheduled (1-indexed)
            failure: Exception that triggered the retry

        Returns:
            Delay in seconds (non-negative)
        """
        ...


RetryCondition = Callable[[httpx.HTTPError], bool]


def no_delay(attempt: int, failure: httpx.HTTPError) -> float:
    """Retry immediately: every attempt waits 0 seconds."""
    return 0.0


def linear_delay(step: float) -> DelayStrategy:
    """Delay growing by ``step`` seconds with each retry."""
    if step < 0:
        raise ValueError("step must be >= 0")

    def _linear(attempt: int, failure: httpx.HTTPError) -> float:
        return attempt * step

    return _linear


def exponential_delay(
    base: float,
    *,
    cap: float | None = None,
    jitter: float = 0.0,
) -> DelayStrategy:
    """
    Exponential backoff: base, 2*base, 4*base, ...

    Args:
        base: Delay before the first retry (seconds)
        cap: Upper bound for the computed delay (None = unbounded)
        jitter: Random spread as a fraction of the delay (0.0-1.0)

    Returns:
        Delay strategy
    """
    if base < 0:
        raise ValueError("base must be >= 0")
    if cap is not None and cap < 0:
        raise ValueError("cap must be >= 0")
    if not 0.0 <= jitter <= 1.0:
        raise ValueError("jitter must be between 0.0 and 1.0")

    def _exponential(attempt: int, failure: httpx.HTTPError) -> float:
        delay = base * 2 ** (attempt - 1)
        if cap is not None:
            delay = min(delay, cap)
        if jitter:
            delay += delay * random.uniform(-jitter, jitter)
        return max(delay, 0.0)

    return _exponential


def always_retry(failure: httpx.HTTPError) -> bool:
    """Retry every failure; only max_retries bounds the chain."""
    return True


def is_network_or_timeout_error(failure: httpx.HTTPError) -> bool:
    """
    Retry only failures raised below the HTTP layer.

    Covers connection errors, protocol errors and all timeouts
    (httpx.TransportError). Status-code failures (httpx.HTTPStatusError)
    are not retried.
    """
    return isinstance(failure, httpx.TransportError)


def retry_on_status(
    *status_codes: int,
) -> Callable[[httpx.Response], Awaitable[None]]:
    """
    Build a response hook that raises for retryable status codes.

    httpx returns error responses normally; registering this hook in
    ``client.event_hooks["response"]`` turns them into
    httpx.HTTPStatusError so the retry layer sees them as failures.

    Args:
        *status_codes: Codes to treat as failures. Default: 429 and 5xx.

    Returns:
        Async response hook
    """
    codes = frozenset(status_codes)

    async def raise_for_retryable_status(response: httpx.Response) -> None:
        if codes:
            failed = response.status_code in codes
        else:
            failed = response.status_code == 429 or response.is_server_error
        if not failed:
            return

        # Keep the body readable on the exception once the response is closed
        await response.aread()
        raise httpx.HTTPStatusError(
            f"Retryable status {response.status_code} for url '{response.request.url}'",
            request=response.request,
            response=response,
        )

    return raise_for_retryable_status
