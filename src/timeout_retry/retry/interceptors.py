"""
Request and response-error interceptors.

The RequestInterceptor runs as an httpx request event hook before every
attempt. The ResponseErrorInterceptor wraps the client's ``send`` and
orchestrates retries when an attempt raises httpx.HTTPError:

    send → attempt fails
         → no request on the failure?        → re-raise
         → retry_count == max_retries?       → re-raise
         → retry_condition rejects failure?  → re-raise
         → retry_count += 1
         → delay = compute_delay(retry_count, failure)
         → timeout components += delay
         → sleep(delay), then client.send(replay) through the same chain

Failures that are not retried reach the caller as the original
exception object.
"""

import asyncio
from typing import Any, Awaitable, Callable

import httpx
import structlog

from timeout_retry.logging_config import retry_context
from timeout_retry.monitoring.metrics import (
    http_retries_total,
    http_retry_delay_seconds,
    http_retry_exhausted_total,
)
from timeout_retry.retry.configuration import RetryConfiguration
from timeout_retry.retry.state import RETRY_STATE_KEY, get_current_state

logger = structlog.get_logger(__name__)

SendFunction = Callable[..., Awaitable[httpx.Response]]


def extend_timeout(
    timeout: dict[str, float | None] | None, delay: float
) -> dict[str, float | None] | None:
    """
    Return a copy of an httpx timeout mapping with ``delay`` added.

    None components are unbounded and stay None. A 0 component is a real
    zero-second deadline in httpx, so it is extended like any other.
    """
    if timeout is None:
        return None
    return {
        name: value + delay if value is not None else value
        for name, value in timeout.items()
    }


def build_replay_request(request: httpx.Request, delay: float) -> httpx.Request:
    """
    Shallow-copy a request for the next attempt.

    The copy shares the original's encoded body stream and its RetryState;
    only the timeout mapping is replaced. The body is never re-encoded.
    """
    extensions = dict(request.extensions)
    if "timeout" in extensions:
        extensions["timeout"] = extend_timeout(extensions["timeout"], delay)

    return httpx.Request(
        request.method,
        request.url,
        headers=request.headers,
        stream=request.stream,
        extensions=extensions,
    )


class RequestInterceptor:
    """
    Pre-dispatch hook run before every attempt.

    Attaches a RetryState to requests that have none and buffers the
    request body, so a replay sends exactly the bytes that were encoded
    for the initial attempt.
    """

    async def __call__(self, request: httpx.Request) -> None:
        get_current_state(request)
        await request.aread()


class ResponseErrorInterceptor:
    """
    Retry orchestrator wrapping a client's ``send``.

    Attributes:
        client: Client the interceptor is attached to; replays go through
            its (wrapped) ``send`` so the full interceptor chain applies
        config: Attachment-time retry policy
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        config: RetryConfiguration,
        dispatch: SendFunction,
    ):
        """
        Initialize the orchestrator.

        Args:
            client: Client to replay requests through
            config: Retry policy
            dispatch: The client's original ``send``
        """
        self.client = client
        self.config = config
        self._dispatch = dispatch

    async def send(self, request: httpx.Request, **kwargs: Any) -> httpx.Response:
        """
        Send a request, retrying failed attempts per the configuration.

        Args:
            request: Request to send
            **kwargs: httpx send options (stream, auth, follow_redirects),
                reused for every replay

        Returns:
            Response of the attempt that terminated the chain

        Raises:
            httpx.HTTPError: The failure that terminated the chain, unchanged
        """
        try:
            return await self._dispatch(request, **kwargs)
        except httpx.HTTPError as failure:
            scheduled = self.on_error(failure)
            if scheduled is None:
                raise

        # Re-dispatch outside the except block so the next failure is not
        # chained onto this one.
        replay, delay = scheduled
        await asyncio.sleep(delay)
        attempt = replay.extensions[RETRY_STATE_KEY].retry_count
        with retry_context(replay, attempt):
            return await self.client.send(replay, **kwargs)

    def on_error(self, failure: httpx.HTTPError) -> tuple[httpx.Request, float] | None:
        """
        Decide whether a failed attempt is retried.

        Mutates the chain's RetryState when a retry is scheduled.

        Args:
            failure: Exception raised by the attempt

        Returns:
            (replay request, delay in seconds), or None when the failure
            must propagate
        """
        try:
            request = failure.request
        except RuntimeError:
            http_retry_exhausted_total.labels(method="unknown", reason="no_request").inc()
            logger.debug(
                "Failure carries no request, not retrying",
                error_type=type(failure).__name__,
            )
            return None

        state = get_current_state(request)

        if state.retry_count >= self.config.max_retries:
            http_retry_exhausted_total.labels(method=request.method, reason="max_retries").inc()
            logger.warning(
                "Retries exhausted",
                method=request.method,
                url=str(request.url),
                retry_count=state.retry_count,
                max_retries=self.config.max_retries,
                error_type=type(failure).__name__,
            )
            return None

        if not self.config.retry_condition(failure):
            http_retry_exhausted_total.labels(method=request.method, reason="condition").inc()
            logger.info(
                "Failure rejected by retry condition",
                method=request.method,
                url=str(request.url),
                retry_count=state.retry_count,
                error_type=type(failure).__name__,
            )
            return None

        state.retry_count += 1

        delay = self.config.compute_delay(state.retry_count, failure)
        if delay < 0:
            logger.warning("Negative retry delay clamped to 0", delay=delay)
            delay = 0.0

        replay = build_replay_request(request, delay)

        http_retries_total.labels(method=request.method).inc()
        http_retry_delay_seconds.observe(delay)
        logger.info(
            "Scheduling retry",
            method=request.method,
            url=str(request.url),
            attempt=state.retry_count,
            max_retries=self.config.max_retries,
            delay_seconds=delay,
            timeout=replay.extensions.get("timeout"),
            error_type=type(failure).__name__,
        )

        return replay, delay
