"""
Attach the retry layer to httpx clients.

attach_retry augments an existing httpx.AsyncClient in place:

    client = httpx.AsyncClient(timeout=5.0)
    attach_retry(client, RetryConfiguration(compute_delay=linear_delay(1.0)))
    response = await client.get("https://example.com/")

create_http_client builds a client from Settings with retry attached.
"""

from typing import Optional

import httpx
import structlog

from timeout_retry.config import Settings
from timeout_retry.retry.configuration import RetryConfiguration
from timeout_retry.retry.exceptions import RetryConfigurationError
from timeout_retry.retry.interceptors import (
    RequestInterceptor,
    ResponseErrorInterceptor,
)
from timeout_retry.retry.strategies import retry_on_status

logger = structlog.get_logger(__name__)


def attach_retry(
    client: httpx.AsyncClient, config: Optional[RetryConfiguration] = None
) -> None:
    """
    Register the retry interceptors on a client.

    The request interceptor goes first in ``client.event_hooks["request"]``
    so the retry state exists before any user hook runs. The client's
    ``send`` is wrapped by the response-error interceptor; every verb
    (get, post, request, stream, ...) goes through it.

    Args:
        client: Client to augment (mutated in place)
        config: Retry policy (default: 3 retries, no delay)

    Raises:
        RetryConfigurationError: Client is not an httpx.AsyncClient, or
            retry is already attached to it
    """
    if not isinstance(client, httpx.AsyncClient):
        raise RetryConfigurationError(
            "attach_retry requires an httpx.AsyncClient",
            details={"client_type": type(client).__name__},
        )

    if isinstance(getattr(client.send, "__self__", None), ResponseErrorInterceptor):
        raise RetryConfigurationError("Retry is already attached to this client")

    if config is None:
        config = RetryConfiguration()

    client.event_hooks["request"].insert(0, RequestInterceptor())

    interceptor = ResponseErrorInterceptor(client, config, dispatch=client.send)
    client.send = interceptor.send  # type: ignore[method-assign]

    logger.debug(
        "Retry attached to client",
        max_retries=config.max_retries,
        base_url=str(client.base_url),
    )


def create_http_client(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """
    Create an async client configured from settings, with retry attached.

    With RETRY_ON_STATUS set, a response hook raises httpx.HTTPStatusError
    for RETRY_STATUS_CODES (429 and 5xx when empty), so those statuses are
    retried like transport failures.

    Args:
        settings: Application settings (HTTP_* and RETRY_* values)
        transport: Transport override (default: httpx connection pool)

    Returns:
        Configured httpx.AsyncClient
    """
    limits = httpx.Limits(
        max_connections=settings.HTTP_MAX_CONNECTIONS,
        max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
    )
    event_hooks: dict[str, list] = {"request": [], "response": []}
    if settings.RETRY_ON_STATUS:
        event_hooks["response"].append(retry_on_status(*settings.RETRY_STATUS_CODES))

    client = httpx.AsyncClient(
        base_url=settings.HTTP_BASE_URL,
        timeout=httpx.Timeout(settings.HTTP_TIMEOUT),
        limits=limits,
        event_hooks=event_hooks,
        transport=transport,
    )
    attach_retry(client, RetryConfiguration.from_settings(settings))

    logger.info(
        "HTTP client created",
        base_url=settings.HTTP_BASE_URL,
        timeout=settings.HTTP_TIMEOUT,
        max_retries=settings.RETRY_MAX_RETRIES,
        delay_strategy=settings.RETRY_DELAY_STRATEGY,
        retry_on_status=settings.RETRY_ON_STATUS,
    )
    return client


async def close_http_client(client: httpx.AsyncClient) -> None:
    """Close client connections. Safe to call on an already closed client."""
    if not client.is_closed:
        await client.aclose()
        logger.debug("HTTP client closed")
