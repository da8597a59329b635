"""
Unit tests for attach_retry and the client factory.
"""

import httpx
import pytest

from timeout_retry.client import attach_retry, close_http_client, create_http_client
from timeout_retry.config import Settings
from timeout_retry.retry.configuration import RetryConfiguration
from timeout_retry.retry.exceptions import RetryConfigurationError
from timeout_retry.retry.interceptors import RequestInterceptor, ResponseErrorInterceptor
from timeout_retry.retry.state import RETRY_STATE_KEY
from timeout_retry.retry.strategies import no_delay


async def user_request_hook(request: httpx.Request) -> None:
    request.headers["X-Seen-Retry-Count"] = str(request.extensions[RETRY_STATE_KEY].retry_count)


# ============================================================================
# attach_retry
# ============================================================================


@pytest.mark.asyncio
async def test_attach_retry_registers_interceptors():
    client = httpx.AsyncClient(event_hooks={"request": [user_request_hook]})

    result = attach_retry(client)

    assert result is None
    assert isinstance(client.event_hooks["request"][0], RequestInterceptor)
    assert client.event_hooks["request"][1] is user_request_hook
    assert isinstance(client.send.__self__, ResponseErrorInterceptor)
    assert client.send.__self__.config == RetryConfiguration()

    await client.aclose()


@pytest.mark.asyncio
async def test_attach_retry_state_visible_to_user_hooks():
    """The retry state exists before user request hooks run."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers["X-Seen-Retry-Count"])
        if len(seen) == 1:
            raise httpx.ConnectError("Some connection error")
        return httpx.Response(200)

    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        event_hooks={"request": [user_request_hook]},
    )
    attach_retry(client)

    response = await client.get("http://example.com/test")

    assert response.status_code == 200
    assert seen == ["0", "1"]

    await client.aclose()


@pytest.mark.asyncio
async def test_attach_retry_twice_rejected():
    client = httpx.AsyncClient()
    attach_retry(client)

    with pytest.raises(RetryConfigurationError):
        attach_retry(client)

    assert len(client.event_hooks["request"]) == 1

    await client.aclose()


def test_attach_retry_requires_async_client():
    client = httpx.Client()

    with pytest.raises(RetryConfigurationError) as exc_info:
        attach_retry(client)

    assert exc_info.value.details == {"client_type": "Client"}
    client.close()


@pytest.mark.asyncio
async def test_attach_retry_uses_given_configuration():
    config = RetryConfiguration(max_retries=1)
    client = httpx.AsyncClient()

    attach_retry(client, config)

    assert client.send.__self__.config is config

    await client.aclose()


# ============================================================================
# create_http_client / close_http_client
# ============================================================================


@pytest.mark.asyncio
async def test_create_http_client_from_settings(test_settings: Settings):
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 3:
            raise httpx.ConnectError("Some connection error")
        return httpx.Response(200, json={"ok": True})

    client = create_http_client(test_settings, transport=httpx.MockTransport(handler))

    response = await client.get("/status")

    assert response.json() == {"ok": True}
    assert str(attempts[0].url) == "http://example.com/status"
    assert attempts[0].extensions["timeout"]["read"] == 5.0
    assert response.request.extensions[RETRY_STATE_KEY].retry_count == 2

    config = client.send.__self__.config
    assert config.max_retries == 3
    assert config.compute_delay is no_delay

    await close_http_client(client)
    assert client.is_closed


@pytest.mark.asyncio
async def test_create_http_client_retries_server_errors(test_settings: Settings):
    statuses = iter([500, 500, 200])
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(next(statuses))

    client = create_http_client(test_settings, transport=httpx.MockTransport(handler))

    response = await client.get("/status")

    assert (len(attempts), response.status_code) == (3, 200)
    assert response.request.extensions[RETRY_STATE_KEY].retry_count == 2

    await close_http_client(client)


@pytest.mark.asyncio
async def test_create_http_client_raises_exhausted_server_error(test_settings: Settings):
    test_settings.RETRY_MAX_RETRIES = 1
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(503)

    client = create_http_client(test_settings, transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await client.get("/status")

    assert exc_info.value.response.status_code == 503
    assert len(attempts) == 2

    await close_http_client(client)


@pytest.mark.asyncio
async def test_create_http_client_status_codes_setting(test_settings: Settings):
    test_settings.RETRY_STATUS_CODES = [409]
    statuses = iter([409, 500])

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(next(statuses))

    client = create_http_client(test_settings, transport=httpx.MockTransport(handler))

    response = await client.get("/status")

    # 500 is not listed, so it is returned as a normal response
    assert response.status_code == 500
    assert response.request.extensions[RETRY_STATE_KEY].retry_count == 1

    await close_http_client(client)


@pytest.mark.asyncio
async def test_create_http_client_without_status_retry(test_settings: Settings):
    test_settings.RETRY_ON_STATUS = False
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(500)

    client = create_http_client(test_settings, transport=httpx.MockTransport(handler))

    response = await client.get("/status")

    assert (len(attempts), response.status_code) == (1, 500)

    await close_http_client(client)


@pytest.mark.asyncio
async def test_create_http_client_without_timeout(test_settings: Settings):
    test_settings.HTTP_TIMEOUT = None

    client = create_http_client(test_settings)

    assert client.timeout == httpx.Timeout(None)

    await close_http_client(client)


@pytest.mark.asyncio
async def test_close_http_client_is_idempotent(test_settings: Settings):
    client = create_http_client(test_settings)

    await close_http_client(client)
    await close_http_client(client)

    assert client.is_closed
