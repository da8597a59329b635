"""Shared test fixtures and configuration for all tests.

This conftest.py provides the settings fixture and a scripted mock
transport used by unit and integration tests. No network access is
needed: every attempt is answered by httpx.MockTransport.
"""

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

import httpx
import pytest

from timeout_retry.client import attach_retry
from timeout_retry.config import Settings
from timeout_retry.retry.configuration import RetryConfiguration
from timeout_retry.retry.state import RETRY_STATE_KEY

# An outcome is either a status code to answer with or an exception to raise
Outcome = Union[int, httpx.Response, Exception]


@dataclass
class RecordedAttempt:
    """What the transport saw for one attempt."""

    method: str
    path: str
    retry_count: Optional[int]
    timeout: Optional[dict]
    content: bytes
    sent_at: float


@dataclass
class ScriptedTransport:
    """MockTransport handler answering attempts from a script.

    Outcomes are consumed in order. Once the script runs out, every
    further attempt gets a 200.
    """

    outcomes: list[Outcome] = field(default_factory=list)
    attempts: list[RecordedAttempt] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        state = request.extensions.get(RETRY_STATE_KEY)
        timeout = request.extensions.get("timeout")
        self.attempts.append(
            RecordedAttempt(
                method=request.method,
                path=request.url.path,
                retry_count=state.retry_count if state is not None else None,
                timeout=dict(timeout) if timeout is not None else None,
                content=request.content,
                sent_at=time.monotonic(),
            )
        )

        outcome = self.outcomes.pop(0) if self.outcomes else 200
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(outcome, json={"attempt": len(self.attempts)})


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.RETRY_MAX_RETRIES = 5
    """
    return Settings(
        # === Application ===
        APP_NAME="httpx-timeout-retry (Test)",
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === HTTP Client ===
        HTTP_BASE_URL="http://example.com",
        HTTP_TIMEOUT=5.0,

        # === Retry ===
        RETRY_MAX_RETRIES=3,
        RETRY_DELAY_STRATEGY="none",  # No real waiting in tests
        RETRY_DELAY_SECONDS=0.0,
    )


@pytest.fixture
def make_client():
    """Factory fixture building a retrying client over a scripted transport.

    Usage:
        async def test_something(make_client):
            client, transport = make_client([httpx.ConnectError("down"), 200])
            response = await client.get("/test")
    """
    def _create(
        outcomes: list[Outcome],
        config: Optional[RetryConfiguration] = None,
        timeout: Optional[float] = None,
        handler: Optional[Callable[[httpx.Request], httpx.Response]] = None,
        **client_kwargs,
    ) -> tuple[httpx.AsyncClient, ScriptedTransport]:
        transport = ScriptedTransport(outcomes=list(outcomes))
        client = httpx.AsyncClient(
            base_url="http://example.com",
            transport=httpx.MockTransport(handler or transport),
            timeout=timeout,
            **client_kwargs,
        )
        attach_retry(client, config)
        return client, transport

    return _create
