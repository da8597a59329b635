"""
Per-request retry state.

A RetryState lives in the request's ``extensions`` mapping under a
namespaced key so it never collides with httpx's own extensions
(``timeout``, ``sni_hostname``, ...). The same object is shared by every
replay and redirect of one logical request, so ``retry_count``
accumulates across the whole chain.
"""

from dataclasses import dataclass

import httpx
import structlog

logger = structlog.get_logger(__name__)

RETRY_STATE_KEY = "retry-state"


@dataclass
class RetryState:
    """
    Mutable retry counter for one logical request chain.

    Attributes:
        retry_count: Number of retries scheduled so far (0 before the first retry)
    """

    retry_count: int = 0


def get_current_state(request: httpx.Request) -> RetryState:
    """
    Return the request's RetryState, attaching a fresh one if absent.

    An existing state is returned untouched.
    """
    state = request.extensions.get(RETRY_STATE_KEY)
    if state is None:
        state = RetryState()
        request.extensions[RETRY_STATE_KEY] = state
        logger.debug(
            "Attached retry state",
            method=request.method,
            url=str(request.url),
        )
    return state
