"""Monitoring and metrics instrumentation for the retry layer.

Exports Prometheus metrics recorded by the retry orchestrator.
"""

from timeout_retry.monitoring.metrics import (
    http_retries_total,
    http_retry_delay_seconds,
    http_retry_exhausted_total,
)

__all__ = [
    "http_retries_total",
    "http_retry_exhausted_total",
    "http_retry_delay_seconds",
]
