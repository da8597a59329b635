"""Prometheus metrics for the retry layer.

These metrics live in the default registry and are exposed by whatever
/metrics endpoint the host application serves. Alert rules should be
configured for:
- http_retries_total (high retry rate indicates an unstable upstream)
- http_retry_exhausted_total (failures surfacing to callers after retries)
"""

from prometheus_client import Counter, Histogram

# === Retry Metrics ===

http_retries_total = Counter(
    "http_retries_total",
    "Total retries scheduled by HTTP method",
    ["method"],
)
"""
Scheduled retries counter.

Labels:
- method: HTTP method of the retried request (GET, POST, ...)

Alert thresholds:
- WARN: retry rate > 10% of total requests
- CRITICAL: retry rate > 30% of total requests
"""

http_retry_exhausted_total = Counter(
    "http_retry_exhausted_total",
    "Failures propagated to the caller without a further retry",
    ["method", "reason"],
)
"""
Terminal failures counter.

Labels:
- method: HTTP method (unknown when the failure carries no request)
- reason: max_retries (retry budget spent), condition (retry_condition
  rejected the failure), no_request (failure carries no request to replay)
"""

# === Delay Metrics ===

http_retry_delay_seconds = Histogram(
    "http_retry_delay_seconds",
    "Delay applied before each retry in seconds",
    buckets=[0.0, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)
"""
Retry delay histogram.

Buckets cover immediate retries up to one minute of backoff.
"""
