"""Prometheus metrics for git-editor.

Three families, all in the default registry and exposed by ``GET /metrics``:

- ``git_editor_http_*``: the browser-facing API, labelled by route
  template so owner/repo/path never become label values.
- ``git_editor_upstream_*``: calls made to the hosting provider, by
  client operation (``get_file``, ``update_file``...).
- session and commit counters.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Upstream calls are slower than local handling; buckets reach the 30s timeout.
_HTTP_BUCKETS = (0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)
_UPSTREAM_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)

HTTP_REQUESTS_TOTAL = Counter(
    "git_editor_http_requests_total",
    "Browser-facing requests by method, route template and status.",
    labelnames=["method", "route", "status"],
)
HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "git_editor_http_request_duration_seconds",
    "Browser-facing request latency, including upstream round trips.",
    labelnames=["method", "route"],
    buckets=_HTTP_BUCKETS,
)
HTTP_REQUESTS_IN_FLIGHT = Gauge(
    "git_editor_http_requests_in_flight",
    "Browser-facing requests currently being handled.",
)

UPSTREAM_REQUESTS_TOTAL = Counter(
    "git_editor_upstream_requests_total",
    "Upstream API calls by client operation and response status.",
    labelnames=["operation", "status"],
)
UPSTREAM_REQUEST_DURATION_SECONDS = Histogram(
    "git_editor_upstream_request_duration_seconds",
    "Upstream API call latency in seconds.",
    labelnames=["operation"],
    buckets=_UPSTREAM_BUCKETS,
)

SESSIONS_ACTIVE = Gauge(
    "git_editor_sessions_active",
    "Live sessions held by the session store.",
)
SESSIONS_EVICTED_TOTAL = Counter(
    "git_editor_sessions_evicted_total",
    "Sessions removed by the expiry sweep.",
)

COMMIT_OPERATIONS_TOTAL = Counter(
    "git_editor_commit_operations_total",
    "File operations executed by the commit orchestrator.",
    labelnames=["operation", "outcome"],
)


def metrics_text() -> tuple[bytes, str]:
    """Exposition body and its content type."""
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
