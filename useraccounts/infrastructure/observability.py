# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_LATENCY = Histogram(
    "useraccounts_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10),
)
REQUEST_COUNTER = Counter(
    "useraccounts_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
SESSION_EVENTS = Counter(
    "useraccounts_session_events_total",
    "Session token lifecycle events",
    labelnames=("event",),
)

_enabled = True


def configure_metrics(enabled: bool) -> None:
    """Switch every collector below on or off for the whole process."""
    global _enabled
    _enabled = enabled


def metrics_enabled() -> bool:
    return _enabled


def observe_request(endpoint: str, status: int, duration: float) -> None:
    if not _enabled:
        return
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def record_session_event(event: str) -> None:
    if not _enabled:
        return
    SESSION_EVENTS.labels(event=event).inc()


__all__ = [
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "SESSION_EVENTS",
    "configure_metrics",
    "metrics_enabled",
    "observe_request",
    "record_session_event",
]
