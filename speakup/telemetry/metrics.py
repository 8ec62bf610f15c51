"""Prometheus metric definitions for HTTP traffic and answer turns."""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Iterator

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

ERROR_COUNTER = Counter(
    "speakup_internal_errors_total",
    "Requests that ended in a 5xx response",
    ("method", "route"),
)

LOGIN_COUNTER = Counter(
    "speakup_logins_total",
    "Successful login events",
)

TURN_OUTCOMES = Counter(
    "turn_outcomes_total",
    "Answer turns by terminal outcome",
    ("outcome",),
)

# Vendor round trips dominate, so the buckets reach into minutes.
STAGE_LATENCY = Histogram(
    "turn_stage_duration_seconds",
    "Duration of each answer turn stage in seconds",
    ("stage",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0, 300.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    observed_duration = max(duration_seconds, 0)

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=str(status_code),
    ).inc()
    REQUEST_LATENCY.labels(method=safe_method, route=safe_route).observe(
        observed_duration
    )

    if status_code >= 500:
        ERROR_COUNTER.labels(method=safe_method, route=safe_route).inc()


def increment_login() -> None:
    LOGIN_COUNTER.inc()


def record_turn_outcome(outcome: str) -> None:
    TURN_OUTCOMES.labels(outcome=outcome or "unknown").inc()


@contextmanager
def observe_stage(stage: str) -> Iterator[None]:
    """Time the wrapped block into ``turn_stage_duration_seconds``."""

    started = time.perf_counter()
    try:
        yield
    finally:
        STAGE_LATENCY.labels(stage=stage).observe(time.perf_counter() - started)
