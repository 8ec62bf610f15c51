"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    LOGIN_COUNTER,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    STAGE_LATENCY,
    TURN_OUTCOMES,
    increment_login,
    observe_request,
    observe_stage,
    record_turn_outcome,
)

__all__ = [
    "ERROR_COUNTER",
    "LOGIN_COUNTER",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "STAGE_LATENCY",
    "TURN_OUTCOMES",
    "increment_login",
    "observe_request",
    "observe_stage",
    "record_turn_outcome",
]
