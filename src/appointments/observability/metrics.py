"""Prometheus metrics instrumentation for the appointment service.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus custom business counters.
- ``INQUIRIES_SUBMITTED``: Counter of stored inquiries, by kind.
- ``TRANSITIONS_APPLIED``: Counter of persisted negotiation transitions.
- ``ACTIONS_REFUSED``: Counter of refused submissions and actions, by error code.

Business metrics are updated where the events happen (not by polling the database).
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

INQUIRIES_SUBMITTED: Counter = Counter(
    "appointment_inquiries_submitted_total",
    "Total number of inquiries stored by the submission gate",
    ["kind"],
)

TRANSITIONS_APPLIED: Counter = Counter(
    "appointment_transitions_total",
    "Total number of negotiation transitions persisted",
    ["action", "to_status"],
)

ACTIONS_REFUSED: Counter = Counter(
    "appointment_actions_refused_total",
    "Total number of submissions and actions refused, by error code",
    ["code"],
)


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    Excludes health/ready/metrics endpoints from instrumentation to avoid
    noise in dashboards.

    Args:
        app: The FastAPI application to instrument.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
