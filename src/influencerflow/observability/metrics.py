"""Prometheus metrics instrumentation for the InfluencerFlow API.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus business counters.
- ``CONTRACTS_GENERATED``: Contracts created from agreed negotiations.
- ``CONTRACTS_EXECUTED``: Contracts reaching the fully executed state.
- ``OUTREACH_SENT``: Outreach attempts by channel and delivery status.
- ``EMAIL_EVENTS``: Email provider webhook events by type.

Business metrics are updated where the event happens (not by polling the database).
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

CONTRACTS_GENERATED: Counter = Counter(
    "influencerflow_contracts_generated_total",
    "Total number of contracts generated from agreed negotiations",
)

CONTRACTS_EXECUTED: Counter = Counter(
    "influencerflow_contracts_executed_total",
    "Total number of contracts signed by both parties",
)

OUTREACH_SENT: Counter = Counter(
    "influencerflow_outreach_sent_total",
    "Outreach messages attempted, by channel and delivery status",
    ["channel", "status"],
)

EMAIL_EVENTS: Counter = Counter(
    "influencerflow_email_events_total",
    "Email provider webhook events received, by event type",
    ["type"],
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
