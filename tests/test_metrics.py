"""Tests for Prometheus metrics endpoint and custom business metrics."""

from __future__ import annotations

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from influencerflow.observability.metrics import (
    CONTRACTS_GENERATED,
    OUTREACH_SENT,
    setup_metrics,
)


@pytest.fixture()
def metrics_app() -> FastAPI:
    """Create a minimal FastAPI app with Prometheus instrumentation."""
    app = FastAPI()

    @app.get("/hello")
    async def hello():
        return {"msg": "hello"}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/ready")
    async def ready():
        return {"status": "ready"}

    setup_metrics(app)
    return app


@pytest.fixture()
def metrics_client(metrics_app: FastAPI) -> TestClient:
    """TestClient for the metrics-enabled app."""
    return TestClient(metrics_app)


def test_metrics_endpoint_returns_prometheus_format(metrics_client: TestClient) -> None:
    """GET /metrics returns 200 with Prometheus-format text containing expected metrics."""
    metrics_client.get("/hello")
    resp = metrics_client.get("/metrics")
    assert resp.status_code == 200
    body = resp.text
    assert "http_request" in body
    assert "influencerflow_contracts_generated_total" in body
    assert "influencerflow_contracts_executed_total" in body


def test_excluded_handlers_not_in_metrics(metrics_client: TestClient) -> None:
    """/health and /ready do NOT appear as handler labels."""
    metrics_client.get("/health")
    metrics_client.get("/ready")
    body = metrics_client.get("/metrics").text
    lines = [
        line
        for line in body.splitlines()
        if "http_request_duration" in line and 'handler="' in line
    ]
    for line in lines:
        assert '/health"' not in line, f"/health found in metrics: {line}"
        assert '/ready"' not in line, f"/ready found in metrics: {line}"


def test_contracts_generated_counter_increments(metrics_client: TestClient) -> None:
    initial_value = _extract_value(
        metrics_client.get("/metrics").text, "influencerflow_contracts_generated_total"
    )

    CONTRACTS_GENERATED.inc()

    new_value = _extract_value(
        metrics_client.get("/metrics").text, "influencerflow_contracts_generated_total"
    )
    assert new_value == initial_value + 1.0


def test_outreach_counter_is_labelled(metrics_client: TestClient) -> None:
    OUTREACH_SENT.labels(channel="in_app", status="delivered").inc()

    body = metrics_client.get("/metrics").text

    assert 'influencerflow_outreach_sent_total{channel="in_app",status="delivered"}' in body


def test_outreach_send_updates_counter(
    client: TestClient, brand_headers, campaign, creator
) -> None:
    sample = 'influencerflow_outreach_sent_total{channel="in_app",status="delivered"}'
    before = _extract_value(client.get("/metrics").text, sample)

    client.post(
        "/api/outreach/send",
        json={
            "campaignId": campaign["id"],
            "creatorId": creator["id"],
            "channel": "in_app",
            "subject": "Hi",
            "message": "Hello",
        },
        headers=brand_headers,
    )

    assert _extract_value(client.get("/metrics").text, sample) == before + 1.0


def _extract_value(text: str, sample: str) -> float:
    """Extract the numeric value of a sample from Prometheus text output (0 if absent)."""
    for line in text.splitlines():
        name, _, value = line.rpartition(" ")
        if name == sample:
            return float(value)
    return 0.0
