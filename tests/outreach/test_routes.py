"""Tests for the outreach and reply-analysis routes."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def send_body(campaign, creator) -> dict[str, Any]:
    return {
        "campaignId": campaign["id"],
        "creatorId": creator["id"],
        "channel": "in_app",
        "subject": "Summer Glow collaboration",
        "message": "Hi Maya!",
    }


class TestSendOutreach:
    def test_in_app(self, client: TestClient, brand_headers, send_body, services, creator) -> None:
        response = client.post("/api/outreach/send", json=send_body, headers=brand_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["delivery_status"] == "delivered"
        assert body["message_id"].startswith("in_app_")
        assert body["message"] == "Outreach sent successfully"
        assert len(services["messages"].list_for_user(creator["id"])) == 1

    def test_email_without_provider_is_logged_as_failed(
        self, client: TestClient, brand_headers, send_body
    ) -> None:
        send_body["channel"] = "email"
        response = client.post("/api/outreach/send", json=send_body, headers=brand_headers)

        assert response.status_code == 200
        assert response.json()["delivery_status"] == "failed"

    def test_requires_auth(self, client: TestClient, send_body) -> None:
        assert client.post("/api/outreach/send", json=send_body).status_code == 401

    def test_missing_fields(self, client: TestClient, brand_headers, send_body) -> None:
        del send_body["message"]
        response = client.post("/api/outreach/send", json=send_body, headers=brand_headers)

        assert response.status_code == 400
        assert response.json() == {"detail": "Missing required fields", "code": "VALIDATION_FAILED"}

    def test_unknown_channel(self, client: TestClient, brand_headers, send_body) -> None:
        send_body["channel"] = "fax"
        response = client.post("/api/outreach/send", json=send_body, headers=brand_headers)
        assert response.status_code == 400

    def test_unknown_creator(self, client: TestClient, brand_headers, send_body) -> None:
        send_body["creatorId"] = "nobody"
        response = client.post("/api/outreach/send", json=send_body, headers=brand_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "Creator not found"


class TestGenerateOutreach:
    def test_renders_message(self, client: TestClient, brand_headers) -> None:
        response = client.post(
            "/api/ai/generate-outreach",
            json={
                "creatorName": "Maya",
                "creatorNiche": "beauty",
                "campaignTitle": "Summer Glow Launch",
                "campaignDescription": "Skincare launch",
                "recommendedBudget": 1200,
                "deliverables": ["instagram_post"],
                "confidenceScore": 0.87,
                "matchReasoning": "Strong beauty audience.",
            },
            headers=brand_headers,
        )

        assert response.status_code == 200
        message = response.json()["message"]
        assert message.startswith("Hi Maya,")
        assert "We're offering $1,200 for creating instagram_post." in message
        assert "Strong beauty audience." in message
        assert "87% match" in message

    def test_requires_auth(self, client: TestClient) -> None:
        assert client.post("/api/ai/generate-outreach", json={}).status_code == 401


class TestAnalyzeResponse:
    def test_opens_negotiation(self, client: TestClient, services, campaign, creator) -> None:
        reply = services["communications"].insert(
            channel="email",
            direction="inbound",
            message_type="reply",
            subject="Re: collaboration",
            content="Very interested! $2,000 for 2 posts and a reel within 3 weeks.",
            campaign_id=campaign["id"],
            creator_id=creator["id"],
        )

        response = client.post(
            "/api/ai/analyze-response",
            json={"communicationId": reply["id"], "campaignBudget": {"min": 1000, "max": 3000}},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["requires_negotiation"] is True
        assert body["analysis"]["interest_level"] == "high"
        assert body["analysis"]["extracted_terms"]["total_rate"] == 2000
        assert body["analysis"]["extracted_terms"]["timeline"] == "3 weeks"
        assert services["negotiations"].get(body["negotiation_id"]) is not None

    def test_unknown_communication(self, client: TestClient) -> None:
        response = client.post("/api/ai/analyze-response", json={"communicationId": "missing"})

        assert response.status_code == 404
        assert response.json()["detail"] == "Communication not found"

    def test_missing_communication_id(self, client: TestClient) -> None:
        assert client.post("/api/ai/analyze-response", json={}).status_code == 400
