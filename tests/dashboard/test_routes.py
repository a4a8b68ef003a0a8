"""Tests for the dashboard and payments routes."""

import pytest


class TestStatsRoute:
    def test_brand_stats(self, client, brand, campaign):
        response = client.get(
            "/api/dashboard/stats", params={"userId": brand["id"], "userType": "brand"}
        )

        assert response.status_code == 200
        assert response.json()["activeCampaigns"] == 1

    @pytest.mark.parametrize(
        "params",
        [{}, {"userId": "u1"}, {"userType": "brand"}],
    )
    def test_missing_params(self, client, params):
        response = client.get("/api/dashboard/stats", params=params)

        assert response.status_code == 400
        assert response.json()["detail"] == "User ID and user type are required"

    def test_invalid_user_type(self, client):
        response = client.get("/api/dashboard/stats", params={"userId": "u1", "userType": "admin"})

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid user type"

    def test_demo_mode(self, make_client):
        demo_client = make_client(demo_mode=True)
        response = demo_client.get(
            "/api/dashboard/stats", params={"userId": "demo-user-id", "userType": "creator"}
        )

        assert response.json()["totalEarnings"] == 3500


class TestRecentCampaignsRoute:
    def test_lists_campaigns(self, client, brand, campaign):
        response = client.get(
            "/api/dashboard/recent-campaigns",
            params={"userId": brand["id"], "userType": "brand"},
        )

        assert response.status_code == 200
        assert [c["title"] for c in response.json()] == ["Summer Glow Launch"]

    def test_missing_params_return_empty(self, client):
        response = client.get("/api/dashboard/recent-campaigns")

        assert response.status_code == 200
        assert response.json() == []


class TestPaymentsRoute:
    def test_lists_payments(self, client, services, brand, creator):
        services["collaborations"].create_payment(
            payer_id=brand["id"], recipient_id=creator["id"], amount=300, status="completed"
        )

        response = client.get("/api/payments", params={"userId": brand["id"]})

        assert response.status_code == 200
        body = response.json()
        assert len(body["payments"]) == 1
        assert body["stats"]["totalSpent"] == 300.0

    def test_requires_user_id(self, client):
        response = client.get("/api/payments")

        assert response.status_code == 400
        assert response.json()["detail"] == "User ID is required"
