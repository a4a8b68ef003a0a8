"""Tests for dashboard aggregates."""

from __future__ import annotations

from typing import Any

import pytest

from influencerflow.dashboard.demo import DEMO_USER_ID
from influencerflow.dashboard.stats import AVERAGE_ROI, DashboardService, payment_stats
from influencerflow.domain.types import UserType


def test_payment_stats_from_each_side() -> None:
    payments = [
        {"status": "completed", "recipient_id": "creator", "amount": 500},
        {"status": "completed", "recipient_id": "other", "amount": 200.5},
        {"status": "pending", "recipient_id": "creator", "amount": 100},
        {"status": "failed", "recipient_id": "creator", "amount": 999},
    ]

    assert payment_stats(payments, "creator") == {
        "totalEarnings": 500.0,
        "totalSpent": 200.5,
        "pendingPayments": 1,
        "completedPayments": 2,
    }


def test_payment_stats_empty() -> None:
    assert payment_stats([], "u") == {
        "totalEarnings": 0.0,
        "totalSpent": 0.0,
        "pendingPayments": 0,
        "completedPayments": 0,
    }


@pytest.fixture
def collaboration(services, campaign, brand, creator) -> dict[str, Any]:
    collaborations = services["collaborations"]
    collaboration = collaborations.create(
        campaign_id=campaign["id"],
        creator_id=creator["id"],
        brand_id=brand["id"],
        contract_id=None,
        agreed_rate=2000,
        total_deliverables=2,
    )
    collaborations.create_payment(
        payer_id=brand["id"],
        recipient_id=creator["id"],
        amount=1200,
        collaboration_id=collaboration["id"],
        status="completed",
    )
    collaborations.create_payment(
        payer_id=brand["id"],
        recipient_id=creator["id"],
        amount=800,
        collaboration_id=collaboration["id"],
    )
    return collaboration


class TestStats:
    def test_brand(self, services, brand, campaign, collaboration) -> None:
        stats = services["dashboard_service"].stats(brand["id"], UserType.BRAND)

        assert stats["activeCampaigns"] == 1
        assert stats["totalCreators"] == 1
        assert stats["totalSpent"] == 1200.0
        assert stats["avgROI"] == AVERAGE_ROI
        assert stats["campaigns"] == [
            {
                "id": campaign["id"],
                "status": "active",
                "budget_max": 3000,
                "applications_count": 0,
            }
        ]

    def test_creator(self, services, creator, campaign, collaboration) -> None:
        services["campaigns"].create_application(
            campaign_id=campaign["id"],
            creator_id=creator["id"],
            proposal_text="Pick me",
            proposed_rate=900,
        )

        stats = services["dashboard_service"].stats(creator["id"], UserType.CREATOR)

        assert stats["activeCampaigns"] == 1
        assert stats["totalEarnings"] == 1200.0
        assert stats["pendingApplications"] == 1
        assert stats["completedProjects"] == 0
        assert stats["recentCollaborations"][0]["campaigns"] == {"title": "Summer Glow Launch"}

    def test_new_user_has_zeroes(self, services) -> None:
        stats = services["dashboard_service"].stats("nobody", UserType.BRAND)
        assert stats["activeCampaigns"] == 0
        assert stats["totalSpent"] == 0.0
        assert stats["campaigns"] == []

    def test_demo_user_in_demo_mode(self, services) -> None:
        dashboard = DashboardService(
            services["campaigns"],
            services["collaborations"],
            services["directory"],
            demo_mode=True,
        )
        assert dashboard.stats(DEMO_USER_ID, UserType.BRAND)["totalSpent"] == 15000
        assert dashboard.recent_campaigns(DEMO_USER_ID, "brand")[0]["id"] == "demo-campaign-1"

    def test_demo_user_without_demo_mode(self, services) -> None:
        stats = services["dashboard_service"].stats(DEMO_USER_ID, UserType.BRAND)
        assert stats["totalSpent"] == 0.0


class TestRecentCampaigns:
    def test_brand_sees_own_campaigns(self, services, brand, campaign, collaboration) -> None:
        other = services["directory"].create_user(
            email="other@example.com", full_name="Other", user_type="brand"
        )
        services["campaigns"].create(
            brand_id=other["id"],
            title="Other campaign",
            description="",
            budget_min=100,
            budget_max=200,
            timeline_start=None,
            timeline_end=None,
        )

        recent = services["dashboard_service"].recent_campaigns(brand["id"], "brand")

        assert [c["id"] for c in recent] == [campaign["id"]]
        assert recent[0]["brand_profiles"] == {"company_name": "Glow Cosmetics"}
        assert recent[0]["activeCollaborations"] == 1
        assert recent[0]["totalCollaborations"] == 1

    def test_creator_sees_all_campaigns(self, services, creator, campaign) -> None:
        recent = services["dashboard_service"].recent_campaigns(creator["id"], "creator")
        assert [c["id"] for c in recent] == [campaign["id"]]
        assert recent[0]["totalCollaborations"] == 0


def test_payments(services, brand, creator, collaboration) -> None:
    result = services["dashboard_service"].payments(creator["id"])

    assert len(result["payments"]) == 2
    assert result["payments"][0]["payer"] == {"full_name": "Brand Owner", "user_type": "brand"}
    assert result["payments"][0]["collaborations"] == {
        "campaigns": {"title": "Summer Glow Launch"}
    }
    assert result["stats"]["totalEarnings"] == 1200.0
    assert result["stats"]["pendingPayments"] == 1
