"""Dashboard statistics, recent campaigns and payment summaries."""

from __future__ import annotations

from typing import Any

from influencerflow.dashboard.demo import (
    DEMO_USER_ID,
    demo_recent_campaigns,
    demo_stats,
)
from influencerflow.domain.types import CampaignStatus, UserType
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.collaborations import CollaborationStore
from influencerflow.store.directory import DirectoryStore

# Placeholder until campaign performance is tracked
AVERAGE_ROI = 4.2

RECENT_ITEMS = 5
RECENT_CAMPAIGN_LIMIT = 10


def payment_stats(payments: list[dict[str, Any]], user_id: str) -> dict[str, Any]:
    """Earnings, spend and status counts from the user's point of view.

    Completed payments count toward earnings when the user is the recipient
    and toward spend otherwise.
    """
    stats: dict[str, Any] = {
        "totalEarnings": 0.0,
        "totalSpent": 0.0,
        "pendingPayments": 0,
        "completedPayments": 0,
    }
    for payment in payments:
        if payment["status"] == "completed":
            stats["completedPayments"] += 1
            key = "totalEarnings" if payment["recipient_id"] == user_id else "totalSpent"
            stats[key] += float(payment["amount"])
        elif payment["status"] == "pending":
            stats["pendingPayments"] += 1
    return stats


class DashboardService:
    """Read-only aggregates for the brand and creator dashboards."""

    def __init__(
        self,
        campaigns: CampaignStore,
        collaborations: CollaborationStore,
        directory: DirectoryStore,
        demo_mode: bool = False,
    ) -> None:
        self._campaigns = campaigns
        self._collaborations = collaborations
        self._directory = directory
        self._demo_mode = demo_mode

    def _is_demo(self, user_id: str) -> bool:
        return self._demo_mode and user_id == DEMO_USER_ID

    def stats(self, user_id: str, user_type: UserType) -> dict[str, Any]:
        if self._is_demo(user_id):
            return demo_stats(user_type.value)
        if user_type == UserType.BRAND:
            return self._brand_stats(user_id)
        return self._creator_stats(user_id)

    def _brand_stats(self, brand_id: str) -> dict[str, Any]:
        campaigns = self._campaigns.list_for_brand(brand_id)
        collaborations = self._collaborations.list_for_brand(brand_id)
        return {
            "activeCampaigns": sum(1 for c in campaigns if c["status"] == CampaignStatus.ACTIVE),
            "totalCreators": len({c["creator_id"] for c in collaborations}),
            "totalSpent": self._collaborations.completed_total(payer_id=brand_id),
            "avgROI": AVERAGE_ROI,
            "campaigns": [
                {
                    "id": c["id"],
                    "status": c["status"],
                    "budget_max": c["budget_max"],
                    "applications_count": c["applications_count"],
                }
                for c in campaigns[:RECENT_ITEMS]
            ],
        }

    def _creator_stats(self, creator_id: str) -> dict[str, Any]:
        collaborations = self._collaborations.list_for_creator(creator_id)
        applications = self._campaigns.list_applications(creator_id=creator_id)
        return {
            "activeCampaigns": sum(1 for c in collaborations if c["status"] == "active"),
            "totalEarnings": self._collaborations.completed_total(recipient_id=creator_id),
            "pendingApplications": sum(1 for a in applications if a["status"] == "pending"),
            "completedProjects": sum(1 for c in collaborations if c["status"] == "completed"),
            "recentCollaborations": collaborations[:RECENT_ITEMS],
        }

    def recent_campaigns(self, user_id: str, user_type: str) -> list[dict[str, Any]]:
        """The newest campaigns (a brand's own only) with collaboration counts."""
        if self._is_demo(user_id):
            return demo_recent_campaigns()

        brand_id = user_id if user_type == UserType.BRAND else None
        campaigns = self._campaigns.list_recent(brand_id=brand_id, limit=RECENT_CAMPAIGN_LIMIT)
        brands = self._directory.brand_profiles_for(c["brand_id"] for c in campaigns)

        recent = []
        for campaign in campaigns:
            collaborations = self._collaborations.list_for_campaign(campaign["id"])
            brand = brands.get(campaign["brand_id"])
            recent.append(
                {
                    **campaign,
                    "brand_profiles": {"company_name": brand["company_name"]} if brand else None,
                    "activeCollaborations": sum(
                        1 for c in collaborations if c["status"] == "active"
                    ),
                    "totalCollaborations": len(collaborations),
                }
            )
        return recent

    def payments(self, user_id: str) -> dict[str, Any]:
        payments = self._collaborations.list_payments_for_user(user_id)
        return {"payments": payments, "stats": payment_stats(payments, user_id)}
