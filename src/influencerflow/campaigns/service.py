"""Campaign, application and recommendation operations."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from pydantic import ValidationError

from influencerflow.auth.session import AuthUser
from influencerflow.campaigns.demo import (
    demo_applications,
    demo_campaign,
    demo_collaborations,
    is_uuid,
)
from influencerflow.campaigns.models import ApplicationCreate, CampaignCreate, RecommendationUpdate
from influencerflow.domain.errors import (
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
    first_validation_message,
)
from influencerflow.domain.types import CampaignStatus, UserType
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.collaborations import CollaborationStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.schema import Database

logger = structlog.get_logger()

CAMPAIGN_OBJECTIVE = "Brand awareness and engagement"

UNKNOWN_BRAND = {
    "company_name": "Unknown Company",
    "industry": "Unknown",
    "location": "Unknown",
    "website": "",
    "description": "",
}

UNKNOWN_USER = {"full_name": "Unknown User", "avatar_url": None}

_RECOMMENDATION_PROFILE_FIELDS = (
    "user_id",
    "display_name",
    "niche",
    "follower_count_instagram",
    "follower_count_youtube",
    "follower_count_tiktok",
    "engagement_rate",
    "rate_per_post",
    "users",
)


def unknown_creator_profile() -> dict[str, Any]:
    """Placeholder profile for recommendations whose creator has none."""
    return {
        "display_name": "Unknown Creator",
        "niche": [],
        "follower_count_instagram": 0,
        "follower_count_youtube": 0,
        "follower_count_tiktok": 0,
        "engagement_rate": 0,
        "rate_per_post": 0,
        "users": {"full_name": "Unknown Creator", "avatar_url": None},
    }


def _present_campaign(campaign: dict[str, Any]) -> dict[str, Any]:
    """Flatten stored JSON columns into the shapes the dashboard renders."""
    requirements = campaign.get("requirements")
    if not isinstance(requirements, list):
        requirements = (requirements or {}).get("list") or (requirements or {}).get("niches") or []
    deliverables = campaign.get("deliverables")
    target_audience = campaign.get("target_audience")
    if not isinstance(target_audience, str):
        target_audience = (target_audience or {}).get("description") or "General audience"
    return {
        **campaign,
        "requirements": requirements,
        "deliverables": deliverables if isinstance(deliverables, list) else [],
        "target_audience": target_audience,
    }


class CampaignService:
    """Read and write campaigns and the records hanging off them.

    Non-UUID campaign ids resolve to demo fixtures when *demo_mode* is set.
    """

    def __init__(
        self,
        db: Database,
        campaigns: CampaignStore,
        directory: DirectoryStore,
        collaborations: CollaborationStore,
        demo_mode: bool = False,
    ) -> None:
        self._db = db
        self._campaigns = campaigns
        self._directory = directory
        self._collaborations = collaborations
        self._demo_mode = demo_mode

    def _is_demo(self, campaign_id: str) -> bool:
        return self._demo_mode and not is_uuid(campaign_id)

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def list_campaigns(self, *, status: str | None = None) -> list[dict[str, Any]]:
        """Campaigns newest first, each with ``brand_profiles`` (or ``None``)."""
        campaigns = self._campaigns.list_all(status=status)
        profiles = self._directory.brand_profiles_for(c["brand_id"] for c in campaigns)
        return [{**c, "brand_profiles": profiles.get(c["brand_id"])} for c in campaigns]

    def create_campaign(self, user: AuthUser, body: dict[str, Any]) -> dict[str, Any]:
        """Create an active campaign owned by the calling brand user.

        Raises:
            PermissionDeniedError: If ``brand_id`` names someone else or the
                caller is not a brand.
            ValidationFailedError: If a creation rule fails.
        """
        brand_id = body.get("brand_id")
        if brand_id and brand_id != user.id:
            raise PermissionDeniedError("Forbidden - can only create campaigns for your own brand")

        account = self._directory.get_user(user.id)
        if account is None or account["user_type"] != UserType.BRAND:
            raise PermissionDeniedError("Only brand users can create campaigns")

        try:
            request = CampaignCreate.model_validate(body)
        except ValidationError as exc:
            raise ValidationFailedError(first_validation_message(exc)) from None

        campaign = self._campaigns.create(
            brand_id=user.id,
            title=request.title.strip(),
            description=request.description.strip(),
            budget_min=float(request.budget_min),
            budget_max=float(request.budget_max),
            timeline_start=request.timeline_start,
            timeline_end=request.timeline_end,
            target_audience={"description": request.target_audience, "niches": request.niches},
            requirements={"niches": request.niches, "list": request.requirements},
            deliverables=request.deliverables,
            objective=CAMPAIGN_OBJECTIVE,
            status=CampaignStatus.ACTIVE,
        )
        logger.info("campaign_created", campaign_id=campaign["id"], brand_id=user.id)
        return campaign

    def get_campaign(self, campaign_id: str) -> dict[str, Any]:
        """A campaign with its brand profile.

        Raises:
            NotFoundError: If neither the store nor the demo fixtures know the id.
        """
        if self._is_demo(campaign_id):
            campaign = demo_campaign(campaign_id)
            if campaign is None:
                raise NotFoundError("Campaign", campaign_id)
            return campaign

        campaign = self._campaigns.get(campaign_id)
        if campaign is None:
            raise NotFoundError("Campaign", campaign_id)
        brand_profile = self._directory.get_brand_profile(campaign["brand_id"])
        presented = _present_campaign(campaign)
        presented["brand_profiles"] = brand_profile or dict(UNKNOWN_BRAND)
        return presented

    def collaborations_for(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's collaborations with creator display name and user."""
        if self._is_demo(campaign_id):
            return demo_collaborations(campaign_id)

        collaborations = self._collaborations.list_for_campaign(campaign_id)
        cards = self._directory.creator_cards(c["creator_id"] for c in collaborations)
        enriched: list[dict[str, Any]] = []
        for collaboration in collaborations:
            card = cards.get(collaboration["creator_id"]) or {}
            enriched.append(
                {
                    **collaboration,
                    "creator_profiles": {
                        "display_name": card.get("display_name") or "Unknown Creator",
                        "users": card.get("users") or dict(UNKNOWN_USER),
                    },
                }
            )
        return enriched

    def applications_for(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's applications with the full creator profile."""
        if self._is_demo(campaign_id):
            return demo_applications(campaign_id)

        applications = self._campaigns.list_applications(campaign_id=campaign_id)
        cards = self._directory.creator_cards(a["creator_id"] for a in applications)
        enriched: list[dict[str, Any]] = []
        for application in applications:
            card = dict(cards.get(application["creator_id"]) or {})
            card["niche"] = card.get("niche") or []
            card["users"] = card.get("users") or dict(UNKNOWN_USER)
            enriched.append({**application, "creator_profiles": card})
        return enriched

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def recommendations_for(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's creator recommendations with creator profiles."""
        recommendations = self._campaigns.list_recommendations(campaign_id)
        cards = self._directory.creator_cards(r["creator_id"] for r in recommendations)
        enriched: list[dict[str, Any]] = []
        for recommendation in recommendations:
            card = cards.get(recommendation["creator_id"])
            if card is None or card.get("display_name") is None:
                profile = unknown_creator_profile()
            else:
                profile = {field: card.get(field) for field in _RECOMMENDATION_PROFILE_FIELDS}
            enriched.append({**recommendation, "creator_profiles": profile})
        return enriched

    def set_recommendation_status(
        self, recommendation_id: str, update: RecommendationUpdate
    ) -> dict[str, Any]:
        """Set a recommendation's review status.

        Raises:
            NotFoundError: If the recommendation does not exist.
        """
        with self._db.transaction():
            if not self._campaigns.set_recommendation_status(recommendation_id, update.status):
                raise NotFoundError("Recommendation", recommendation_id)
            recommendation = self._campaigns.get_recommendation(recommendation_id)
        logger.info(
            "recommendation_status_updated",
            recommendation_id=recommendation_id,
            status=str(update.status),
        )
        return {
            "success": True,
            "message": "Recommendation status updated successfully",
            "data": recommendation,
        }

    # ------------------------------------------------------------------
    # Opportunities and applications
    # ------------------------------------------------------------------

    def opportunities(self, creator_id: str | None) -> list[dict[str, Any]]:
        """Active campaigns with ``hasApplied`` for *creator_id*."""
        campaigns = self.list_campaigns(status=CampaignStatus.ACTIVE)
        applied = self._campaigns.applied_campaign_ids(creator_id) if creator_id else set()
        return [{**c, "hasApplied": c["id"] in applied} for c in campaigns]

    def apply(self, user: AuthUser, body: ApplicationCreate) -> dict[str, Any]:
        """Submit the caller's application to a campaign.

        Raises:
            NotFoundError: If the campaign does not exist.
            ValidationFailedError: If the caller has already applied.
        """
        with self._db.transaction():
            campaign = self._campaigns.get(body.campaign_id)
            if campaign is None:
                raise NotFoundError("Campaign", body.campaign_id)
            if self._campaigns.find_application(body.campaign_id, user.id) is not None:
                raise ValidationFailedError("You have already applied to this campaign")
            try:
                application = self._campaigns.create_application(
                    campaign_id=body.campaign_id,
                    creator_id=user.id,
                    proposal_text=body.proposal_text,
                    proposed_rate=body.proposed_rate,
                )
            except sqlite3.IntegrityError:
                raise ValidationFailedError("You have already applied to this campaign") from None

        profile = self._directory.get_creator_profile(user.id)
        logger.info("application_submitted", campaign_id=body.campaign_id, creator_id=user.id)
        return {
            **application,
            "campaigns": {"title": campaign["title"], "brand_id": campaign["brand_id"]},
            "creator_profiles": {"display_name": profile["display_name"]} if profile else None,
        }

    def list_applications(
        self, *, creator_id: str | None = None, campaign_id: str | None = None
    ) -> list[dict[str, Any]]:
        """Applications with campaign summary and creator name, newest first."""
        applications = self._campaigns.list_applications(
            creator_id=creator_id, campaign_id=campaign_id
        )
        cards = self._directory.creator_cards(a["creator_id"] for a in applications)
        campaigns: dict[str, dict[str, Any] | None] = {}
        for application in applications:
            if application["campaign_id"] not in campaigns:
                campaigns[application["campaign_id"]] = self._campaigns.get(
                    application["campaign_id"]
                )
        brands = self._directory.brand_profiles_for(
            c["brand_id"] for c in campaigns.values() if c is not None
        )

        enriched: list[dict[str, Any]] = []
        for application in applications:
            campaign = campaigns[application["campaign_id"]]
            card = cards.get(application["creator_id"])
            brand = brands.get(campaign["brand_id"]) if campaign else None
            enriched.append(
                {
                    **application,
                    "campaigns": (
                        {
                            "title": campaign["title"],
                            "description": campaign["description"],
                            "budget_min": campaign["budget_min"],
                            "budget_max": campaign["budget_max"],
                            "timeline_start": campaign["timeline_start"],
                            "timeline_end": campaign["timeline_end"],
                            "brand_profiles": (
                                {"company_name": brand["company_name"]} if brand else None
                            ),
                        }
                        if campaign
                        else None
                    ),
                    "creator_profiles": (
                        {"display_name": card.get("display_name"), "users": card["users"]}
                        if card
                        else None
                    ),
                }
            )
        return enriched

    def creators(self) -> list[dict[str, Any]]:
        """Creator profiles with their user, most Instagram followers first."""
        return self._directory.list_creators()
