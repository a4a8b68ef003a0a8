"""Request bodies for outreach and reply-analysis routes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from influencerflow.domain.types import Channel

_REQUIRED_SEND_FIELDS = (
    ("campaignId", "campaign_id"),
    ("creatorId", "creator_id"),
    ("channel", "channel"),
    ("message", "message"),
)


class SendOutreachRequest(BaseModel):
    """Body of ``POST /api/outreach/send``."""

    model_config = ConfigDict(populate_by_name=True)

    campaign_id: str = Field(alias="campaignId")
    creator_id: str = Field(alias="creatorId")
    channel: Channel
    subject: str = ""
    message: str
    recommendation_id: str | None = Field(default=None, alias="recommendationId")

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and not all(
            data.get(alias) or data.get(name) for alias, name in _REQUIRED_SEND_FIELDS
        ):
            raise ValueError("Missing required fields")
        return data


class GenerateOutreachRequest(BaseModel):
    """Body of ``POST /api/ai/generate-outreach``."""

    model_config = ConfigDict(populate_by_name=True)

    creator_name: str = Field(default="", alias="creatorName")
    creator_niche: str = Field(default="", alias="creatorNiche")
    campaign_title: str = Field(default="", alias="campaignTitle")
    campaign_description: str = Field(default="", alias="campaignDescription")
    recommended_budget: float | None = Field(default=None, alias="recommendedBudget")
    deliverables: list[str] | None = None
    confidence_score: float | None = Field(default=None, alias="confidenceScore")
    match_reasoning: str = Field(default="", alias="matchReasoning")


class CampaignBudget(BaseModel):
    min: float | None = None
    max: float | None = None


class AnalyzeResponseRequest(BaseModel):
    """Body of ``POST /api/ai/analyze-response``."""

    model_config = ConfigDict(populate_by_name=True)

    communication_id: str = Field(alias="communicationId")
    campaign_budget: CampaignBudget = Field(default_factory=CampaignBudget, alias="campaignBudget")
    creator_profile: Any = Field(default=None, alias="creatorProfile")
