"""Request bodies for campaign, application and recommendation routes."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from influencerflow.domain.types import RecommendationStatus

# Statuses a reviewer may set on a recommendation
REVIEWABLE_STATUSES = frozenset(
    {
        RecommendationStatus.APPROVED,
        RecommendationStatus.REJECTED,
        RecommendationStatus.CONTACTED,
        RecommendationStatus.RESPONDED,
    }
)


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class CampaignCreate(BaseModel):
    """Body of ``POST /api/campaigns``.

    Checks run in a fixed order so the first failing rule names the error:
    title/description, budget range, timeline presence, timeline order.
    """

    title: str
    description: str
    budget_min: float
    budget_max: float
    timeline_start: str
    timeline_end: str
    target_audience: Any = None
    requirements: list[Any] = Field(default_factory=list)
    deliverables: list[Any] = Field(default_factory=list)
    niches: list[str] = Field(default_factory=list)
    brand_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        """Apply the presence and budget rules to the raw body."""
        if not isinstance(data, dict):
            return data
        title = str(data.get("title") or "").strip()
        description = str(data.get("description") or "").strip()
        if not title or not description:
            raise ValueError("Title and description are required")

        try:
            budget_min = float(data.get("budget_min") or 0)
            budget_max = float(data.get("budget_max") or 0)
        except (TypeError, ValueError):
            raise ValueError("Valid budget range is required") from None
        if budget_min <= 0 or budget_max <= 0 or budget_min > budget_max:
            raise ValueError("Valid budget range is required")

        if not data.get("timeline_start") or not data.get("timeline_end"):
            raise ValueError("Campaign timeline is required")
        return data

    @model_validator(mode="after")
    def check_timeline_order(self) -> CampaignCreate:
        try:
            start = _parse_timestamp(self.timeline_start)
            end = _parse_timestamp(self.timeline_end)
        except ValueError:
            raise ValueError("Campaign timeline dates must be ISO-8601") from None
        if start >= end:
            raise ValueError("End date must be after start date")
        return self


class ApplicationCreate(BaseModel):
    """Body of ``POST /api/campaign-applications``."""

    campaign_id: str
    proposal_text: str
    proposed_rate: float | None = None

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        """Both the campaign and a non-blank proposal are required."""
        if isinstance(data, dict) and (
            not data.get("campaign_id") or not str(data.get("proposal_text") or "").strip()
        ):
            raise ValueError("Campaign ID and proposal text are required")
        return data


class RecommendationUpdate(BaseModel):
    """Body of ``PATCH /api/ai-recommendations/{id}``."""

    status: RecommendationStatus

    @field_validator("status", mode="before")
    @classmethod
    def status_must_be_reviewable(cls, v: Any) -> Any:
        """Only approved, rejected, contacted or responded may be set."""
        if v not in {status.value for status in REVIEWABLE_STATUSES}:
            raise ValueError("Invalid status")
        return v
