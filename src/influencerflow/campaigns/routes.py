"""Campaign, application, recommendation, opportunity and creator routes."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from fastapi import APIRouter, Body, Depends, Query, Request

from influencerflow.auth.session import AuthUser, get_current_user
from influencerflow.campaigns.models import ApplicationCreate, RecommendationUpdate
from influencerflow.domain.types import MessageType

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["campaigns"])


def _campaign_service(request: Request) -> Any:
    return request.app.state.services["campaign_service"]


@router.get("/campaigns")
def list_campaigns(request: Request) -> list[dict[str, Any]]:
    """All campaigns, newest first, with brand profiles."""
    try:
        return _campaign_service(request).list_campaigns()
    except sqlite3.Error:
        logger.exception("campaigns_query_failed")
        return []


@router.post("/campaigns", status_code=201)
def create_campaign(
    request: Request,
    body: dict[str, Any] = Body(...),
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Create an active campaign for the calling brand."""
    return _campaign_service(request).create_campaign(user, body)


@router.get("/campaigns/{campaign_id}")
def get_campaign(request: Request, campaign_id: str) -> dict[str, Any]:
    """One campaign with its brand profile."""
    return _campaign_service(request).get_campaign(campaign_id)


@router.get("/campaigns/{campaign_id}/communications")
def list_campaign_communications(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """A campaign's communication log, newest first, with creator names."""
    communications = request.app.state.services["communications"]
    try:
        return communications.list_for_campaign(
            campaign_id, exclude_message_type=MessageType.CONTRACT
        )
    except sqlite3.Error:
        logger.exception("campaign_communications_query_failed", campaign_id=campaign_id)
        return []


@router.get("/campaigns/{campaign_id}/collaborations")
def list_campaign_collaborations(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """A campaign's collaborations with creator details."""
    try:
        return _campaign_service(request).collaborations_for(campaign_id)
    except sqlite3.Error:
        logger.exception("campaign_collaborations_query_failed", campaign_id=campaign_id)
        return []


@router.get("/campaigns/{campaign_id}/applications")
def list_campaign_applications(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """A campaign's applications with creator profiles."""
    try:
        return _campaign_service(request).applications_for(campaign_id)
    except sqlite3.Error:
        logger.exception("campaign_applications_query_failed", campaign_id=campaign_id)
        return []


@router.get("/campaigns/{campaign_id}/ai-recommendations")
def list_campaign_recommendations(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """A campaign's creator recommendations with creator profiles."""
    return _campaign_service(request).recommendations_for(campaign_id)


@router.patch("/ai-recommendations/{recommendation_id}")
def update_recommendation(
    request: Request, recommendation_id: str, body: RecommendationUpdate
) -> dict[str, Any]:
    """Approve, reject or mark a recommendation contacted/responded."""
    return _campaign_service(request).set_recommendation_status(recommendation_id, body)


@router.get("/opportunities")
def list_opportunities(
    request: Request, creator_id: str | None = Query(default=None, alias="creatorId")
) -> list[dict[str, Any]]:
    """Active campaigns with a ``hasApplied`` flag for the creator."""
    return _campaign_service(request).opportunities(creator_id)


@router.post("/campaign-applications")
def submit_application(
    request: Request,
    body: ApplicationCreate,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Submit the caller's application to a campaign."""
    return _campaign_service(request).apply(user, body)


@router.get("/campaign-applications")
def list_applications(
    request: Request,
    creator_id: str | None = Query(default=None, alias="creatorId"),
    campaign_id: str | None = Query(default=None, alias="campaignId"),
) -> list[dict[str, Any]]:
    """Applications filtered by creator and/or campaign."""
    return _campaign_service(request).list_applications(
        creator_id=creator_id, campaign_id=campaign_id
    )


@router.get("/creators")
def list_creators(request: Request) -> list[dict[str, Any]]:
    """Creator profiles with users, by Instagram followers."""
    try:
        return _campaign_service(request).creators()
    except sqlite3.Error:
        logger.exception("creators_query_failed")
        return []
