"""Negotiation routes: detail, guarded update, counter-offers, per-campaign list."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from fastapi import APIRouter, Body, Request

from influencerflow.negotiations.models import CounterOfferRequest

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["negotiations"])


@router.get("/negotiations/{negotiation_id}")
def get_negotiation(request: Request, negotiation_id: str) -> dict[str, Any]:
    """Return a negotiation with its campaign, creator, origin message and rounds."""
    return request.app.state.services["negotiation_service"].get_detail(negotiation_id)


@router.patch("/negotiations/{negotiation_id}")
def update_negotiation(
    request: Request, negotiation_id: str, body: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    """Update whitelisted negotiation fields; status must follow the lifecycle."""
    return request.app.state.services["negotiation_service"].patch(negotiation_id, body)


@router.post("/negotiations/{negotiation_id}/counter-offer")
def counter_offer(
    request: Request, negotiation_id: str, body: CounterOfferRequest
) -> dict[str, Any]:
    """Record a brand counter-offer and any automatic creator response."""
    return request.app.state.services["negotiation_service"].counter_offer(
        negotiation_id,
        body.proposed_terms,
        response_message=body.response_message,
        ai_generated=body.ai_generated,
    )


@router.get("/campaigns/{campaign_id}/negotiations")
def list_campaign_negotiations(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """List a campaign's negotiations; an empty list on storage errors."""
    try:
        return request.app.state.services["negotiation_service"].list_for_campaign(campaign_id)
    except sqlite3.Error:
        logger.exception("campaign_negotiations_query_failed", campaign_id=campaign_id)
        return []
