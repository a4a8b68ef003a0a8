"""Outreach send, templated outreach and reply analysis routes."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from influencerflow.auth.session import AuthUser, get_current_user
from influencerflow.outreach.models import (
    AnalyzeResponseRequest,
    GenerateOutreachRequest,
    SendOutreachRequest,
)
from influencerflow.outreach.templates import render_outreach_message

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["outreach"])


@router.post("/outreach/send")
async def send_outreach(
    request: Request,
    body: SendOutreachRequest,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Send outreach over email or in-app and log the attempt."""
    outreach_service = request.app.state.services["outreach_service"]
    return await asyncio.to_thread(outreach_service.send, body)


@router.post("/ai/generate-outreach")
def generate_outreach(
    body: GenerateOutreachRequest,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Render the outreach message for a recommended creator."""
    logger.info("outreach_generated", campaign_title=body.campaign_title, user_id=user.id)
    message = render_outreach_message(
        creator_name=body.creator_name,
        creator_niche=body.creator_niche,
        campaign_title=body.campaign_title,
        campaign_description=body.campaign_description,
        recommended_budget=body.recommended_budget,
        deliverables=body.deliverables,
        confidence_score=body.confidence_score,
        match_reasoning=body.match_reasoning,
    )
    return {"success": True, "message": message}


@router.post("/ai/analyze-response")
def analyze_response(request: Request, body: AnalyzeResponseRequest) -> dict[str, Any]:
    """Extract terms from a creator reply and open a negotiation when warranted."""
    return request.app.state.services["outreach_service"].analyze_response(body)
