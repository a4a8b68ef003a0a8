"""Instagram profile lookup and username verification routes."""

from __future__ import annotations

import asyncio
from typing import Any

import structlog
from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from influencerflow.domain.errors import (
    InfluencerFlowError,
    NotFoundError,
    ValidationFailedError,
)
from influencerflow.instagram.client import ENGAGEMENT_SAMPLE_SIZE, InstagramClient

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["instagram"])

# Media items returned with a profile
PROFILE_MEDIA_PREVIEW = 6


class VerifyUsernameRequest(BaseModel):
    """Body of ``POST /api/instagram/profile``."""

    username: str | None = None
    access_token: str | None = Field(default=None, alias="accessToken")


def _profile_summary(client: InstagramClient, user_id: str, username: str | None) -> dict[str, Any]:
    if username and not client.verify_username(username):
        raise NotFoundError("Instagram username", username)

    profile = client.get_profile(user_id)
    if profile is None:
        raise InfluencerFlowError("Failed to fetch Instagram profile", details={"service": "instagram"})

    media = client.get_media(user_id, ENGAGEMENT_SAMPLE_SIZE)
    engagement_rate = client.calculate_engagement_rate(user_id)
    return {
        "profile": profile,
        "media": media[:PROFILE_MEDIA_PREVIEW],
        "engagement_rate": engagement_rate,
        "total_posts": len(media),
    }


@router.get("/instagram/profile")
async def instagram_profile(
    request: Request,
    user_id: str = Query(default="me", alias="userId"),
    username: str | None = None,
) -> dict[str, Any]:
    """Profile, recent media and engagement rate for the connected account."""
    client = request.app.state.services["instagram_client"]
    return await asyncio.to_thread(_profile_summary, client, user_id, username)


@router.post("/instagram/profile")
async def verify_instagram_username(request: Request, body: VerifyUsernameRequest) -> dict[str, Any]:
    """Check that a public Instagram username exists."""
    if not body.username:
        raise ValidationFailedError("Username is required")

    if body.access_token:
        client = InstagramClient(body.access_token)
        try:
            verified = await asyncio.to_thread(client.verify_username, body.username)
        finally:
            client.close()
    else:
        client = request.app.state.services["instagram_client"]
        verified = await asyncio.to_thread(client.verify_username, body.username)

    if not verified:
        raise NotFoundError("Instagram username", body.username)

    logger.info("instagram_username_verified", username=body.username)
    return {
        "username": body.username,
        "verified": True,
        "message": "Username verified. User needs to connect Instagram account for full data.",
    }
