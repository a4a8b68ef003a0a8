"""Dashboard statistics, recent campaigns and payment routes."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from fastapi import APIRouter, Query, Request

from influencerflow.domain.errors import ValidationFailedError
from influencerflow.domain.types import UserType

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["dashboard"])


def _dashboard_service(request: Request) -> Any:
    return request.app.state.services["dashboard_service"]


@router.get("/dashboard/stats")
def dashboard_stats(
    request: Request,
    user_id: str | None = Query(default=None, alias="userId"),
    user_type: str | None = Query(default=None, alias="userType"),
) -> dict[str, Any]:
    """Headline numbers for a brand or creator dashboard."""
    if not user_id or not user_type:
        raise ValidationFailedError("User ID and user type are required")
    try:
        kind = UserType(user_type)
    except ValueError:
        raise ValidationFailedError("Invalid user type") from None
    return _dashboard_service(request).stats(user_id, kind)


@router.get("/dashboard/recent-campaigns")
def recent_campaigns(
    request: Request,
    user_id: str | None = Query(default=None, alias="userId"),
    user_type: str | None = Query(default=None, alias="userType"),
) -> list[dict[str, Any]]:
    """The ten newest campaigns with collaboration counts; [] when unavailable."""
    if not user_id or not user_type:
        return []
    try:
        return _dashboard_service(request).recent_campaigns(user_id, user_type)
    except sqlite3.Error:
        logger.exception("recent_campaigns_query_failed", user_id=user_id)
        return []


@router.get("/payments")
def list_payments(
    request: Request, user_id: str | None = Query(default=None, alias="userId")
) -> dict[str, Any]:
    """Payments the user made or received, with totals."""
    if not user_id:
        raise ValidationFailedError("User ID is required")
    return _dashboard_service(request).payments(user_id)
