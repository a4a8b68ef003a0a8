"""Profile route for the signed-in user."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request

from influencerflow.auth.session import AuthUser, get_current_user
from influencerflow.domain.errors import ConflictError, PermissionDeniedError

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/user/profile/{user_id}")
def get_user_profile(
    request: Request, user_id: str, user: AuthUser = Depends(get_current_user)
) -> dict[str, Any]:
    """Return the caller's own user row, creating it from token claims if missing.

    Tokens without an ``email`` claim create a user with no email.
    """
    if user.id != user_id:
        raise PermissionDeniedError("Forbidden - can only access own profile")

    directory = request.app.state.services["directory"]
    try:
        with request.app.state.services["db"].transaction():
            profile = directory.get_user(user_id)
            if profile is None:
                profile = directory.create_user(
                    user_id=user_id,
                    email=user.email or None,
                    full_name=user.default_full_name,
                    user_type=user.default_user_type,
                )
                logger.info("user_profile_created", user_id=user_id)
    except sqlite3.IntegrityError:
        logger.warning("user_profile_email_taken", user_id=user_id)
        raise ConflictError("Email is already registered to another user") from None
    return profile
