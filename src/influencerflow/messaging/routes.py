"""Direct message routes."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, model_validator

from influencerflow.auth.session import AuthUser, get_current_user
from influencerflow.dashboard.demo import DEMO_USER_ID, demo_conversations
from influencerflow.domain.errors import ValidationFailedError
from influencerflow.messaging.conversations import group_conversations

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["messages"])


class SendMessageRequest(BaseModel):
    """Body of ``POST /api/messages``."""

    recipient_id: str
    content: str
    message_type: str = "text"
    collaboration_id: str | None = None

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: Any) -> Any:
        if isinstance(data, dict) and (
            not data.get("recipient_id") or not str(data.get("content") or "").strip()
        ):
            raise ValueError("Recipient ID and content are required")
        return data


@router.get("/messages")
def list_conversations(
    request: Request, user_id: str | None = Query(default=None, alias="userId")
) -> list[dict[str, Any]]:
    """The user's messages grouped into conversations, most recent first."""
    if not user_id:
        raise ValidationFailedError("User ID is required")
    if request.app.state.settings.demo_mode and user_id == DEMO_USER_ID:
        return demo_conversations()
    messages = request.app.state.services["messages"].list_for_user(user_id)
    return group_conversations(messages, user_id)


@router.post("/messages")
def send_message(
    request: Request,
    body: SendMessageRequest,
    user: AuthUser = Depends(get_current_user),
) -> dict[str, Any]:
    """Send a direct message from the caller."""
    message = request.app.state.services["messages"].create(
        sender_id=user.id,
        recipient_id=body.recipient_id,
        content=body.content,
        message_type=body.message_type,
        collaboration_id=body.collaboration_id,
    )
    logger.info("message_sent", message_id=message["id"], recipient_id=body.recipient_id)
    return message
