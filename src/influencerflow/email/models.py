"""Pydantic v2 models for inbound email payloads.

Frozen (immutable) models for the Resend delivery webhook, the inbound reply
webhook and the direct reply endpoint.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResendEvent(BaseModel):
    """A Resend webhook event, e.g. ``email.delivered``."""

    model_config = ConfigDict(frozen=True)

    type: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def email_id(self) -> str | None:
        email_id = self.data.get("email_id")
        return str(email_id) if email_id else None


class InboundReply(BaseModel):
    """An inbound email forwarded to the reply webhook.

    Header-style keys (``from``, ``message-id``, ``in-reply-to``) are accepted
    as aliases.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_address: str | None = Field(default=None, alias="from")
    to: Any = None
    subject: str | None = None
    text: str | None = None
    html: str | None = None
    message_id: str | None = Field(default=None, alias="message-id")
    in_reply_to: str | None = Field(default=None, alias="in-reply-to")


class DirectReply(BaseModel):
    """Body of ``POST /api/email-replies``."""

    model_config = ConfigDict(frozen=True)

    from_email: str
    to_email: str | None = None
    subject: str | None = None
    text_content: str | None = None
    html_content: str | None = None
    in_reply_to: str
    references: str | None = None
