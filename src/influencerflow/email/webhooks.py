"""FastAPI endpoints for email provider webhooks and inbound replies.

The Resend delivery webhook verifies its Svix signature against the raw
request body bytes BEFORE JSON parsing, so the signature matches the exact
bytes the provider sent.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any

import structlog
from fastapi import APIRouter, HTTPException, Request
from pydantic import ValidationError

from influencerflow.domain.errors import ValidationFailedError, first_validation_message
from influencerflow.email.models import DirectReply, InboundReply, ResendEvent
from influencerflow.observability.metrics import EMAIL_EVENTS

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["email"])

# Maximum age (and clock skew) of a signed webhook delivery, in seconds
SIGNATURE_TOLERANCE_SECONDS = 5 * 60

# Resend event type -> (communication_log flag, value)
_TRACKING_UPDATES: dict[str, tuple[str, bool]] = {
    "email.delivered": ("delivered", True),
    "email.opened": ("read", True),
    "email.clicked": ("read", True),
    "email.bounced": ("delivered", False),
}


def _secret_bytes(secret: str) -> bytes:
    """Decode a ``whsec_``-prefixed base64 signing secret."""
    encoded = secret.removeprefix("whsec_")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        return encoded.encode()


def verify_signature(
    body: bytes,
    *,
    msg_id: str,
    timestamp: str,
    signature_header: str,
    secret: str,
    now: float | None = None,
) -> bool:
    """Verify a Svix-style webhook signature.

    The signed content is ``"{msg_id}.{timestamp}.{body}"``, signed with
    HMAC-SHA256 and base64 encoded.  The header holds space-separated
    ``v1,<signature>`` entries; any one matching is enough.

    Args:
        body: The raw request body bytes.
        msg_id: The ``svix-id`` header.
        timestamp: The ``svix-timestamp`` header (epoch seconds).
        signature_header: The ``svix-signature`` header.
        secret: The webhook signing secret.
        now: Current epoch seconds; defaults to the wall clock.

    Returns:
        True if the timestamp is fresh and a signature matches.
    """
    try:
        sent_at = int(timestamp)
    except ValueError:
        return False
    current = time.time() if now is None else now
    if abs(current - sent_at) > SIGNATURE_TOLERANCE_SECONDS:
        return False

    signed = f"{msg_id}.{timestamp}.".encode() + body
    digest = hmac.new(_secret_bytes(secret), signed, hashlib.sha256).digest()
    expected = base64.b64encode(digest).decode()

    for entry in signature_header.split():
        version, _, candidate = entry.partition(",")
        if version == "v1" and hmac.compare_digest(expected, candidate):
            return True
    return False


def _require_signature(request: Request, raw_body: bytes, secret: str) -> None:
    msg_id = request.headers.get("svix-id")
    timestamp = request.headers.get("svix-timestamp")
    signature = request.headers.get("svix-signature")
    if not (msg_id and timestamp and signature):
        logger.warning("resend_webhook_signature_missing")
        raise HTTPException(status_code=401, detail="Missing signature")

    if not verify_signature(
        raw_body, msg_id=msg_id, timestamp=timestamp, signature_header=signature, secret=secret
    ):
        logger.warning("resend_webhook_signature_invalid", svix_id=msg_id)
        raise HTTPException(status_code=401, detail="Invalid signature")


def _parse_json(raw_body: bytes) -> Any:
    try:
        return json.loads(raw_body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationFailedError("Request body must be valid JSON") from None


@router.post("/webhooks/resend")
async def resend_webhook(request: Request) -> dict[str, bool]:
    """Apply a Resend delivery event to the matching communication log rows.

    Raises:
        HTTPException: 401 if a secret is configured and the signature is
            missing or invalid.
    """
    raw_body = await request.body()

    secret = request.app.state.settings.resend_webhook_secret.get_secret_value()
    if secret:
        _require_signature(request, raw_body, secret)

    payload = _parse_json(raw_body)
    try:
        event = ResendEvent.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFailedError(first_validation_message(exc)) from exc

    EMAIL_EVENTS.labels(type=event.type or "unknown").inc()

    update = _TRACKING_UPDATES.get(event.type)
    if update is not None and event.email_id:
        flag, value = update
        communications = request.app.state.services["communications"]
        updated = communications.set_tracking_flag(event.email_id, flag, value)
        logger.info(
            "email_event_applied",
            event_type=event.type,
            email_id=event.email_id,
            rows=updated,
        )
    elif event.type == "email.complained":
        logger.warning("email_complaint_received", email_id=event.email_id)
    else:
        logger.info("email_event_ignored", event_type=event.type)

    return {"success": True}


@router.post("/webhooks/email-reply")
def email_reply_webhook(request: Request, body: InboundReply) -> dict[str, Any]:
    """Log an inbound email reply and match it to the outreach it answers."""
    return request.app.state.services["reply_processor"].process_webhook_reply(body)


@router.post("/email-replies")
def direct_email_reply(request: Request, body: DirectReply) -> dict[str, Any]:
    """Log a reply whose ``in_reply_to`` names the original message exactly."""
    return request.app.state.services["reply_processor"].process_direct_reply(body)
