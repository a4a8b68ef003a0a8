"""Inbound reply matching and logging.

A reply is matched to the single outbound message it answers: first by its
``In-Reply-To`` header against the stored provider id, then by exact
comparison of normalized subjects (reply/forward prefixes stripped), newest
outbound email first.  Only the matched row is marked responded.
"""

from __future__ import annotations

import re
import time
from typing import Any

import structlog

from influencerflow.domain.errors import NotFoundError
from influencerflow.domain.types import Channel, Direction, MessageType, RecommendationStatus
from influencerflow.email.models import DirectReply, InboundReply
from influencerflow.email.parser import reply_body
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.messages import NotificationStore
from influencerflow.store.schema import Database

logger = structlog.get_logger()

_REPLY_PREFIX = re.compile(r"^\s*(re|fwd?|fw)\s*:\s*", re.IGNORECASE)


def normalize_subject(subject: str | None) -> str:
    """Strip any number of ``Re:``/``Fwd:``/``FW:`` prefixes and casefold.

    >>> normalize_subject("RE: Re: Summer Launch")
    'summer launch'
    """
    if not subject:
        return ""
    text = subject
    while True:
        stripped = _REPLY_PREFIX.sub("", text, count=1)
        if stripped == text:
            break
        text = stripped
    return " ".join(text.split()).casefold()


def message_id_candidates(header: str | None) -> list[str]:
    """Ids an ``In-Reply-To`` header may refer to.

    Yields the raw header, the value without angle brackets, and the local
    part before ``@`` (providers often store only that).
    """
    if not header or not header.strip():
        return []
    raw = header.strip()
    bare = raw.strip("<>")
    candidates = [raw, bare]
    if "@" in bare:
        candidates.append(bare.split("@", 1)[0])
    return list(dict.fromkeys(c for c in candidates if c))


class ReplyProcessor:
    """Match inbound replies to outreach, log them and notify the brand."""

    def __init__(
        self,
        db: Database,
        communications: CommunicationLogStore,
        campaigns: CampaignStore,
        directory: DirectoryStore,
        notifications: NotificationStore,
    ) -> None:
        self._db = db
        self._communications = communications
        self._campaigns = campaigns
        self._directory = directory
        self._notifications = notifications

    def find_original(self, in_reply_to: str | None, subject: str | None) -> dict[str, Any] | None:
        """The outbound message a reply answers, or ``None``."""
        for candidate in message_id_candidates(in_reply_to):
            original = self._communications.find_outbound_by_external_id(candidate)
            if original is not None:
                return original

        normalized = normalize_subject(subject)
        if not normalized:
            return None
        for candidate in self._communications.outbound_emails_with_subject():
            if normalize_subject(candidate.get("subject")) == normalized:
                return candidate
        return None

    def process_webhook_reply(self, reply: InboundReply) -> dict[str, Any]:
        """Log an inbound reply and update the outreach it answers.

        Unmatched replies are still logged, without campaign context.

        Returns:
            The API response body.
        """
        content = reply_body(reply.text, reply.html)
        with self._db.transaction():
            original = self.find_original(reply.in_reply_to, reply.subject)
            if original is None:
                orphan = self._log_reply(reply, content, original=None)
                logger.warning(
                    "email_reply_unmatched",
                    communication_log_id=orphan["id"],
                    in_reply_to=reply.in_reply_to,
                )
                return {
                    "success": True,
                    "message": "Email received but could not match to original campaign",
                }

            logged = self._log_reply(reply, content, original=original)
            self._communications.mark_responded(original["id"])

            campaign_id = original.get("campaign_id")
            creator_id = original.get("creator_id")
            if campaign_id and creator_id:
                self._campaigns.set_recommendation_status_for_pair(
                    campaign_id, creator_id, RecommendationStatus.RESPONDED
                )
            if campaign_id:
                self._notify_brand(
                    campaign_id,
                    title="Creator Response Received",
                    message=f"A creator has responded to your campaign outreach: {reply.subject}",
                )

        logger.info(
            "email_reply_matched",
            communication_log_id=logged["id"],
            original_id=original["id"],
            campaign_id=campaign_id,
        )
        return {
            "success": True,
            "message": "Email reply processed successfully",
            "communication_log_id": logged["id"],
        }

    def process_direct_reply(self, reply: DirectReply) -> dict[str, Any]:
        """Log a reply submitted with an exact ``in_reply_to`` id.

        Raises:
            NotFoundError: If the original message or the sender is unknown.
        """
        with self._db.transaction():
            original = self._communications.find_outbound_by_external_id(reply.in_reply_to)
            if original is None:
                raise NotFoundError("Original message", reply.in_reply_to)

            creator = self._directory.get_user_by_email(reply.from_email)
            if creator is None:
                raise NotFoundError("Creator", reply.from_email)

            logged = self._communications.insert(
                campaign_id=original.get("campaign_id"),
                creator_id=creator["id"],
                channel=Channel.EMAIL,
                direction=Direction.INBOUND,
                message_type=MessageType.GENERAL,
                subject=reply.subject,
                content=reply_body(reply.text_content, reply.html_content),
                external_id=f"reply_{int(time.time() * 1000)}",
                thread_id=original.get("external_id"),
                delivered=True,
            )
            self._communications.mark_responded(original["id"])

            if original.get("campaign_id"):
                self._notify_brand(
                    original["campaign_id"],
                    title="Creator Reply Received",
                    message=f"{creator['full_name']} replied to your outreach: {reply.subject}",
                )

        logger.info("direct_reply_logged", reply_id=logged["id"], original_id=original["id"])
        return {
            "success": True,
            "message": "Reply processed successfully",
            "reply_id": logged["id"],
        }

    def _log_reply(
        self, reply: InboundReply, content: str, original: dict[str, Any] | None
    ) -> dict[str, Any]:
        return self._communications.insert(
            campaign_id=original.get("campaign_id") if original else None,
            creator_id=original.get("creator_id") if original else None,
            channel=Channel.EMAIL,
            direction=Direction.INBOUND,
            message_type=MessageType.REPLY,
            subject=reply.subject,
            content=content,
            external_id=reply.message_id,
            thread_id=original.get("external_id") if original else None,
            delivered=True,
        )

    def _notify_brand(self, campaign_id: str, *, title: str, message: str) -> None:
        campaign = self._campaigns.get(campaign_id)
        if campaign is None:
            return
        self._notifications.create(
            user_id=campaign["brand_id"],
            title=title,
            message=message,
            type_="communication",
            related_id=campaign_id,
            action_url=f"/dashboard/campaigns/{campaign_id}?tab=communications",
        )
