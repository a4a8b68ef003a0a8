"""Outreach delivery across channels, logging and follow-up bookkeeping."""

from __future__ import annotations

import sqlite3
import time
from decimal import Decimal
from typing import Any

import httpx
import structlog

from influencerflow.domain.errors import NotFoundError
from influencerflow.domain.types import (
    Channel,
    DeliveryStatus,
    Direction,
    InterestLevel,
    MessageType,
    RecommendationStatus,
)
from influencerflow.email.resend import ResendClient, render_outreach_html
from influencerflow.negotiations.service import NegotiationService
from influencerflow.observability.metrics import OUTREACH_SENT
from influencerflow.outreach.models import AnalyzeResponseRequest, SendOutreachRequest
from influencerflow.outreach.response_analysis import analyze_creator_response, has_negotiable_terms
from influencerflow.outreach.templates import is_ai_generated
from influencerflow.pricing import to_decimal
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.messages import MessageStore, NotificationStore
from influencerflow.store.schema import Database

logger = structlog.get_logger()


class DeliveryError(Exception):
    """Raised when a channel cannot deliver an outreach message."""


# Failures that turn a send into a logged ``failed`` attempt
_DELIVERY_FAILURES = (DeliveryError, httpx.HTTPError, ValueError, sqlite3.Error)


def _epoch_ms() -> int:
    return int(time.time() * 1000)


class OutreachService:
    """Send outreach to creators and analyze their replies."""

    def __init__(
        self,
        db: Database,
        communications: CommunicationLogStore,
        campaigns: CampaignStore,
        directory: DirectoryStore,
        messages: MessageStore,
        notifications: NotificationStore,
        negotiation_service: NegotiationService,
        resend_client: ResendClient | None = None,
        app_url: str = "http://localhost:3000",
    ) -> None:
        self._db = db
        self._communications = communications
        self._campaigns = campaigns
        self._directory = directory
        self._messages = messages
        self._notifications = notifications
        self._negotiation_service = negotiation_service
        self._resend_client = resend_client
        self._app_url = app_url.rstrip("/")

    def send(self, request: SendOutreachRequest) -> dict[str, Any]:
        """Deliver an outreach message and record it.

        A delivery failure does not fail the request: the attempt is logged
        with a ``failed_<epoch ms>`` id and ``failed`` status.

        Raises:
            NotFoundError: If the creator does not exist.
        """
        creator = self._directory.get_user(request.creator_id)
        if creator is None:
            raise NotFoundError("Creator", request.creator_id)

        try:
            external_id, status = self._deliver(request, creator)
        except _DELIVERY_FAILURES as exc:
            logger.warning(
                "outreach_delivery_failed",
                channel=str(request.channel),
                creator_id=request.creator_id,
                error=str(exc),
            )
            external_id, status = f"failed_{_epoch_ms()}", DeliveryStatus.FAILED

        with self._db.transaction():
            entry = self._communications.insert(
                campaign_id=request.campaign_id,
                creator_id=request.creator_id,
                channel=request.channel,
                direction=Direction.OUTBOUND,
                message_type=MessageType.INITIAL_OUTREACH,
                subject=request.subject,
                content=request.message,
                ai_generated=is_ai_generated(request.message),
                external_id=external_id,
                delivered=status in (DeliveryStatus.SENT, DeliveryStatus.DELIVERED),
            )
            if request.recommendation_id:
                self._campaigns.set_recommendation_status(
                    request.recommendation_id, RecommendationStatus.CONTACTED
                )
            self._notifications.create(
                user_id=request.creator_id,
                title="New Partnership Opportunity",
                message=f"You have received a collaboration proposal: {request.subject}",
                type_="campaign",
                related_id=request.campaign_id,
                action_url=f"/dashboard/campaigns/{request.campaign_id}",
            )

        OUTREACH_SENT.labels(channel=str(request.channel), status=str(status)).inc()
        logger.info(
            "outreach_sent",
            channel=str(request.channel),
            campaign_id=request.campaign_id,
            creator_id=request.creator_id,
            delivery_status=str(status),
            communication_log_id=entry["id"],
        )
        return {
            "success": True,
            "message_id": external_id,
            "delivery_status": status.value,
            "communication_log_id": entry["id"],
            "message": "Outreach sent successfully",
        }

    def _deliver(
        self, request: SendOutreachRequest, creator: dict[str, Any]
    ) -> tuple[str, DeliveryStatus]:
        if request.channel == Channel.EMAIL:
            return self._send_email(request, creator), DeliveryStatus.SENT
        if request.channel == Channel.IN_APP:
            message = self._messages.create(
                recipient_id=request.creator_id,
                campaign_id=request.campaign_id,
                subject=request.subject,
                content=request.message,
                message_type="campaign_outreach",
            )
            return f"in_app_{message['id']}", DeliveryStatus.DELIVERED
        raise DeliveryError(f"No delivery provider configured for channel {request.channel}")

    def _send_email(self, request: SendOutreachRequest, creator: dict[str, Any]) -> str:
        if self._resend_client is None:
            raise DeliveryError("Email delivery is not configured")
        if not creator["email"]:
            raise DeliveryError("Creator has no email address")
        return self._resend_client.send_email(
            to=creator["email"],
            subject=request.subject,
            html_body=render_outreach_html(
                request.message,
                campaign_url=f"{self._app_url}/dashboard/campaigns/{request.campaign_id}",
                recipient_email=creator["email"],
            ),
            headers={
                "X-Campaign-ID": request.campaign_id,
                "X-Creator-ID": creator["id"],
                "X-Message-Type": MessageType.INITIAL_OUTREACH.value,
            },
        )

    def analyze_response(self, request: AnalyzeResponseRequest) -> dict[str, Any]:
        """Analyze a logged creator reply; open a negotiation when it carries terms.

        Returns:
            ``{success, analysis, requires_negotiation}`` plus
            ``negotiation_id`` when a negotiation applies.

        Raises:
            NotFoundError: If the communication does not exist.
        """
        communication = self._communications.get(request.communication_id)
        if communication is None:
            raise NotFoundError("Communication", request.communication_id)

        budget_min: Decimal | None = to_decimal(request.campaign_budget.min)
        budget_max: Decimal | None = to_decimal(request.campaign_budget.max)
        analysis = analyze_creator_response(communication.get("content"), budget_min, budget_max)

        requires_negotiation = analysis["interest_level"] != InterestLevel.LOW and has_negotiable_terms(
            analysis["extracted_terms"]
        )
        logger.info(
            "creator_response_analyzed",
            communication_id=request.communication_id,
            interest_level=analysis["interest_level"],
            budget_compatibility=analysis["budget_compatibility"],
            requires_negotiation=requires_negotiation,
        )
        if not requires_negotiation:
            return {"success": True, "analysis": analysis, "requires_negotiation": False}

        negotiation_id, created = self._negotiation_service.open_from_response(communication, analysis)
        response: dict[str, Any] = {
            "success": True,
            "analysis": analysis,
            "negotiation_id": negotiation_id,
            "requires_negotiation": True,
        }
        if not created:
            response["message"] = "Negotiation already exists for this creator and campaign"
        return response
