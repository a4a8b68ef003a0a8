"""Negotiation reads, guarded updates and counter-offer rounds."""

from __future__ import annotations

from typing import Any

import structlog

from influencerflow.domain.errors import ConflictError, NotFoundError, ValidationFailedError
from influencerflow.domain.types import NegotiationStatus
from influencerflow.negotiations.analysis import (
    analyze_counter_offer,
    describe_rate,
    generate_auto_response,
)
from influencerflow.state_machine import NegotiationStatusMachine
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.negotiations import NegotiationStore
from influencerflow.store.schema import Database
from influencerflow.store.serializers import require_row

logger = structlog.get_logger()

# Fields a negotiation PATCH may change
PATCHABLE_FIELDS = frozenset({"status", "current_terms", "strategy", "max_rounds", "ai_analysis"})
_DICT_FIELDS = ("current_terms", "strategy", "ai_analysis")

# Counter-offers are only accepted while the negotiation is still open
_OPEN_STATUSES = frozenset({NegotiationStatus.DRAFT, NegotiationStatus.ACTIVE})


class NegotiationService:
    """Negotiation operations, each committed as one transaction."""

    def __init__(
        self,
        db: Database,
        negotiations: NegotiationStore,
        campaigns: CampaignStore,
        communications: CommunicationLogStore,
        directory: DirectoryStore,
    ) -> None:
        self._db = db
        self._negotiations = negotiations
        self._campaigns = campaigns
        self._communications = communications
        self._directory = directory

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_detail(self, negotiation_id: str) -> dict[str, Any]:
        """Return the negotiation with campaign, creator, origin message and rounds.

        Raises:
            NotFoundError: If the negotiation does not exist.
        """
        negotiation = self._negotiations.get(negotiation_id)
        if negotiation is None:
            raise NotFoundError("Negotiation", negotiation_id)

        detail = self._enrich(negotiation, ("id", "title", "budget_min", "budget_max"))
        communication = (
            self._communications.get(negotiation["communication_id"])
            if negotiation.get("communication_id")
            else None
        )
        detail["communication_log"] = (
            {
                "id": communication["id"],
                "subject": communication["subject"],
                "content": communication["content"],
                "created_at": communication["created_at"],
            }
            if communication
            else None
        )
        detail["negotiation_rounds"] = self._negotiations.list_rounds(negotiation_id)
        return detail

    def list_for_campaign(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's negotiations enriched with creator and campaign details."""
        return [
            self._enrich(negotiation, ("id", "title", "budget_min", "budget_max"))
            for negotiation in self._negotiations.list_for_campaign(campaign_id)
        ]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def patch(self, negotiation_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        """Apply a whitelisted update; status changes must follow the lifecycle.

        Args:
            negotiation_id: The negotiation to update.
            changes: Any of ``PATCHABLE_FIELDS``.

        Returns:
            The updated negotiation row.

        Raises:
            ValidationFailedError: On unknown fields or malformed values.
            NotFoundError: If the negotiation does not exist.
            InvalidTransitionError: If the status change is not allowed.
        """
        unknown = sorted(set(changes) - PATCHABLE_FIELDS)
        if unknown:
            raise ValidationFailedError(
                f"Fields cannot be updated: {', '.join(unknown)}",
                details={"allowed": sorted(PATCHABLE_FIELDS)},
            )
        if not changes:
            raise ValidationFailedError("No updatable fields supplied")
        fields = self._validated_fields(changes)

        with self._db.transaction():
            negotiation = self._negotiations.get(negotiation_id)
            if negotiation is None:
                raise NotFoundError("Negotiation", negotiation_id)

            if "status" in fields:
                current = NegotiationStatus(negotiation["status"])
                if fields["status"] == current:
                    del fields["status"]
                else:
                    machine = NegotiationStatusMachine(current)
                    fields["status"] = machine.move_to(fields["status"]).value

            self._negotiations.update(negotiation_id, fields)
            updated = require_row(
                self._negotiations.get(negotiation_id), "negotiations", negotiation_id
            )

        logger.info("negotiation_updated", negotiation_id=negotiation_id, fields=sorted(fields))
        return updated

    def counter_offer(
        self,
        negotiation_id: str,
        proposed_terms: dict[str, Any],
        response_message: str | None = None,
        ai_generated: bool = False,
    ) -> dict[str, Any]:
        """Record a brand counter-offer and, when close enough, the creator's auto-response.

        A ``draft`` negotiation becomes ``active`` with its first counter-offer.
        An accepted auto-response moves it to ``agreed``.

        Returns:
            ``{success, negotiation, round_id, ai_analysis}``.

        Raises:
            NotFoundError: If the negotiation does not exist.
            ConflictError: If the negotiation is already agreed, declined or contracted.
        """
        with self._db.transaction():
            negotiation = self._negotiations.get(negotiation_id)
            if negotiation is None:
                raise NotFoundError("Negotiation", negotiation_id)

            machine = NegotiationStatusMachine(NegotiationStatus(negotiation["status"]))
            if machine.state not in _OPEN_STATUSES:
                raise ConflictError(
                    f"Negotiation is {machine.state}; counter-offers are closed",
                    details={"status": str(machine.state)},
                )
            if machine.state == NegotiationStatus.DRAFT:
                machine.move_to(NegotiationStatus.ACTIVE)

            analysis = analyze_counter_offer(proposed_terms, negotiation)
            current_round = negotiation["current_round"] + 1
            round_id = self._negotiations.add_round(
                negotiation_id=negotiation_id,
                round_number=current_round,
                initiated_by="brand",
                proposed_terms=proposed_terms,
                ai_analysis=analysis,
                response_type="counter",
                response_message=response_message,
            )

            auto_action = None
            if analysis["should_auto_respond"]:
                auto_response = generate_auto_response(proposed_terms, analysis)
                auto_action = auto_response["action"]
                current_round += 1
                self._negotiations.add_round(
                    negotiation_id=negotiation_id,
                    round_number=current_round,
                    initiated_by="ai",
                    proposed_terms=auto_response["terms"],
                    ai_analysis={"type": "auto_response", "reasoning": auto_response["reasoning"]},
                    response_type=auto_action,
                    response_message=auto_response["message"],
                )
                if auto_action == "accept":
                    machine.move_to(NegotiationStatus.AGREED)

            self._negotiations.update(
                negotiation_id,
                {
                    "current_round": current_round,
                    "current_terms": proposed_terms,
                    "status": machine.state.value,
                },
            )

        logger.info(
            "counter_offer_recorded",
            negotiation_id=negotiation_id,
            proposed_rate=describe_rate(proposed_terms),
            variance=analysis["variance_from_creator_terms"],
            auto_action=auto_action,
            status=str(machine.state),
            ai_generated=ai_generated,
        )
        return {
            "success": True,
            "negotiation": self.get_detail(negotiation_id),
            "round_id": round_id,
            "ai_analysis": analysis,
        }

    def open_from_response(
        self, communication: dict[str, Any], analysis: dict[str, Any]
    ) -> tuple[str, bool]:
        """Open a draft negotiation from an analyzed creator reply.

        Returns:
            ``(negotiation_id, created)``; ``created`` is False when the
            campaign/creator pair already has a negotiation.

        Raises:
            ValidationFailedError: If the message is not tied to a campaign and creator.
        """
        campaign_id = communication.get("campaign_id")
        creator_id = communication.get("creator_id")
        if not campaign_id or not creator_id:
            raise ValidationFailedError("Communication is not linked to a campaign and creator")

        with self._db.transaction():
            existing = self._negotiations.find_for_pair(campaign_id, creator_id)
            if existing is not None:
                return existing["id"], False

            strategy = analysis.get("recommended_strategy") or {}
            negotiation = self._negotiations.create(
                campaign_id=campaign_id,
                creator_id=creator_id,
                communication_id=communication["id"],
                creator_terms=analysis.get("extracted_terms") or {},
                current_terms=analysis.get("extracted_terms") or {},
                strategy=strategy,
                ai_analysis=analysis,
                max_rounds=strategy.get("max_rounds", 3),
            )

        logger.info(
            "negotiation_opened_from_response",
            negotiation_id=negotiation["id"],
            communication_id=communication["id"],
        )
        return negotiation["id"], True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _validated_fields(changes: dict[str, Any]) -> dict[str, Any]:
        fields = dict(changes)
        for name in _DICT_FIELDS:
            if name in fields and not isinstance(fields[name], dict):
                raise ValidationFailedError(f"{name} must be an object")
        if "max_rounds" in fields:
            max_rounds = fields["max_rounds"]
            if isinstance(max_rounds, bool) or not isinstance(max_rounds, int) or max_rounds < 1:
                raise ValidationFailedError("max_rounds must be a positive integer")
        if "status" in fields:
            try:
                fields["status"] = NegotiationStatus(fields["status"])
            except ValueError:
                raise ValidationFailedError(
                    f"Invalid status: {fields['status']!r}",
                    details={"allowed": [s.value for s in NegotiationStatus]},
                ) from None
        return fields

    def _enrich(self, negotiation: dict[str, Any], campaign_fields: tuple[str, ...]) -> dict[str, Any]:
        creator_id = negotiation["creator_id"]
        campaign = self._campaigns.get(negotiation["campaign_id"])
        user = self._directory.get_user(creator_id)
        return {
            **negotiation,
            "campaigns": {field: campaign.get(field) for field in campaign_fields} if campaign else None,
            "users": (
                {"id": user["id"], "full_name": user["full_name"], "email": user["email"]}
                if user
                else None
            ),
            "creator_profiles": self._directory.get_creator_profile(creator_id),
        }
