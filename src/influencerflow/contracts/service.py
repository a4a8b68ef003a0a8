"""Contract lifecycle: generation, lookup, term edits and signatures.

Contracts are JSON documents stored in ``communication_log`` rows with
``message_type = 'contract'`` and ``external_id`` set to the contract id.
Every write re-validates the whole document through the ``Contract`` model,
so the stored ``status`` always matches the signature flags.
"""

from __future__ import annotations

import threading
import time
from typing import Any

import structlog
from pydantic import ValidationError

from influencerflow.contracts.models import ContractUpdate
from influencerflow.contracts.terms import build_contract_terms, deliverable_count
from influencerflow.domain.errors import (
    ConflictError,
    InfluencerFlowError,
    NotFoundError,
    ValidationFailedError,
    first_validation_message,
)
from influencerflow.domain.models import Contract, SignatureRecord
from influencerflow.domain.types import (
    CONTRACT_STATUS_BY_STATE,
    Channel,
    ContractState,
    Direction,
    MessageType,
    NegotiationStatus,
    SignerType,
)
from influencerflow.observability.metrics import CONTRACTS_EXECUTED, CONTRACTS_GENERATED
from influencerflow.state_machine import (
    ContractEvent,
    ContractSignatureMachine,
    NegotiationStatusMachine,
)
from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.collaborations import CollaborationStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.messages import NotificationStore
from influencerflow.store.negotiations import NegotiationStore
from influencerflow.store.schema import Database
from influencerflow.store.serializers import dump_json, load_json, now_iso

logger = structlog.get_logger()

# Fields a contract PATCH may change
EDITABLE_FIELDS = frozenset({"contract_terms", "contract_type", "legal_review"})

_SIGN_EVENTS = {
    SignerType.BRAND: ContractEvent.BRAND_SIGN,
    SignerType.CREATOR: ContractEvent.CREATOR_SIGN,
}


def make_contract_id(negotiation_id: str) -> str:
    """``contract_<epoch ms>_<first 8 chars of the negotiation id>``."""
    return f"contract_{int(time.time() * 1000)}_{negotiation_id[:8]}"


def _campaign_summary(campaign: dict[str, Any] | None, *fields: str) -> dict[str, Any] | None:
    if campaign is None:
        return None
    return {field: campaign.get(field) for field in fields}


class ContractService:
    """Generate and mutate contracts inside single store transactions."""

    def __init__(
        self,
        db: Database,
        communications: CommunicationLogStore,
        negotiations: NegotiationStore,
        campaigns: CampaignStore,
        directory: DirectoryStore,
        collaborations: CollaborationStore,
        notifications: NotificationStore,
    ) -> None:
        self._db = db
        self._communications = communications
        self._negotiations = negotiations
        self._campaigns = campaigns
        self._directory = directory
        self._collaborations = collaborations
        self._notifications = notifications
        # Serializes read-modify-write of contract documents
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self, negotiation_id: str, contract_type: str = "collaboration") -> dict[str, Any]:
        """Create a draft contract for an agreed negotiation.

        The contract row insert and the negotiation's move to ``contracted``
        commit together.

        Args:
            negotiation_id: The agreed negotiation.
            contract_type: Free-form contract type label.

        Returns:
            The contract document with an embedded ``negotiations`` summary.

        Raises:
            NotFoundError: If the negotiation does not exist.
            ConflictError: If the negotiation is not ``agreed``.
        """
        with self._db.transaction():
            negotiation = self._negotiations.get(negotiation_id)
            if negotiation is None:
                raise NotFoundError("Negotiation", negotiation_id)

            machine = NegotiationStatusMachine(NegotiationStatus(negotiation["status"]))
            if machine.state != NegotiationStatus.AGREED:
                raise ConflictError(
                    "Contracts can only be generated for agreed negotiations",
                    details={"negotiation_id": negotiation_id, "status": str(machine.state)},
                )
            new_status = machine.move_to(NegotiationStatus.CONTRACTED)

            campaign = self._campaigns.get(negotiation["campaign_id"])
            brand_profile = self._directory.get_brand_profile(campaign["brand_id"] if campaign else None)
            creator_profile = self._directory.get_creator_profile(negotiation["creator_id"])
            creator_user = self._directory.get_user(negotiation["creator_id"])

            now = now_iso()
            contract = Contract(
                id=make_contract_id(negotiation_id),
                negotiation_id=negotiation_id,
                contract_type=contract_type,
                contract_terms=build_contract_terms(
                    negotiation, campaign, brand_profile, creator_profile, creator_user
                ),
                legal_review={
                    "status": "pending",
                    "created_at": now,
                    "issues": [],
                    "recommendations": [],
                },
                created_at=now,
                updated_at=now,
            )
            document = contract.to_document()

            campaign_title = (campaign or {}).get("title") or "Campaign"
            display_name = (creator_profile or {}).get("display_name") or "Creator"
            self._communications.insert(
                campaign_id=negotiation["campaign_id"],
                creator_id=negotiation["creator_id"],
                channel=Channel.EMAIL,
                direction=Direction.OUTBOUND,
                message_type=MessageType.CONTRACT,
                subject=f"CONTRACT: {campaign_title} - {display_name}",
                content=dump_json(document),
                ai_generated=True,
                external_id=contract.id,
                delivered=True,
            )
            self._negotiations.update(
                negotiation_id, {"status": new_status.value, "contract_data": document}
            )

        CONTRACTS_GENERATED.inc()
        logger.info(
            "contract_generated",
            contract_id=contract.id,
            negotiation_id=negotiation_id,
            total_amount=document["contract_terms"]["compensation"]["total_amount"],
        )
        return {
            **document,
            "negotiations": {
                "id": negotiation["id"],
                "creator_id": negotiation["creator_id"],
                "campaign_id": negotiation["campaign_id"],
                "current_terms": negotiation["current_terms"],
                "creator_terms": negotiation["creator_terms"],
                "status": new_status.value,
                "campaigns": _campaign_summary(
                    campaign,
                    "id",
                    "title",
                    "description",
                    "budget_min",
                    "budget_max",
                    "timeline_start",
                    "timeline_end",
                    "deliverables",
                ),
                "users": self._user_summary(creator_user),
            },
        }

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, contract_id: str) -> dict[str, Any]:
        """Return a contract with its negotiation, creator and campaign details.

        Raises:
            NotFoundError: If no contract has this id.
        """
        row, contract = self._load(contract_id)
        document = contract.to_document()
        document["negotiations"] = self._negotiation_details(
            contract.negotiation_id, row["creator_id"], row["campaign_id"]
        )
        return document

    def list_for_campaign(self, campaign_id: str) -> list[dict[str, Any]]:
        """Return a campaign's contracts, newest first, with creator details."""
        rows = self._communications.list_for_campaign(
            campaign_id, message_type=MessageType.CONTRACT
        )
        campaign = _campaign_summary(self._campaigns.get(campaign_id), "id", "title", "description")
        contracts: list[dict[str, Any]] = []
        for row in rows:
            document = load_json(row["content"], default=None)
            if not isinstance(document, dict):
                logger.warning("contract_document_unreadable", communication_id=row["id"])
                document = {
                    "id": row["external_id"] or f"contract_{row['id']}",
                    "status": "draft",
                    "contract_terms": {},
                    "signature_data": {},
                    "created_at": row["created_at"],
                }
            negotiation_id = document.get("negotiation_id")
            negotiation = self._negotiations.get(negotiation_id) if negotiation_id else None
            contracts.append(
                {
                    "id": document.get("id") or row["external_id"],
                    "negotiation_id": negotiation_id,
                    "contract_type": document.get("contract_type") or "collaboration",
                    "contract_terms": document.get("contract_terms") or {},
                    "status": document.get("status") or "draft",
                    "legal_review": document.get("legal_review") or {},
                    "signature_data": document.get("signature_data") or {},
                    "created_at": document.get("created_at") or row["created_at"],
                    "updated_at": document.get("updated_at") or row["created_at"],
                    "negotiations": {
                        "id": negotiation_id,
                        "creator_id": row["creator_id"],
                        "campaign_id": row["campaign_id"],
                        "current_terms": (negotiation or {}).get("current_terms") or {},
                        "creator_terms": (negotiation or {}).get("creator_terms") or {},
                        "status": (negotiation or {}).get("status") or NegotiationStatus.CONTRACTED.value,
                        "creator_profiles": self._directory.get_creator_profile(row["creator_id"]),
                        "users": self._user_summary(self._directory.get_user(row["creator_id"]))
                        if row["creator_id"]
                        else None,
                        "campaigns": campaign,
                    },
                }
            )
        return contracts

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(
        self,
        contract_id: str,
        changes: dict[str, Any],
        expected_updated_at: str | None = None,
    ) -> dict[str, Any]:
        """Apply term edits to an unsigned contract.

        Args:
            contract_id: The contract to edit.
            changes: New values for any of ``EDITABLE_FIELDS``.
            expected_updated_at: The ``updated_at`` the caller last read; a
                mismatch means someone else wrote first.

        Returns:
            The updated contract document.

        Raises:
            ValidationFailedError: If a field is not editable, has the wrong
                type, or nothing is supplied.
            NotFoundError: If no contract has this id.
            ConflictError: If signing has started or the document is stale.
        """
        unknown = sorted(set(changes) - EDITABLE_FIELDS)
        if unknown:
            raise ValidationFailedError(
                f"Fields cannot be updated: {', '.join(unknown)}",
                details={"allowed": sorted(EDITABLE_FIELDS)},
            )
        if not changes:
            raise ValidationFailedError("No updatable fields supplied")
        try:
            changes = ContractUpdate.model_validate(changes).changes()
        except ValidationError as exc:
            raise ValidationFailedError(first_validation_message(exc)) from None

        with self._lock, self._db.transaction():
            row, contract = self._load(contract_id)
            if expected_updated_at is not None and expected_updated_at != contract.updated_at:
                raise ConflictError(
                    "Contract was modified by another request",
                    details={"updated_at": contract.updated_at},
                )
            if contract.is_locked:
                raise ConflictError("Contract terms are locked once signing has started")

            updated = self._validated({**contract.to_document(), **changes, "updated_at": now_iso()})
            self._store(row, updated)

        logger.info("contract_updated", contract_id=contract_id, fields=sorted(changes))
        return updated.to_document()

    def sign(
        self,
        contract_id: str,
        signer: SignerType,
        signature: str,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> dict[str, Any]:
        """Record one party's signature and finalize when both have signed.

        On full execution a collaboration is created and both parties are
        notified, in the same transaction as the signature.

        Returns:
            ``{success, contract, fullyExecuted, message}``.

        Raises:
            NotFoundError: If no contract has this id.
            InvalidTransitionError: If *signer* already signed or the
                contract is fully executed.
        """
        with self._lock, self._db.transaction():
            row, contract = self._load(contract_id)

            machine = ContractSignatureMachine(contract.signature_data.state)
            new_state = machine.trigger(_SIGN_EVENTS[signer])

            timestamp = now_iso()
            signature_updates: dict[str, Any] = {
                f"{signer}_signed": True,
                f"{signer}_signature_date": timestamp,
                f"{signer}_signature_data": SignatureRecord(
                    signature=signature,
                    ip_address=ip_address,
                    user_agent=user_agent,
                    timestamp=timestamp,
                ),
            }
            fully_executed = new_state == ContractState.FULLY_EXECUTED
            if fully_executed:
                signature_updates["contract_finalized"] = True
                signature_updates["finalization_date"] = timestamp

            updated = contract.model_copy(
                update={
                    "signature_data": contract.signature_data.model_copy(update=signature_updates),
                    "status": CONTRACT_STATUS_BY_STATE[new_state],
                    "updated_at": timestamp,
                }
            )
            updated = self._validated(updated.to_document())
            self._store(row, updated)

            if fully_executed:
                self._on_fully_executed(row, updated)

        if fully_executed:
            CONTRACTS_EXECUTED.inc()
        logger.info(
            "contract_signed",
            contract_id=contract_id,
            signer=str(signer),
            state=str(new_state),
        )
        return {
            "success": True,
            "contract": updated.to_document(),
            "fullyExecuted": fully_executed,
            "message": (
                "Contract fully executed! Both parties have signed."
                if fully_executed
                else f"Contract signed by {signer}. Waiting for other party."
            ),
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, contract_id: str) -> tuple[dict[str, Any], Contract]:
        """Fetch the contract row by id and parse its document."""
        row = self._communications.get_by_external_id(contract_id, message_type=MessageType.CONTRACT)
        if row is None:
            raise NotFoundError("Contract", contract_id)
        return row, self._validated(load_json(row["content"], default={}))

    @staticmethod
    def _validated(document: dict[str, Any]) -> Contract:
        try:
            return Contract.model_validate(document)
        except ValidationError as exc:
            logger.error("contract_document_invalid", errors=exc.errors(include_url=False))
            raise InfluencerFlowError("Stored contract document is invalid") from exc

    def _store(self, row: dict[str, Any], contract: Contract) -> None:
        """Write the document back to its row and mirror it on the negotiation."""
        document = contract.to_document()
        self._communications.update_content(row["id"], dump_json(document))
        if self._negotiations.get(contract.negotiation_id) is not None:
            self._negotiations.update(contract.negotiation_id, {"contract_data": document})

    def _on_fully_executed(self, row: dict[str, Any], contract: Contract) -> None:
        """Create the collaboration and notify both parties."""
        negotiation = self._negotiations.get(contract.negotiation_id)
        campaign_id = (negotiation or {}).get("campaign_id") or row["campaign_id"]
        creator_id = (negotiation or {}).get("creator_id") or row["creator_id"]
        campaign = self._campaigns.get(campaign_id) if campaign_id else None
        brand_id = campaign["brand_id"] if campaign else None

        if self._collaborations.get_by_contract(contract.id) is None:
            compensation = contract.contract_terms.get("compensation") or {}
            collaboration = self._collaborations.create(
                campaign_id=campaign_id,
                creator_id=creator_id,
                brand_id=brand_id,
                contract_id=contract.id,
                agreed_rate=compensation.get("total_amount") or 0,
                total_deliverables=deliverable_count(contract.contract_terms),
            )
            logger.info(
                "collaboration_created",
                collaboration_id=collaboration["id"],
                contract_id=contract.id,
            )

        title = (campaign or {}).get("title") or "your campaign"
        if brand_id:
            self._notifications.create(
                user_id=brand_id,
                title="Contract fully executed",
                message=f"Both parties have signed the contract for {title}. The collaboration is now active.",
                type_="contract",
                related_id=contract.id,
                action_url=f"/dashboard/campaigns/{campaign_id}",
            )
        if creator_id:
            self._notifications.create(
                user_id=creator_id,
                title="Contract fully executed",
                message=f"Both parties have signed the contract for {title}. You can start on the deliverables.",
                type_="contract",
                related_id=contract.id,
                action_url="/dashboard/collaborations",
            )

    def _negotiation_details(
        self, negotiation_id: str, creator_id: str | None, campaign_id: str | None
    ) -> dict[str, Any]:
        negotiation = self._negotiations.get(negotiation_id) or {}
        return {
            "id": negotiation_id,
            "creator_id": creator_id,
            "campaign_id": campaign_id,
            "current_terms": negotiation.get("current_terms") or {},
            "creator_terms": negotiation.get("creator_terms") or {},
            "status": negotiation.get("status") or NegotiationStatus.CONTRACTED.value,
            "creator_profiles": self._directory.get_creator_profile(creator_id),
            "users": self._user_summary(self._directory.get_user(creator_id)) if creator_id else None,
            "campaigns": _campaign_summary(
                self._campaigns.get(campaign_id) if campaign_id else None,
                "id",
                "title",
                "description",
                "budget_min",
                "budget_max",
            ),
        }

    @staticmethod
    def _user_summary(user: dict[str, Any] | None) -> dict[str, Any] | None:
        if user is None:
            return None
        return {"id": user["id"], "full_name": user.get("full_name"), "email": user.get("email")}
