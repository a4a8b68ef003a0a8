"""Pydantic v2 models for the contract document and signature bookkeeping."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from influencerflow.domain.types import (
    CONTRACT_STATUS_BY_STATE,
    ContractState,
    ContractStatus,
)


class SignatureRecord(BaseModel):
    """Evidence captured when a party signs."""

    model_config = ConfigDict(frozen=True)

    signature: str
    ip_address: str | None = None
    user_agent: str | None = None
    timestamp: str


class SignatureData(BaseModel):
    """Per-party signature flags stored inside the contract document."""

    brand_signed: bool = False
    creator_signed: bool = False
    brand_signature_date: str | None = None
    creator_signature_date: str | None = None
    brand_signature_data: SignatureRecord | None = None
    creator_signature_data: SignatureRecord | None = None
    contract_finalized: bool = False
    finalization_date: str | None = None

    @property
    def state(self) -> ContractState:
        """Signature-flow state implied by the two signed flags."""
        if self.brand_signed and self.creator_signed:
            return ContractState.FULLY_EXECUTED
        if self.brand_signed:
            return ContractState.BRAND_SIGNED
        if self.creator_signed:
            return ContractState.CREATOR_SIGNED
        return ContractState.DRAFT


class Contract(BaseModel):
    """A contract document, serialized into a communication log row.

    The ``status`` field is always the one implied by ``signature_data``;
    a document where the two disagree is rejected.
    """

    id: str
    negotiation_id: str
    contract_type: str = "collaboration"
    contract_terms: dict[str, Any] = Field(default_factory=dict)
    status: ContractStatus = ContractStatus.DRAFT
    legal_review: dict[str, Any] = Field(default_factory=dict)
    signature_data: SignatureData = Field(default_factory=SignatureData)
    created_at: str
    updated_at: str

    @model_validator(mode="after")
    def status_must_match_signatures(self) -> Contract:
        """Ensure the persisted status agrees with the signature flags."""
        expected = CONTRACT_STATUS_BY_STATE[self.signature_data.state]
        if self.status != expected:
            raise ValueError(
                f"status '{self.status}' disagrees with signature state "
                f"'{self.signature_data.state}' (expected '{expected}')"
            )
        return self

    @property
    def is_locked(self) -> bool:
        """True once either party has signed; terms are frozen from then on."""
        return self.signature_data.brand_signed or self.signature_data.creator_signed

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready dict persisted in ``communication_log.content``."""
        return self.model_dump(mode="json")
