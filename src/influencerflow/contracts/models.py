"""Request bodies for the contract routes."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from influencerflow.domain.types import SignerType


class GenerateContractRequest(BaseModel):
    """Body of ``POST /api/contracts/generate``."""

    model_config = ConfigDict(populate_by_name=True)

    negotiation_id: str = Field(alias="negotiationId", min_length=1)
    contract_type: str = Field(default="collaboration", alias="contractType")


class SignContractRequest(BaseModel):
    """Body of ``POST /api/contracts/{id}/sign``."""

    model_config = ConfigDict(populate_by_name=True)

    signer_type: SignerType = Field(alias="signerType")
    signature_data: str = Field(alias="signatureData")
    ip_address: str | None = Field(default=None, alias="ipAddress")
    user_agent: str | None = Field(default=None, alias="userAgent")

    @field_validator("signature_data")
    @classmethod
    def signature_must_not_be_empty(cls, v: str) -> str:
        """Reject blank signatures."""
        if not v.strip():
            raise ValueError("Signer type and signature data are required")
        return v


class ContractUpdate(BaseModel):
    """Fields a contract PATCH may change; unset fields keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    contract_terms: dict[str, Any] = Field(default_factory=dict)
    contract_type: str = Field(default="collaboration", min_length=1)
    legal_review: dict[str, Any] = Field(default_factory=dict)

    def changes(self) -> dict[str, Any]:
        """The supplied fields only, JSON-ready."""
        return self.model_dump(mode="json", include=self.model_fields_set)
