"""Contract routes: generate, fetch, edit, sign and list per campaign."""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog
from fastapi import APIRouter, Body, Request

from influencerflow.contracts.models import GenerateContractRequest, SignContractRequest
from influencerflow.domain.errors import ValidationFailedError

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["contracts"])


@router.post("/contracts/generate")
def generate_contract(request: Request, body: GenerateContractRequest) -> dict[str, Any]:
    """Generate a draft contract for an agreed negotiation."""
    contract_service = request.app.state.services["contract_service"]
    contract = contract_service.generate(body.negotiation_id, body.contract_type)
    return {
        "success": True,
        "contract": contract,
        "message": "Contract generated successfully!",
    }


@router.get("/contracts/{contract_id}")
def get_contract(request: Request, contract_id: str) -> dict[str, Any]:
    """Return a contract with its negotiation, creator and campaign details."""
    return request.app.state.services["contract_service"].get(contract_id)


@router.patch("/contracts/{contract_id}")
def update_contract(
    request: Request, contract_id: str, body: dict[str, Any] = Body(...)
) -> dict[str, Any]:
    """Edit the terms of a contract nobody has signed yet.

    ``expectedUpdatedAt`` in the body enables optimistic concurrency.
    """
    changes = dict(body)
    expected_updated_at = changes.pop("expectedUpdatedAt", None)
    if expected_updated_at is not None and not isinstance(expected_updated_at, str):
        raise ValidationFailedError("expectedUpdatedAt must be a timestamp string")
    return request.app.state.services["contract_service"].update(
        contract_id, changes, expected_updated_at=expected_updated_at
    )


@router.post("/contracts/{contract_id}/sign")
def sign_contract(request: Request, contract_id: str, body: SignContractRequest) -> dict[str, Any]:
    """Record a brand or creator signature.

    Falls back to the caller's address and ``User-Agent`` header when the
    body does not carry them.
    """
    ip_address = body.ip_address or (request.client.host if request.client else None)
    user_agent = body.user_agent or request.headers.get("user-agent")
    return request.app.state.services["contract_service"].sign(
        contract_id,
        body.signer_type,
        body.signature_data,
        ip_address=ip_address,
        user_agent=user_agent,
    )


@router.get("/campaigns/{campaign_id}/contracts")
def list_campaign_contracts(request: Request, campaign_id: str) -> list[dict[str, Any]]:
    """List a campaign's contracts; an empty list on storage errors."""
    try:
        return request.app.state.services["contract_service"].list_for_campaign(campaign_id)
    except sqlite3.Error:
        logger.exception("campaign_contracts_query_failed", campaign_id=campaign_id)
        return []
