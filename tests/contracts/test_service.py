"""Tests for contract generation, edits and the signature flow."""

from __future__ import annotations

from typing import Any

import pytest

from influencerflow.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)
from influencerflow.domain.types import SignerType


@pytest.fixture
def contract_service(services: dict[str, Any]):
    return services["contract_service"]


@pytest.fixture
def agreed(make_negotiation) -> dict[str, Any]:
    return make_negotiation(status="agreed", current_terms={"total_rate": 2000})


@pytest.fixture
def contract(contract_service, agreed) -> dict[str, Any]:
    return contract_service.generate(agreed["id"])


class TestGenerate:
    def test_creates_draft_and_marks_negotiation_contracted(
        self, services, contract_service, agreed
    ) -> None:
        contract = contract_service.generate(agreed["id"])
        assert contract["id"].startswith("contract_")
        assert contract["id"].endswith(agreed["id"][:8])
        assert contract["status"] == "draft"
        assert contract["legal_review"]["status"] == "pending"
        assert contract["negotiations"]["status"] == "contracted"

        negotiation = services["negotiations"].get(agreed["id"])
        assert negotiation["status"] == "contracted"
        assert negotiation["contract_data"]["id"] == contract["id"]

        row = services["communications"].get_by_external_id(contract["id"])
        assert row["message_type"] == "contract"
        assert row["subject"] == "CONTRACT: Summer Glow Launch - Maya Creates"

    @pytest.mark.parametrize("status", ["draft", "active", "declined"])
    def test_requires_agreed_negotiation(self, services, contract_service, make_negotiation, status):
        negotiation = make_negotiation(status=status)
        with pytest.raises(ConflictError):
            contract_service.generate(negotiation["id"])
        assert services["negotiations"].get(negotiation["id"])["status"] == status
        assert services["communications"].query(message_type="contract") == []

    def test_cannot_generate_twice(self, contract_service, contract) -> None:
        with pytest.raises(ConflictError):
            contract_service.generate(contract["negotiation_id"])

    def test_unknown_negotiation(self, contract_service) -> None:
        with pytest.raises(NotFoundError):
            contract_service.generate("missing")

    def test_failed_write_leaves_negotiation_agreed(
        self, services, contract_service, agreed, monkeypatch
    ) -> None:
        def fail(**kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(services["communications"], "insert", fail)
        with pytest.raises(RuntimeError):
            contract_service.generate(agreed["id"])
        assert services["negotiations"].get(agreed["id"])["status"] == "agreed"


class TestSign:
    def test_first_signature_is_partial(self, contract_service, contract) -> None:
        result = contract_service.sign(contract["id"], SignerType.BRAND, "Brand Owner")
        assert result["fullyExecuted"] is False
        assert result["message"] == "Contract signed by brand. Waiting for other party."
        signed = result["contract"]
        assert signed["status"] == "partially_signed"
        assert signed["signature_data"]["brand_signed"] is True
        assert signed["signature_data"]["brand_signature_data"]["signature"] == "Brand Owner"

    def test_both_signatures_execute_and_create_collaboration(
        self, services, contract_service, contract, brand, creator
    ) -> None:
        contract_service.sign(contract["id"], SignerType.CREATOR, "Maya", ip_address="10.0.0.1")
        result = contract_service.sign(contract["id"], SignerType.BRAND, "Brand Owner")

        assert result["fullyExecuted"] is True
        assert result["message"] == "Contract fully executed! Both parties have signed."
        assert result["contract"]["status"] == "signed"
        assert result["contract"]["signature_data"]["contract_finalized"] is True

        collaboration = services["collaborations"].get_by_contract(contract["id"])
        assert collaboration["status"] == "active"
        assert collaboration["agreed_rate"] == 2000
        assert collaboration["brand_id"] == brand["id"]
        assert collaboration["total_deliverables"] == 2

        brand_notes = services["notifications"].list_for_user(brand["id"])
        creator_notes = services["notifications"].list_for_user(creator["id"])
        assert [n["title"] for n in brand_notes] == ["Contract fully executed"]
        assert [n["title"] for n in creator_notes] == ["Contract fully executed"]

    def test_same_party_cannot_sign_twice(self, contract_service, contract) -> None:
        contract_service.sign(contract["id"], SignerType.CREATOR, "Maya")
        with pytest.raises(InvalidTransitionError):
            contract_service.sign(contract["id"], SignerType.CREATOR, "Maya again")
        assert contract_service.get(contract["id"])["status"] == "partially_signed"

    def test_executed_contract_rejects_signatures(self, contract_service, contract) -> None:
        contract_service.sign(contract["id"], SignerType.CREATOR, "Maya")
        contract_service.sign(contract["id"], SignerType.BRAND, "Brand")
        with pytest.raises(InvalidTransitionError):
            contract_service.sign(contract["id"], SignerType.BRAND, "Brand")

    def test_unknown_contract(self, contract_service) -> None:
        with pytest.raises(NotFoundError):
            contract_service.sign("contract_0_missing", SignerType.BRAND, "x")


class TestUpdate:
    def test_edits_unsigned_contract(self, contract_service, contract) -> None:
        updated = contract_service.update(contract["id"], {"contract_type": "ambassador"})
        assert updated["contract_type"] == "ambassador"
        assert updated["updated_at"] >= contract["updated_at"]

    def test_rejects_non_editable_fields(self, contract_service, contract) -> None:
        with pytest.raises(ValidationFailedError):
            contract_service.update(contract["id"], {"status": "signed"})

    def test_rejects_empty_changes(self, contract_service, contract) -> None:
        with pytest.raises(ValidationFailedError):
            contract_service.update(contract["id"], {})

    def test_rejects_wrong_value_types(self, contract_service, contract) -> None:
        with pytest.raises(ValidationFailedError, match="contract_terms"):
            contract_service.update(contract["id"], {"contract_terms": "oops"})

    def test_locked_after_first_signature(self, contract_service, contract) -> None:
        contract_service.sign(contract["id"], SignerType.BRAND, "Brand")
        with pytest.raises(ConflictError):
            contract_service.update(contract["id"], {"contract_type": "other"})

    def test_stale_expected_updated_at(self, contract_service, contract) -> None:
        contract_service.update(contract["id"], {"contract_type": "first"})
        with pytest.raises(ConflictError):
            contract_service.update(
                contract["id"],
                {"contract_type": "second"},
                expected_updated_at=contract["updated_at"],
            )


class TestReads:
    def test_get_includes_negotiation_details(self, contract_service, contract) -> None:
        fetched = contract_service.get(contract["id"])
        assert fetched["id"] == contract["id"]
        assert fetched["negotiations"]["id"] == contract["negotiation_id"]

    def test_list_for_campaign(self, contract_service, contract, campaign) -> None:
        contracts = contract_service.list_for_campaign(campaign["id"])
        assert [c["id"] for c in contracts] == [contract["id"]]
        assert contracts[0]["negotiations"]["campaigns"]["title"] == "Summer Glow Launch"
        assert contracts[0]["negotiations"]["creator_profiles"]["display_name"] == "Maya Creates"

    def test_list_for_unknown_campaign_is_empty(self, contract_service) -> None:
        assert contract_service.list_for_campaign("missing") == []
