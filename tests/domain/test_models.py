"""Tests for the contract document and signature models."""

import pytest
from pydantic import ValidationError

from influencerflow.domain.models import Contract, SignatureData, SignatureRecord
from influencerflow.domain.types import ContractState, ContractStatus

NOW = "2026-05-01T12:00:00+00:00"


def _record() -> SignatureRecord:
    return SignatureRecord(signature="Jane Brand", ip_address="10.0.0.1", timestamp=NOW)


class TestSignatureData:
    def test_defaults_to_draft(self):
        data = SignatureData()
        assert data.state == ContractState.DRAFT

    @pytest.mark.parametrize(
        ("brand", "creator", "expected"),
        [
            (True, False, ContractState.BRAND_SIGNED),
            (False, True, ContractState.CREATOR_SIGNED),
            (True, True, ContractState.FULLY_EXECUTED),
        ],
    )
    def test_state_follows_flags(self, brand, creator, expected):
        data = SignatureData(brand_signed=brand, creator_signed=creator)
        assert data.state == expected

    def test_signature_record_is_frozen(self):
        record = _record()
        with pytest.raises(ValidationError):
            record.signature = "Someone Else"


class TestContract:
    def test_draft_contract_is_unlocked(self):
        contract = Contract(id="c1", negotiation_id="n1", created_at=NOW, updated_at=NOW)
        assert contract.status == ContractStatus.DRAFT
        assert contract.is_locked is False

    def test_partially_signed_contract_is_locked(self):
        contract = Contract(
            id="c1",
            negotiation_id="n1",
            status=ContractStatus.PARTIALLY_SIGNED,
            signature_data=SignatureData(brand_signed=True, brand_signature_data=_record()),
            created_at=NOW,
            updated_at=NOW,
        )
        assert contract.is_locked is True

    def test_status_must_agree_with_signatures(self):
        with pytest.raises(ValidationError, match="disagrees with signature state"):
            Contract(
                id="c1",
                negotiation_id="n1",
                status=ContractStatus.SIGNED,
                signature_data=SignatureData(brand_signed=True),
                created_at=NOW,
                updated_at=NOW,
            )

    def test_to_document_is_json_ready(self):
        contract = Contract(
            id="c1",
            negotiation_id="n1",
            contract_terms={"compensation": {"total_amount": 1500}},
            created_at=NOW,
            updated_at=NOW,
        )
        document = contract.to_document()
        assert document["status"] == "draft"
        assert document["signature_data"]["brand_signed"] is False
        assert document["contract_terms"] == {"compensation": {"total_amount": 1500}}

    def test_document_round_trips(self):
        contract = Contract(
            id="c1",
            negotiation_id="n1",
            status=ContractStatus.SIGNED,
            signature_data=SignatureData(
                brand_signed=True,
                creator_signed=True,
                brand_signature_data=_record(),
                creator_signature_data=_record(),
                contract_finalized=True,
                finalization_date=NOW,
            ),
            created_at=NOW,
            updated_at=NOW,
        )
        restored = Contract.model_validate(contract.to_document())
        assert restored == contract
        assert restored.signature_data.state == ContractState.FULLY_EXECUTED
