"""Tests for the contract HTTP routes."""

from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def agreed(make_negotiation) -> dict[str, Any]:
    return make_negotiation(status="agreed", current_terms={"total_rate": 1800})


def _generate(client: TestClient, negotiation_id: str) -> dict[str, Any]:
    response = client.post("/api/contracts/generate", json={"negotiationId": negotiation_id})
    assert response.status_code == 200
    return response.json()["contract"]


class TestGenerateRoute:
    def test_success(self, client: TestClient, agreed) -> None:
        response = client.post("/api/contracts/generate", json={"negotiationId": agreed["id"]})
        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["message"] == "Contract generated successfully!"
        assert body["contract"]["contract_terms"]["compensation"]["total_amount"] == 1800

    def test_missing_negotiation_id(self, client: TestClient) -> None:
        response = client.post("/api/contracts/generate", json={})
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"

    def test_not_agreed_is_conflict(self, client: TestClient, make_negotiation) -> None:
        negotiation = make_negotiation(status="active")
        response = client.post("/api/contracts/generate", json={"negotiationId": negotiation["id"]})
        assert response.status_code == 409

    def test_unknown_negotiation(self, client: TestClient) -> None:
        response = client.post("/api/contracts/generate", json={"negotiationId": "missing"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Negotiation not found"


class TestSignRoute:
    def test_records_client_details(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        response = client.post(
            f"/api/contracts/{contract['id']}/sign",
            json={"signerType": "creator", "signatureData": "Maya"},
            headers={"User-Agent": "pytest-agent"},
        )
        assert response.status_code == 200
        record = response.json()["contract"]["signature_data"]["creator_signature_data"]
        assert record["user_agent"] == "pytest-agent"
        assert record["ip_address"]

    def test_missing_signature(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        response = client.post(
            f"/api/contracts/{contract['id']}/sign",
            json={"signerType": "brand", "signatureData": ""},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Signer type and signature data are required"

    def test_invalid_signer_type(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        response = client.post(
            f"/api/contracts/{contract['id']}/sign",
            json={"signerType": "agency", "signatureData": "x"},
        )
        assert response.status_code == 400

    def test_double_sign_conflict(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        url = f"/api/contracts/{contract['id']}/sign"
        client.post(url, json={"signerType": "brand", "signatureData": "B"})
        response = client.post(url, json={"signerType": "brand", "signatureData": "B"})
        assert response.status_code == 409
        assert response.json()["code"] == "INVALID_TRANSITION"


class TestPatchRoute:
    def test_expected_updated_at_must_be_string(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        response = client.patch(
            f"/api/contracts/{contract['id']}",
            json={"contract_type": "x", "expectedUpdatedAt": 5},
        )
        assert response.status_code == 400

    def test_updates_terms(self, client: TestClient, agreed) -> None:
        contract = _generate(client, agreed["id"])
        response = client.patch(
            f"/api/contracts/{contract['id']}",
            json={"legal_review": {"status": "approved"}, "expectedUpdatedAt": contract["updated_at"]},
        )
        assert response.status_code == 200
        assert response.json()["legal_review"] == {"status": "approved"}

    @pytest.mark.parametrize(
        ("body", "field"),
        [
            ({"contract_terms": "oops"}, "contract_terms"),
            ({"contract_type": None}, "contract_type"),
            ({"legal_review": ["pending"]}, "legal_review"),
        ],
    )
    def test_wrong_value_type_is_400(self, client: TestClient, agreed, body, field) -> None:
        contract = _generate(client, agreed["id"])
        response = client.patch(f"/api/contracts/{contract['id']}", json=body)

        assert response.status_code == 400
        payload = response.json()
        assert payload["code"] == "VALIDATION_FAILED"
        assert payload["detail"].startswith(f"{field}: ")

        unchanged = client.get(f"/api/contracts/{contract['id']}").json()
        assert unchanged["contract_type"] == "collaboration"


class TestReadRoutes:
    def test_get_unknown_contract(self, client: TestClient) -> None:
        response = client.get("/api/contracts/contract_1_missing")
        assert response.status_code == 404

    def test_campaign_contracts(self, client: TestClient, agreed, campaign) -> None:
        contract = _generate(client, agreed["id"])
        response = client.get(f"/api/campaigns/{campaign['id']}/contracts")
        assert [c["id"] for c in response.json()] == [contract["id"]]
