"""Tests for negotiation updates, counter-offers and opening from replies."""

from __future__ import annotations

from typing import Any

import pytest

from influencerflow.domain.errors import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailedError,
)


@pytest.fixture
def negotiation_service(services: dict[str, Any]):
    return services["negotiation_service"]


class TestGetDetail:
    def test_includes_campaign_creator_and_rounds(self, negotiation_service, make_negotiation):
        negotiation = make_negotiation()
        detail = negotiation_service.get_detail(negotiation["id"])
        assert detail["campaigns"]["title"] == "Summer Glow Launch"
        assert detail["users"]["full_name"] == "Maya Chen"
        assert detail["creator_profiles"]["display_name"] == "Maya Creates"
        assert detail["communication_log"] is None
        assert detail["negotiation_rounds"] == []

    def test_unknown(self, negotiation_service) -> None:
        with pytest.raises(NotFoundError):
            negotiation_service.get_detail("missing")


class TestPatch:
    def test_valid_status_change(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation(status="active")
        updated = negotiation_service.patch(negotiation["id"], {"status": "agreed"})
        assert updated["status"] == "agreed"

    def test_invalid_status_change(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation(status="draft")
        with pytest.raises(InvalidTransitionError):
            negotiation_service.patch(negotiation["id"], {"status": "contracted"})

    def test_unknown_status_value(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        with pytest.raises(ValidationFailedError):
            negotiation_service.patch(negotiation["id"], {"status": "paused"})

    def test_rejects_fields_outside_whitelist(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        with pytest.raises(ValidationFailedError) as exc_info:
            negotiation_service.patch(negotiation["id"], {"campaign_id": "other"})
        assert "campaign_id" in exc_info.value.message

    def test_rejects_bad_max_rounds(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        with pytest.raises(ValidationFailedError):
            negotiation_service.patch(negotiation["id"], {"max_rounds": 0})

    def test_same_status_is_a_no_op(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation(status="active")
        updated = negotiation_service.patch(
            negotiation["id"], {"status": "active", "strategy": {"approach": "firm"}}
        )
        assert updated["status"] == "active"
        assert updated["strategy"] == {"approach": "firm"}


class TestCounterOffer:
    def test_close_offer_is_accepted(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        result = negotiation_service.counter_offer(negotiation["id"], {"total_rate": 1900})
        detail = result["negotiation"]
        assert detail["status"] == "agreed"
        assert detail["current_round"] == 2
        assert [r["initiated_by"] for r in detail["negotiation_rounds"]] == ["brand", "ai"]
        assert detail["negotiation_rounds"][1]["response_type"] == "accept"

    def test_moderate_offer_gets_counter(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        result = negotiation_service.counter_offer(negotiation["id"], {"total_rate": 1750})
        detail = result["negotiation"]
        assert detail["status"] == "active"
        ai_round = detail["negotiation_rounds"][1]
        assert ai_round["response_type"] == "counter"
        assert ai_round["proposed_terms"]["total_rate"] == 1838

    def test_far_offer_records_one_round(self, negotiation_service, make_negotiation) -> None:
        negotiation = make_negotiation()
        result = negotiation_service.counter_offer(
            negotiation["id"], {"total_rate": 1000}, response_message="Best we can do"
        )
        detail = result["negotiation"]
        assert detail["status"] == "active"
        assert detail["current_round"] == 1
        assert detail["current_terms"] == {"total_rate": 1000}
        assert detail["negotiation_rounds"][0]["response_message"] == "Best we can do"
        assert result["ai_analysis"]["should_auto_respond"] is False

    @pytest.mark.parametrize("status", ["agreed", "declined", "contracted"])
    def test_closed_negotiations_reject_offers(
        self, negotiation_service, make_negotiation, status
    ) -> None:
        negotiation = make_negotiation(status=status)
        with pytest.raises(ConflictError):
            negotiation_service.counter_offer(negotiation["id"], {"total_rate": 1900})


class TestOpenFromResponse:
    def _communication(self, services, campaign, creator) -> dict[str, Any]:
        return services["communications"].insert(
            channel="email",
            direction="inbound",
            message_type="reply",
            subject="Re: Collaboration",
            content="I'd love to, $1,500 total",
            campaign_id=campaign["id"],
            creator_id=creator["id"],
        )

    def test_creates_draft_once(self, services, negotiation_service, campaign, creator) -> None:
        communication = self._communication(services, campaign, creator)
        analysis = {
            "extracted_terms": {"rates": {"total_rate": 1500}},
            "recommended_strategy": {"max_rounds": 3},
        }
        negotiation_id, created = negotiation_service.open_from_response(communication, analysis)
        assert created is True
        negotiation = services["negotiations"].get(negotiation_id)
        assert negotiation["status"] == "draft"
        assert negotiation["communication_id"] == communication["id"]

        again, created_again = negotiation_service.open_from_response(communication, analysis)
        assert again == negotiation_id
        assert created_again is False

    def test_requires_campaign_and_creator(self, negotiation_service) -> None:
        with pytest.raises(ValidationFailedError):
            negotiation_service.open_from_response({"id": "x"}, {})
