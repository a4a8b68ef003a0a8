"""Tests for counter-offer analysis and simulated auto-responses."""

from __future__ import annotations

import pytest

from influencerflow.negotiations.analysis import (
    analyze_counter_offer,
    generate_auto_response,
    likelihood_of_acceptance,
    negotiation_health,
)


def _negotiation(asked=2000, current_round=0, max_rounds=3):
    return {
        "creator_terms": {"total_rate": asked},
        "current_round": current_round,
        "max_rounds": max_rounds,
    }


@pytest.mark.parametrize(
    ("variance", "expected"), [(0.0, 0.9), (0.099, 0.9), (0.1, 0.7), (0.199, 0.7), (0.2, 0.4)]
)
def test_likelihood_bands(variance: float, expected: float) -> None:
    assert likelihood_of_acceptance(variance) == expected


@pytest.mark.parametrize(
    ("variance", "expected"), [(0.1, "good"), (0.2, "moderate"), (0.39, "moderate"), (0.4, "poor")]
)
def test_health_bands(variance: float, expected: str) -> None:
    assert negotiation_health(variance) == expected


class TestAnalyzeCounterOffer:
    def test_close_offer_auto_responds(self) -> None:
        analysis = analyze_counter_offer({"total_rate": 1900}, _negotiation())
        assert analysis["variance_from_creator_terms"] == pytest.approx(0.05)
        assert analysis["should_auto_respond"] is True
        assert analysis["recommended_next_steps"] == ["auto_respond"]

    def test_far_offer_waits_for_creator(self) -> None:
        analysis = analyze_counter_offer({"total_rate": 1000}, _negotiation())
        assert analysis["should_auto_respond"] is False
        assert analysis["negotiation_health"] == "poor"
        assert analysis["insights"] == [
            "Offered rate is significantly lower - may need justification"
        ]

    def test_no_auto_response_after_max_rounds(self) -> None:
        analysis = analyze_counter_offer(
            {"total_rate": 1950}, _negotiation(current_round=3, max_rounds=3)
        )
        assert analysis["should_auto_respond"] is False

    def test_higher_offer_insight(self) -> None:
        analysis = analyze_counter_offer({"total_rate": 2100}, _negotiation())
        assert analysis["insights"] == [
            "Offered rate is higher than creator's ask - likely to be accepted"
        ]

    def test_missing_rates_have_zero_variance(self) -> None:
        analysis = analyze_counter_offer({}, {"creator_terms": {}})
        assert analysis["variance_from_creator_terms"] == 0.0
        assert analysis["insights"] == []


class TestAutoResponse:
    def test_accepts_high_likelihood(self) -> None:
        response = generate_auto_response({"total_rate": 1900}, {"likelihood_of_acceptance": 0.9})
        assert response["action"] == "accept"
        assert response["terms"] == {"total_rate": 1900}

    def test_counters_moderate_likelihood_with_markup(self) -> None:
        response = generate_auto_response({"total_rate": 1750}, {"likelihood_of_acceptance": 0.7})
        assert response["action"] == "counter"
        assert response["terms"]["total_rate"] == 1838
        assert "$1838" in response["message"]

    def test_declines_low_likelihood(self) -> None:
        response = generate_auto_response({"total_rate": 500}, {"likelihood_of_acceptance": 0.4})
        assert response["action"] == "decline"
        assert response["terms"] == {}
