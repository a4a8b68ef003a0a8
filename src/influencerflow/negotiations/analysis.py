"""Counter-offer analysis and simulated creator auto-responses.

The analysis compares a brand's proposed total against the creator's
original ask and bands the relative variance into an acceptance likelihood
and a negotiation health label.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from influencerflow.pricing import as_number, percentage_of, rate_variance, to_decimal

# Auto-respond only while proposals stay this close to the creator's ask
AUTO_RESPOND_VARIANCE = 0.15
# Counter-offers raise the brand's total by this percentage
COUNTER_MARKUP_PERCENT = 105


def likelihood_of_acceptance(variance: float) -> float:
    """0.9 under 10% variance, 0.7 under 20%, otherwise 0.4."""
    if variance < 0.1:
        return 0.9
    if variance < 0.2:
        return 0.7
    return 0.4


def negotiation_health(variance: float) -> str:
    """``good`` under 20% variance, ``moderate`` under 40%, otherwise ``poor``."""
    if variance < 0.2:
        return "good"
    if variance < 0.4:
        return "moderate"
    return "poor"


def analyze_counter_offer(
    proposed_terms: dict[str, Any], negotiation: dict[str, Any]
) -> dict[str, Any]:
    """Score a brand counter-offer against the creator's original terms.

    Args:
        proposed_terms: The brand's proposed terms (``total_rate`` is compared).
        negotiation: The negotiation row, with ``creator_terms``,
            ``current_round`` and ``max_rounds``.

    Returns:
        A JSON-ready analysis dict.
    """
    creator_terms = negotiation.get("creator_terms") or {}
    proposed_rate = to_decimal(proposed_terms.get("total_rate"))
    asked_rate = to_decimal(creator_terms.get("total_rate"))

    variance = rate_variance(proposed_rate, asked_rate)
    should_auto_respond = (
        variance < AUTO_RESPOND_VARIANCE
        and negotiation.get("current_round", 0) < negotiation.get("max_rounds", 3)
    )

    insights: list[str] = []
    if proposed_rate and asked_rate:
        if proposed_rate > asked_rate:
            insights.append("Offered rate is higher than creator's ask - likely to be accepted")
        elif proposed_rate < asked_rate * Decimal("0.8"):
            insights.append("Offered rate is significantly lower - may need justification")

    return {
        "variance_from_creator_terms": variance,
        "should_auto_respond": should_auto_respond,
        "likelihood_of_acceptance": likelihood_of_acceptance(variance),
        "insights": insights,
        "negotiation_health": negotiation_health(variance),
        "recommended_next_steps": (
            ["auto_respond"] if should_auto_respond else ["send_to_creator", "wait_for_response"]
        ),
    }


def generate_auto_response(
    brand_terms: dict[str, Any], analysis: dict[str, Any]
) -> dict[str, Any]:
    """Simulate the creator's reply to a brand counter-offer.

    Accepts above 0.8 likelihood, counters at +5% above 0.6, otherwise
    declines.

    Returns:
        ``{action, terms, message, reasoning}``.
    """
    likelihood = analysis["likelihood_of_acceptance"]
    if likelihood > 0.8:
        return {
            "action": "accept",
            "terms": brand_terms,
            "message": "I accept your terms! This looks great. When can we get started?",
            "reasoning": "High likelihood of acceptance based on terms analysis",
        }

    if likelihood > 0.6:
        counter_terms = dict(brand_terms)
        total = to_decimal(brand_terms.get("total_rate"))
        if total:
            counter_terms["total_rate"] = percentage_of(total, COUNTER_MARKUP_PERCENT)
        return {
            "action": "counter",
            "terms": counter_terms,
            "message": (
                "Thanks for the offer. I'm close to accepting. "
                f"Could we do ${counter_terms.get('total_rate')} instead? "
                "That would work perfectly for me."
            ),
            "reasoning": "Moderate likelihood - generated minor counter-offer",
        }

    return {
        "action": "decline",
        "terms": {},
        "message": "Thanks for the offer, but I don't think we can make this work with the current terms.",
        "reasoning": "Low likelihood of acceptance",
    }


def describe_rate(terms: dict[str, Any]) -> Any:
    """The ``total_rate`` of *terms* as a JSON number, or ``None``."""
    rate = to_decimal(terms.get("total_rate"))
    return as_number(rate) if rate is not None else None
