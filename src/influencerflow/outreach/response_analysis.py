"""Rule-based analysis of a creator's reply to outreach.

Extracts interest, quoted dollar amounts, deliverables and a timeline from the
message text, then scores the implied total against the campaign budget.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from influencerflow.domain.types import InterestLevel
from influencerflow.pricing import as_number

HIGH_INTEREST_PHRASES = ("very interested", "would love to", "love to", "excited")
LOW_INTEREST_PHRASES = ("not interested", "no thanks", "decline")

# (keywords, deliverable) in extraction order
DELIVERABLE_KEYWORDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("post",), "instagram_post"),
    (("story", "stories"), "instagram_story"),
    (("reel",), "instagram_reel"),
    (("video",), "video_content"),
    (("blog",), "blog_post"),
)

AMOUNT_PATTERN = re.compile(r"\$(\d+(?:,\d{3})*(?:\.\d{2})?)")
TIMELINE_PATTERN = re.compile(r"(\d+)\s*(day|week|month)s?")

# Characters either side of an amount searched for its deliverable keyword
_CONTEXT_WINDOW = 20

DEFAULT_MAX_ROUNDS = 3
AUTO_APPROVE_THRESHOLD = 0.1


@dataclass(frozen=True)
class Amount:
    value: Decimal
    start: int
    end: int


def interest_level(content: str) -> InterestLevel:
    """High on enthusiastic phrasing, low on refusals, otherwise medium."""
    if any(phrase in content for phrase in HIGH_INTEREST_PHRASES):
        return InterestLevel.HIGH
    if any(phrase in content for phrase in LOW_INTEREST_PHRASES):
        return InterestLevel.LOW
    return InterestLevel.MEDIUM


def find_amounts(content: str) -> list[Amount]:
    """Every ``$`` amount in *content*, in order of appearance."""
    return [
        Amount(Decimal(match.group(1).replace(",", "")), match.start(), match.end())
        for match in AMOUNT_PATTERN.finditer(content)
    ]


def find_deliverables(content: str) -> list[str]:
    return [
        deliverable
        for keywords, deliverable in DELIVERABLE_KEYWORDS
        if any(keyword in content for keyword in keywords)
    ]


def find_timeline(content: str) -> str | None:
    match = TIMELINE_PATTERN.search(content)
    return match.group(0) if match else None


def _amount_near(content: str, amounts: list[Amount], keyword: str) -> Decimal | None:
    for amount in amounts:
        window = content[max(amount.start - _CONTEXT_WINDOW, 0) : amount.end + _CONTEXT_WINDOW]
        if keyword in window:
            return amount.value
    return None


def extract_rates(content: str, amounts: list[Amount]) -> dict[str, Decimal]:
    """Map quoted amounts to per-deliverable and total rates.

    Falls back to the first amount as ``total_rate`` when no phrasing ties an
    amount to a deliverable or a package total.
    """
    if not amounts:
        return {}

    rates: dict[str, Decimal] = {}
    if "per post" in content:
        rates["rate_per_post"] = amounts[0].value
    if "per story" in content or "story set" in content:
        story_rate = _amount_near(content, amounts, "story")
        if story_rate is not None:
            rates["rate_per_story"] = story_rate
    if "per reel" in content:
        reel_rate = _amount_near(content, amounts, "reel")
        if reel_rate is not None:
            rates["rate_per_reel"] = reel_rate
    if any(phrase in content for phrase in ("total package", "complete campaign", "total:")):
        rates["total_rate"] = amounts[-1].value

    if not rates:
        rates["total_rate"] = amounts[0].value
    return rates


def proposed_total(rates: dict[str, Decimal], deliverable_count: int) -> Decimal | None:
    """The package total implied by the extracted rates.

    The explicit total wins; otherwise the post rate times the number of
    deliverables; otherwise one reel plus two posts.
    """
    if rates.get("total_rate"):
        return rates["total_rate"]
    if rates.get("rate_per_post"):
        return rates["rate_per_post"] * (deliverable_count or 1)
    estimate = rates.get("rate_per_reel", Decimal(0)) + 2 * rates.get("rate_per_post", Decimal(0))
    return estimate or None


def budget_compatibility(
    total: Decimal | None, budget_min: Decimal | None, budget_max: Decimal | None
) -> float:
    """Score *total* against the budget; later bands override earlier ones.

    0.5 when no total is known, 0.8 within the maximum, 0.9 at or under the
    minimum, 0.2 beyond one and a half times the maximum.
    """
    score = 0.5
    if not total:
        return score
    if budget_max is not None and total <= budget_max:
        score = 0.8
    if budget_min is not None and total <= budget_min:
        score = 0.9
    if budget_max is not None and total > budget_max * Decimal("1.5"):
        score = 0.2
    return score


def has_negotiable_terms(extracted_terms: dict[str, Any]) -> bool:
    """True when a rate, a deliverable or a timeline was extracted."""
    rate_keys = ("rate_per_post", "rate_per_story", "rate_per_reel", "total_rate")
    return (
        any(extracted_terms.get(key) for key in rate_keys)
        or bool(extracted_terms.get("deliverables"))
        or bool(extracted_terms.get("timeline"))
    )


def analyze_creator_response(
    message: str | None,
    budget_min: Decimal | None = None,
    budget_max: Decimal | None = None,
) -> dict[str, Any]:
    """Analyze a creator's reply against the campaign budget.

    Returns:
        ``interest_level``, ``extracted_terms``, ``budget_compatibility``,
        ``negotiation_points``, ``recommended_strategy``,
        ``analysis_summary`` and ``confidence_score``.
    """
    content = (message or "").lower()

    interest = interest_level(content)
    amounts = find_amounts(content)
    deliverables = find_deliverables(content)
    timeline = find_timeline(content)
    rates = extract_rates(content, amounts)

    total = proposed_total(rates, len(deliverables))
    compatibility = budget_compatibility(total, budget_min, budget_max)
    over_budget = bool(total and budget_max is not None and total > budget_max)

    negotiation_points: list[str] = []
    if over_budget:
        negotiation_points.append("rate_adjustment")
    if not timeline:
        negotiation_points.append("timeline_clarification")
    if not deliverables:
        negotiation_points.append("deliverable_specification")

    rate_text = f"Proposed rate: ${as_number(total)}" if total else "No specific rate mentioned"
    return {
        "interest_level": interest.value,
        "extracted_terms": {
            "deliverables": deliverables,
            "timeline": timeline,
            **{key: as_number(value) for key, value in rates.items()},
        },
        "budget_compatibility": compatibility,
        "negotiation_points": negotiation_points,
        "recommended_strategy": {
            "approach": "accept" if compatibility > 0.7 else "counter",
            "priority": "reduce_cost" if over_budget else "optimize_value",
            "max_rounds": DEFAULT_MAX_ROUNDS,
            "auto_approve_threshold": AUTO_APPROVE_THRESHOLD,
        },
        "analysis_summary": (
            f"Creator shows {interest.value} interest. {rate_text}. "
            f"Budget compatibility: {round(compatibility * 100)}%."
        ),
        "confidence_score": 0.8 if deliverables and amounts else 0.6,
    }
