"""Contract term generation from an agreed negotiation.

Builds the ``contract_terms`` document: parties, a 30/50/20 payment schedule,
deliverables, usage rights, performance bonus, legal terms and approval
process. All money figures are whole-dollar amounts.
"""

from __future__ import annotations

import re
from typing import Any

from influencerflow.pricing import DEFAULT_TOTAL_RATE, as_number, percentage_of, to_decimal
from influencerflow.store.serializers import now_iso

# (milestone, percent, due date)
PAYMENT_SCHEDULE: tuple[tuple[str, int, str], ...] = (
    ("Contract Signature", 30, "Upon contract execution"),
    ("Content Delivery", 50, "Upon delivery of approved content"),
    ("Campaign Completion", 20, "30 days after campaign completion"),
)

PERFORMANCE_BONUS_PERCENT = 10
DEFAULT_MIN_ENGAGEMENT_RATE = 3.0

DEFAULT_CONTENT_REQUIREMENTS = [
    "2 Instagram Posts",
    "1 Instagram Story series",
    "1 Product review video",
]

TEMPLATE_NAME = "influencer_collaboration_standard_v2"


def _first_present(*candidates: Any) -> Any:
    """Return the first candidate that is neither None nor empty."""
    for candidate in candidates:
        if candidate not in (None, "", [], {}):
            return candidate
    return None


def agreed_total(negotiation: dict[str, Any]) -> Any:
    """The agreed total rate: current terms, then the creator's ask, then the default."""
    current_terms = negotiation.get("current_terms") or {}
    creator_terms = negotiation.get("creator_terms") or {}
    for terms in (current_terms, creator_terms):
        rate = to_decimal(terms.get("total_rate"))
        if rate:
            return rate
    return DEFAULT_TOTAL_RATE


def campaign_hashtag(title: str | None) -> str:
    """``#`` followed by the lowercased campaign title with whitespace removed."""
    if not title:
        return "#campaign"
    return "#" + re.sub(r"\s+", "", title).lower()


def build_contract_terms(
    negotiation: dict[str, Any],
    campaign: dict[str, Any] | None,
    brand_profile: dict[str, Any] | None,
    creator_profile: dict[str, Any] | None,
    creator_user: dict[str, Any] | None,
) -> dict[str, Any]:
    """Generate the full contract terms document.

    Args:
        negotiation: The agreed negotiation row.
        campaign: Its campaign, if found.
        brand_profile: The campaign owner's brand profile, if any.
        creator_profile: The creator's profile, if any.
        creator_user: The creator's user row, if any.

    Returns:
        A JSON-ready ``contract_terms`` dict.
    """
    campaign = campaign or {}
    brand_profile = brand_profile or {}
    creator_profile = creator_profile or {}
    creator_user = creator_user or {}
    current_terms = negotiation.get("current_terms") or {}
    creator_terms = negotiation.get("creator_terms") or {}

    total = agreed_total(negotiation)
    campaign_title = campaign.get("title")
    display_name = creator_profile.get("display_name")
    handle = display_name.lower().replace(" ", "", 1) if display_name else "creator"

    return {
        "contract_title": f"Influencer Collaboration Agreement - {campaign_title or 'Campaign'}",
        "parties": {
            "brand": {
                "company_name": brand_profile.get("company_name") or "Brand Company",
                "representative": "Marketing Manager",
                "email": "contracts@brand.com",
                "address": brand_profile.get("location") or "Brand Address",
            },
            "creator": {
                "name": display_name or creator_user.get("full_name") or "Creator",
                "email": creator_user.get("email") or "creator@email.com",
                "social_handles": {
                    "instagram": f"@{handle}",
                    "followers": creator_profile.get("follower_count_instagram") or 0,
                },
            },
        },
        "compensation": {
            "total_amount": as_number(total),
            "currency": "USD",
            "payment_schedule": [
                {
                    "milestone": milestone,
                    "percentage": percent,
                    "amount": percentage_of(total, percent),
                    "due_date": due_date,
                }
                for milestone, percent, due_date in PAYMENT_SCHEDULE
            ],
            "payment_method": "Bank transfer",
            "payment_terms": "Net 30 days",
        },
        "deliverables": {
            "content_requirements": _first_present(
                current_terms.get("deliverables"),
                creator_terms.get("deliverables"),
                campaign.get("deliverables"),
            )
            or list(DEFAULT_CONTENT_REQUIREMENTS),
            "content_specifications": {
                "platform_guidelines": True,
                "brand_guidelines": True,
                "hashtag_requirements": [campaign_hashtag(campaign_title)],
                "mention_requirements": ["@brandhandle"],
                "disclosure_requirements": ["#ad", "#sponsored", "#partnership"],
            },
            "timeline": {
                "content_creation_deadline": _first_present(
                    current_terms.get("timeline"), creator_terms.get("timeline")
                )
                or "2 weeks from contract signature",
                "revision_period": "5 business days",
                "publication_schedule": "As agreed with brand team",
            },
        },
        "usage_rights": {
            "license_type": "Non-exclusive",
            "usage_duration": "2 years from publication date",
            "usage_scope": [
                "Social media marketing",
                "Website usage",
                "Email marketing",
                "Paid advertising (with additional approval)",
            ],
            "geographic_scope": "Worldwide",
            "platform_rights": ["Instagram", "Facebook", "Website", "Email"],
            "whitelist_approval": True,
        },
        "performance_metrics": {
            "minimum_engagement_rate": creator_profile.get("engagement_rate")
            or DEFAULT_MIN_ENGAGEMENT_RATE,
            "reporting_requirements": [
                "Screenshot of published content",
                "Analytics report after 7 days",
                "Final performance summary after 30 days",
            ],
            "content_performance_bonus": {
                "enabled": True,
                "threshold": "150% of average engagement",
                "bonus_amount": percentage_of(total, PERFORMANCE_BONUS_PERCENT),
            },
        },
        "legal_terms": {
            "content_ownership": (
                "Creator retains original content ownership, grants usage license to Brand"
            ),
            "exclusivity_period": "30 days (category exclusive)",
            "competitor_restrictions": "No direct competitor partnerships during campaign period",
            "cancellation_policy": {
                "brand_cancellation": "7 days notice, 50% payment if content created",
                "creator_cancellation": "14 days notice, forfeit of advance payment",
                "force_majeure": "Standard force majeure clause applies",
            },
            "dispute_resolution": "Mediation followed by arbitration",
            "governing_law": "State of California, USA",
            "confidentiality": "Standard NDA terms apply for 2 years",
        },
        "approval_process": {
            "content_approval_timeline": "3 business days",
            "revision_rounds": 2,
            "final_approval_authority": "Brand Marketing Manager",
            "content_standards": [
                "High-quality images/videos",
                "Brand-appropriate messaging",
                "FTC compliance for sponsored content",
                "Platform-specific optimization",
            ],
        },
        "special_clauses": [
            {
                "title": "Content Authenticity",
                "description": (
                    "Creator agrees to maintain authentic voice while incorporating brand messaging"
                ),
            },
            {
                "title": "Platform Compliance",
                "description": (
                    "All content must comply with platform terms of service "
                    "and community guidelines"
                ),
            },
            {
                "title": "Performance Monitoring",
                "description": (
                    "Brand reserves right to monitor content performance "
                    "and request reasonable adjustments"
                ),
            },
        ],
        "ai_generated": True,
        "generation_timestamp": now_iso(),
        "contract_version": "1.0",
        "template_used": TEMPLATE_NAME,
        "customization_level": "high",
    }


def deliverable_count(contract_terms: dict[str, Any]) -> int:
    """Number of content requirements, or 3 when they are not a list."""
    requirements = (contract_terms.get("deliverables") or {}).get("content_requirements")
    if isinstance(requirements, list):
        return len(requirements)
    return 3
