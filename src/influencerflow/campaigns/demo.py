"""Demo campaign fixtures served for non-UUID ids when demo mode is on."""

from __future__ import annotations

import copy
import re
from typing import Any

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_uuid(value: str) -> bool:
    """True for RFC 4122 UUID strings (versions 1-5)."""
    return bool(_UUID_RE.match(value))


DEMO_CAMPAIGNS: dict[str, dict[str, Any]] = {
    "demo-campaign-1": {
        "id": "demo-campaign-1",
        "title": "Summer Fashion Collection",
        "description": (
            "Promote our new summer fashion line with authentic lifestyle content "
            "that resonates with young professionals."
        ),
        "status": "active",
        "budget_min": 2000,
        "budget_max": 5000,
        "timeline_start": "2024-06-01",
        "timeline_end": "2024-07-15",
        "requirements": ["Fashion & Lifestyle content", "Minimum 50K followers", "3%+ engagement rate"],
        "target_audience": "Young professionals aged 25-35",
        "deliverables": ["Instagram Reel", "Story Series", "Feed Post"],
        "applications_count": 12,
        "created_at": "2024-05-15T10:00:00Z",
        "brand_profiles": {
            "company_name": "FashionCo",
            "industry": "Fashion & Retail",
            "location": "New York, NY",
            "website": "https://fashionco.com",
            "description": (
                "Leading fashion brand focused on sustainable and trendy clothing "
                "for modern professionals."
            ),
        },
    },
    "demo-campaign-2": {
        "id": "demo-campaign-2",
        "title": "Tech Product Launch",
        "description": (
            "Launch campaign for our innovative productivity app targeting busy "
            "professionals and entrepreneurs."
        ),
        "status": "active",
        "budget_min": 5000,
        "budget_max": 10000,
        "timeline_start": "2024-06-15",
        "timeline_end": "2024-08-01",
        "requirements": ["Technology content", "Minimum 100K followers", "4%+ engagement rate"],
        "target_audience": "Tech-savvy professionals and entrepreneurs",
        "deliverables": ["App Review Video", "Instagram Reel", "LinkedIn Post"],
        "applications_count": 8,
        "created_at": "2024-05-20T14:30:00Z",
        "brand_profiles": {
            "company_name": "TechStartup Inc.",
            "industry": "Technology",
            "location": "San Francisco, CA",
            "website": "https://techstartup.com",
            "description": (
                "Innovative tech company developing cutting-edge mobile applications "
                "and AI solutions."
            ),
        },
    },
}

DEMO_COLLABORATIONS: dict[str, list[dict[str, Any]]] = {
    "demo-campaign-1": [
        {
            "id": "collab-1",
            "status": "active",
            "agreed_rate": 2000,
            "start_date": "2024-06-01",
            "end_date": "2024-07-15",
            "deliverables_completed": 2,
            "total_deliverables": 3,
            "creator_profiles": {
                "display_name": "Style Maven",
                "users": {"full_name": "Emma Rodriguez", "avatar_url": None},
            },
        }
    ],
    "demo-campaign-2": [
        {
            "id": "collab-2",
            "status": "active",
            "agreed_rate": 3000,
            "start_date": "2024-06-15",
            "end_date": "2024-08-01",
            "deliverables_completed": 1,
            "total_deliverables": 3,
            "creator_profiles": {
                "display_name": "Tech Reviewer Pro",
                "users": {"full_name": "Alex Chen", "avatar_url": None},
            },
        }
    ],
}

DEMO_APPLICATIONS: dict[str, list[dict[str, Any]]] = {
    "demo-campaign-1": [
        {
            "id": "app-1",
            "status": "pending",
            "proposal_text": (
                "I love your fashion brand and would be excited to create authentic "
                "content showcasing your summer collection."
            ),
            "proposed_rate": 1500,
            "created_at": "2024-05-25T10:00:00Z",
            "creator_profiles": {
                "display_name": "Sarah Fashion",
                "bio": "Fashion & lifestyle content creator",
                "follower_count_instagram": 85000,
                "follower_count_youtube": 12000,
                "engagement_rate": 4.2,
                "rate_per_post": 1200,
                "niche": ["Fashion", "Lifestyle", "Beauty"],
                "location": "Los Angeles, CA",
                "users": {"full_name": "Sarah Johnson", "avatar_url": None},
            },
        },
        {
            "id": "app-2",
            "status": "accepted",
            "proposal_text": (
                "Your summer collection looks amazing! I specialize in creating "
                "engaging fashion content that drives sales."
            ),
            "proposed_rate": 2000,
            "created_at": "2024-05-23T14:30:00Z",
            "creator_profiles": {
                "display_name": "Style Maven",
                "bio": "Fashion influencer and stylist",
                "follower_count_instagram": 120000,
                "follower_count_youtube": 25000,
                "engagement_rate": 5.1,
                "rate_per_post": 1800,
                "niche": ["Fashion", "Style", "Shopping"],
                "location": "New York, NY",
                "users": {"full_name": "Emma Rodriguez", "avatar_url": None},
            },
        },
    ],
    "demo-campaign-2": [
        {
            "id": "app-3",
            "status": "pending",
            "proposal_text": (
                "As a tech reviewer with a focus on productivity tools, I would love "
                "to create an in-depth review of your app."
            ),
            "proposed_rate": 3000,
            "created_at": "2024-05-28T09:15:00Z",
            "creator_profiles": {
                "display_name": "Tech Reviewer Pro",
                "bio": "Technology reviewer and productivity expert",
                "follower_count_instagram": 95000,
                "follower_count_youtube": 180000,
                "engagement_rate": 6.8,
                "rate_per_post": 2500,
                "niche": ["Technology", "Productivity", "Apps"],
                "location": "Austin, TX",
                "users": {"full_name": "Alex Chen", "avatar_url": None},
            },
        }
    ],
}


def demo_campaign(campaign_id: str) -> dict[str, Any] | None:
    """A copy of the demo campaign, or ``None``."""
    campaign = DEMO_CAMPAIGNS.get(campaign_id)
    return copy.deepcopy(campaign) if campaign is not None else None


def demo_collaborations(campaign_id: str) -> list[dict[str, Any]]:
    return copy.deepcopy(DEMO_COLLABORATIONS.get(campaign_id, []))


def demo_applications(campaign_id: str) -> list[dict[str, Any]]:
    return copy.deepcopy(DEMO_APPLICATIONS.get(campaign_id, []))
