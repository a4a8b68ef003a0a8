"""Fixtures served for the demo user when demo mode is on."""

from __future__ import annotations

import copy
from typing import Any

DEMO_USER_ID = "demo-user-id"

_DEMO_STATS: dict[str, dict[str, Any]] = {
    "brand": {
        "activeCampaigns": 3,
        "totalCreators": 8,
        "totalSpent": 15000,
        "avgROI": 4.2,
        "campaigns": [],
    },
    "creator": {
        "activeCampaigns": 2,
        "totalEarnings": 3500,
        "pendingApplications": 1,
        "completedProjects": 5,
        "recentCollaborations": [],
    },
}

_DEMO_RECENT_CAMPAIGNS: list[dict[str, Any]] = [
    {
        "id": "demo-campaign-1",
        "title": "Summer Fashion Collection",
        "description": "Promote our new summer fashion line with authentic lifestyle content",
        "status": "active",
        "budget_min": 2000,
        "budget_max": 5000,
        "applications_count": 12,
        "timeline_start": "2024-06-01",
        "timeline_end": "2024-07-31",
        "created_at": "2024-05-15T10:00:00Z",
        "brand_profiles": {"company_name": "Demo Fashion Brand"},
        "activeCollaborations": 3,
        "totalCollaborations": 5,
    },
    {
        "id": "demo-campaign-2",
        "title": "Tech Product Launch",
        "description": "Launch campaign for our innovative tech product",
        "status": "active",
        "budget_min": 5000,
        "budget_max": 10000,
        "applications_count": 8,
        "timeline_start": "2024-06-15",
        "timeline_end": "2024-08-15",
        "created_at": "2024-05-20T10:00:00Z",
        "brand_profiles": {"company_name": "Demo Tech Company"},
        "activeCollaborations": 2,
        "totalCollaborations": 3,
    },
]

_DEMO_CREATOR = {"id": "creator-1", "full_name": "Sarah Lifestyle", "avatar_url": "", "user_type": "creator"}
_DEMO_BRAND = {"id": DEMO_USER_ID, "full_name": "Demo Brand User", "avatar_url": "", "user_type": "brand"}
_DEMO_MESSAGE = {
    "id": "msg-1",
    "created_at": "2024-01-15T10:30:00Z",
    "read_at": None,
    "content": "Hi! I'm interested in your summer fashion campaign. Could we discuss the details?",
    "sender": _DEMO_CREATOR,
    "recipient": _DEMO_BRAND,
}


def demo_stats(user_type: str) -> dict[str, Any]:
    return copy.deepcopy(_DEMO_STATS[user_type])


def demo_recent_campaigns() -> list[dict[str, Any]]:
    return copy.deepcopy(_DEMO_RECENT_CAMPAIGNS)


def demo_conversations() -> list[dict[str, Any]]:
    return copy.deepcopy(
        [
            {
                "participant": _DEMO_CREATOR,
                "messages": [_DEMO_MESSAGE],
                "lastMessage": _DEMO_MESSAGE,
                "unreadCount": 1,
            }
        ]
    )
