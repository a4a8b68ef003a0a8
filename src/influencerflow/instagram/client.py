"""Instagram Graph API client.

Reads go through ``_get``, which carries an explicit timeout and the shared
retry policy.  The public helpers log and degrade (``None``, ``[]`` or ``0``)
when the API is unavailable, so profile pages render partial data.
"""

from __future__ import annotations

import re
from typing import Any

import httpx
import structlog

from influencerflow.resilience import resilient_api_call

logger = structlog.get_logger()

GRAPH_API_URL = "https://graph.instagram.com"
PUBLIC_PROFILE_URL = "https://www.instagram.com/{username}/"
DEFAULT_TIMEOUT = httpx.Timeout(10.0, connect=5.0)

PROFILE_FIELDS = "id,username,account_type,media_count,followers_count"
MEDIA_FIELDS = "id,media_type,media_url,permalink,timestamp,caption,like_count,comments_count"
MEDIA_INSIGHT_METRICS = "engagement,impressions,reach,saved"
ACCOUNT_INSIGHT_METRICS = "reach,impressions,profile_views,website_clicks"

# Posts sampled for the engagement rate
ENGAGEMENT_SAMPLE_SIZE = 12

_USERNAME = re.compile(r"^[A-Za-z0-9._]{1,30}$")


class InstagramClient:
    """Instagram Graph API access for one account token.

    Args:
        access_token: Instagram user access token.
        app_secret: Facebook app secret, needed for token exchange.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        access_token: str,
        app_secret: str = "",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._access_token = access_token
        self._app_secret = app_secret
        self._http = httpx.Client(
            base_url=GRAPH_API_URL,
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    @resilient_api_call("instagram")
    def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        response = self._http.get(path, params={**params, "access_token": self._access_token})
        response.raise_for_status()
        return response.json()

    def get_profile(self, user_id: str = "me") -> dict[str, Any] | None:
        """Profile fields for *user_id*, or ``None`` when unavailable."""
        try:
            return self._get(f"/{user_id}", {"fields": PROFILE_FIELDS})
        except httpx.HTTPError as exc:
            logger.warning("instagram_profile_unavailable", user_id=user_id, error=str(exc))
            return None

    def get_media(self, user_id: str = "me", limit: int = 25) -> list[dict[str, Any]]:
        """The account's most recent media, newest first."""
        try:
            payload = self._get(f"/{user_id}/media", {"fields": MEDIA_FIELDS, "limit": limit})
        except httpx.HTTPError as exc:
            logger.warning("instagram_media_unavailable", user_id=user_id, error=str(exc))
            return []
        return payload.get("data") or []

    def get_media_insights(self, media_id: str) -> dict[str, Any] | None:
        """Raw insight metrics for one media item (business accounts only)."""
        try:
            return self._get(f"/{media_id}/insights", {"metric": MEDIA_INSIGHT_METRICS})
        except httpx.HTTPError as exc:
            logger.warning("instagram_media_insights_unavailable", media_id=media_id, error=str(exc))
            return None

    def get_account_insights(self, user_id: str = "me", period: str = "day") -> dict[str, Any] | None:
        """Account insight metrics flattened to ``{metric_name: latest value}``."""
        try:
            payload = self._get(
                f"/{user_id}/insights", {"metric": ACCOUNT_INSIGHT_METRICS, "period": period}
            )
        except httpx.HTTPError as exc:
            logger.warning("instagram_account_insights_unavailable", user_id=user_id, error=str(exc))
            return None
        return {metric["name"]: _latest_value(metric) for metric in payload.get("data") or []}

    def calculate_engagement_rate(self, user_id: str = "me") -> float:
        """Average per-post engagement as a percentage of the audience.

        The audience is the follower count, or the media count when the
        follower count is unavailable.  Posts without an ``engagement``
        insight are skipped.
        """
        media = self.get_media(user_id, ENGAGEMENT_SAMPLE_SIZE)
        profile = self.get_profile(user_id)
        if not media or not profile:
            return 0.0

        total_engagement = 0.0
        valid_posts = 0
        for post in media:
            insights = self.get_media_insights(post["id"])
            if not insights:
                continue
            for metric in insights.get("data") or []:
                if metric.get("name") == "engagement":
                    total_engagement += _latest_value(metric)
                    valid_posts += 1
                    break

        if valid_posts == 0:
            return 0.0
        audience = profile.get("followers_count") or profile.get("media_count") or 0
        if audience <= 0:
            return 0.0
        return (total_engagement / valid_posts) / audience * 100

    def verify_username(self, username: str) -> bool:
        """True when the public profile page for *username* exists."""
        if not _USERNAME.match(username):
            return False
        try:
            response = self._http.get(PUBLIC_PROFILE_URL.format(username=username), params={"__a": 1})
        except httpx.HTTPError as exc:
            logger.warning("instagram_username_check_failed", username=username, error=str(exc))
            return False
        return response.is_success

    def get_long_lived_token(self, short_lived_token: str) -> str | None:
        """Exchange a short-lived token for a long-lived one."""
        try:
            response = self._http.get(
                "/access_token",
                params={
                    "grant_type": "ig_exchange_token",
                    "client_secret": self._app_secret,
                    "access_token": short_lived_token,
                },
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("instagram_token_exchange_failed", error=str(exc))
            return None
        return response.json().get("access_token")

    def refresh_token(self, access_token: str) -> str | None:
        """Refresh a long-lived token before it expires."""
        try:
            response = self._http.get(
                "/refresh_access_token",
                params={"grant_type": "ig_refresh_token", "access_token": access_token},
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("instagram_token_refresh_failed", error=str(exc))
            return None
        return response.json().get("access_token")

    def close(self) -> None:
        self._http.close()


def _latest_value(metric: dict[str, Any]) -> float:
    values = metric.get("values") or []
    if not values:
        return 0
    return values[0].get("value") or 0
