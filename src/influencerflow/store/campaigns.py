"""Campaign, application and creator-recommendation repository."""

from __future__ import annotations

from typing import Any

from influencerflow.store.schema import Database
from influencerflow.store.serializers import decode_row, dump_json, new_id, now_iso, require_row

_JSON_COLUMNS = ("target_audience", "requirements", "deliverables")


class CampaignStore:
    """Persist campaigns along with applications and recommendations."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Campaigns
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        brand_id: str,
        title: str,
        description: str,
        budget_min: float,
        budget_max: float,
        timeline_start: str | None,
        timeline_end: str | None,
        target_audience: dict[str, Any] | None = None,
        requirements: dict[str, Any] | None = None,
        deliverables: list[Any] | None = None,
        objective: str | None = None,
        status: str = "active",
    ) -> dict[str, Any]:
        """Insert a campaign and return the stored row."""
        campaign_id = new_id()
        now = now_iso()
        self._db.execute(
            """
            INSERT INTO campaigns (
                id, brand_id, title, description, objective, status,
                budget_min, budget_max, timeline_start, timeline_end,
                target_audience, requirements, deliverables,
                applications_count, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                campaign_id,
                brand_id,
                title,
                description,
                objective,
                status,
                budget_min,
                budget_max,
                timeline_start,
                timeline_end,
                dump_json(target_audience or {}),
                dump_json(requirements or {}),
                dump_json(deliverables or []),
                now,
                now,
            ),
        )
        return require_row(self.get(campaign_id), "campaigns", campaign_id)

    def get(self, campaign_id: str) -> dict[str, Any] | None:
        """Fetch a campaign by id."""
        row = self._db.fetch_one("SELECT * FROM campaigns WHERE id = ?", (campaign_id,))
        return decode_row(row, json_columns=_JSON_COLUMNS)

    def list_all(self, *, status: str | None = None) -> list[dict[str, Any]]:
        """List campaigns newest first, optionally filtered by status."""
        if status is None:
            rows = self._db.fetch_all("SELECT * FROM campaigns ORDER BY created_at DESC")
        else:
            rows = self._db.fetch_all(
                "SELECT * FROM campaigns WHERE status = ? ORDER BY created_at DESC",
                (status,),
            )
        return [decode_row(row, json_columns=_JSON_COLUMNS) for row in rows]

    def list_for_brand(self, brand_id: str) -> list[dict[str, Any]]:
        """A brand's campaigns, newest first."""
        rows = self._db.fetch_all(
            "SELECT * FROM campaigns WHERE brand_id = ? ORDER BY created_at DESC",
            (brand_id,),
        )
        return [decode_row(row, json_columns=_JSON_COLUMNS) for row in rows]

    def list_recent(self, *, brand_id: str | None = None, limit: int = 10) -> list[dict[str, Any]]:
        """The newest campaigns, restricted to one brand when *brand_id* is given."""
        if brand_id is None:
            rows = self._db.fetch_all(
                "SELECT * FROM campaigns ORDER BY created_at DESC LIMIT ?",
                (limit,),
            )
        else:
            rows = self._db.fetch_all(
                "SELECT * FROM campaigns WHERE brand_id = ? ORDER BY created_at DESC LIMIT ?",
                (brand_id, limit),
            )
        return [decode_row(row, json_columns=_JSON_COLUMNS) for row in rows]

    # ------------------------------------------------------------------
    # Applications
    # ------------------------------------------------------------------

    def find_application(self, campaign_id: str, creator_id: str) -> dict[str, Any] | None:
        """Fetch a creator's application to a campaign, if any."""
        return self._db.fetch_one(
            "SELECT * FROM campaign_applications WHERE campaign_id = ? AND creator_id = ?",
            (campaign_id, creator_id),
        )

    def create_application(
        self,
        *,
        campaign_id: str,
        creator_id: str,
        proposal_text: str,
        proposed_rate: float | None,
    ) -> dict[str, Any]:
        """Insert a pending application and bump the campaign's counter atomically."""
        application_id = new_id()
        with self._db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO campaign_applications (
                    id, campaign_id, creator_id, proposal_text, proposed_rate,
                    status, created_at
                ) VALUES (?, ?, ?, ?, ?, 'pending', ?)
                """,
                (application_id, campaign_id, creator_id, proposal_text, proposed_rate, now_iso()),
            )
            conn.execute(
                "UPDATE campaigns SET applications_count = applications_count + 1 WHERE id = ?",
                (campaign_id,),
            )
        row = self._db.fetch_one(
            "SELECT * FROM campaign_applications WHERE id = ?", (application_id,)
        )
        return require_row(row, "campaign_applications", application_id)

    def list_applications(
        self, *, creator_id: str | None = None, campaign_id: str | None = None
    ) -> list[dict[str, Any]]:
        """List applications newest first with optional creator/campaign filters."""
        conditions: list[str] = []
        params: list[str] = []
        if creator_id is not None:
            conditions.append("creator_id = ?")
            params.append(creator_id)
        if campaign_id is not None:
            conditions.append("campaign_id = ?")
            params.append(campaign_id)
        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)
        return self._db.fetch_all(
            f"SELECT * FROM campaign_applications {where_clause} ORDER BY created_at DESC",
            params,
        )

    def applied_campaign_ids(self, creator_id: str) -> set[str]:
        """Campaign ids the creator has applied to."""
        rows = self._db.fetch_all(
            "SELECT campaign_id FROM campaign_applications WHERE creator_id = ?",
            (creator_id,),
        )
        return {row["campaign_id"] for row in rows}

    # ------------------------------------------------------------------
    # Creator recommendations
    # ------------------------------------------------------------------

    def create_recommendation(
        self,
        *,
        campaign_id: str,
        creator_id: str,
        confidence_score: float | None = None,
        match_reasoning: str | None = None,
        recommended_budget: float | None = None,
        status: str = "pending",
    ) -> str:
        """Insert a recommendation and return its id."""
        recommendation_id = new_id()
        self._db.execute(
            """
            INSERT INTO creator_recommendations (
                id, campaign_id, creator_id, status, confidence_score,
                match_reasoning, recommended_budget, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                recommendation_id,
                campaign_id,
                creator_id,
                status,
                confidence_score,
                match_reasoning,
                recommended_budget,
                now_iso(),
            ),
        )
        return recommendation_id

    def get_recommendation(self, recommendation_id: str) -> dict[str, Any] | None:
        """Fetch a recommendation by id."""
        return self._db.fetch_one(
            "SELECT * FROM creator_recommendations WHERE id = ?", (recommendation_id,)
        )

    def list_recommendations(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's recommendations, most confident first."""
        return self._db.fetch_all(
            "SELECT * FROM creator_recommendations WHERE campaign_id = ? "
            "ORDER BY confidence_score DESC, created_at DESC",
            (campaign_id,),
        )

    def set_recommendation_status(self, recommendation_id: str, status: str) -> bool:
        """Update one recommendation; return False if it does not exist."""
        cursor = self._db.execute(
            "UPDATE creator_recommendations SET status = ? WHERE id = ?",
            (status, recommendation_id),
        )
        return cursor.rowcount > 0

    def set_recommendation_status_for_pair(
        self, campaign_id: str, creator_id: str, status: str
    ) -> int:
        """Update every recommendation of a creator for a campaign."""
        cursor = self._db.execute(
            "UPDATE creator_recommendations SET status = ? WHERE campaign_id = ? AND creator_id = ?",
            (status, campaign_id, creator_id),
        )
        return cursor.rowcount
