"""Negotiation and negotiation-round repository."""

from __future__ import annotations

from typing import Any

from influencerflow.store.schema import Database
from influencerflow.store.serializers import decode_row, dump_json, new_id, now_iso, require_row

_JSON_COLUMNS = ("current_terms", "creator_terms", "strategy", "ai_analysis", "contract_data")
_ROUND_JSON_COLUMNS = ("proposed_terms", "ai_analysis")

# Columns ``update`` is allowed to write
_UPDATABLE = frozenset(
    {
        "status",
        "current_terms",
        "creator_terms",
        "strategy",
        "ai_analysis",
        "contract_data",
        "current_round",
        "max_rounds",
    }
)


class NegotiationStore:
    """Persist negotiations and their rounds."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(
        self,
        *,
        campaign_id: str,
        creator_id: str,
        communication_id: str | None = None,
        status: str = "draft",
        creator_terms: dict[str, Any] | None = None,
        current_terms: dict[str, Any] | None = None,
        strategy: dict[str, Any] | None = None,
        ai_analysis: dict[str, Any] | None = None,
        max_rounds: int = 3,
    ) -> dict[str, Any]:
        """Insert a negotiation and return the stored row."""
        negotiation_id = new_id()
        now = now_iso()
        self._db.execute(
            """
            INSERT INTO negotiations (
                id, campaign_id, creator_id, communication_id, status,
                current_terms, creator_terms, strategy, ai_analysis,
                current_round, max_rounds, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?, ?)
            """,
            (
                negotiation_id,
                campaign_id,
                creator_id,
                communication_id,
                status,
                dump_json(current_terms or {}),
                dump_json(creator_terms or {}),
                dump_json(strategy or {}),
                dump_json(ai_analysis or {}),
                max_rounds,
                now,
                now,
            ),
        )
        return require_row(self.get(negotiation_id), "negotiations", negotiation_id)

    def update(self, negotiation_id: str, fields: dict[str, Any]) -> None:
        """Write the given columns and bump ``updated_at``.

        Args:
            negotiation_id: The negotiation to update.
            fields: Column -> value; JSON columns are encoded automatically.

        Raises:
            ValueError: If a column is not updatable.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            msg = f"Cannot update negotiation columns: {sorted(unknown)}"
            raise ValueError(msg)

        assignments: list[str] = []
        params: list[Any] = []
        for column, value in fields.items():
            assignments.append(f"{column} = ?")
            params.append(dump_json(value) if column in _JSON_COLUMNS else value)
        assignments.append("updated_at = ?")
        params.append(now_iso())
        params.append(negotiation_id)

        self._db.execute(
            f"UPDATE negotiations SET {', '.join(assignments)} WHERE id = ?",
            params,
        )

    def get(self, negotiation_id: str) -> dict[str, Any] | None:
        """Fetch a negotiation by id."""
        row = self._db.fetch_one("SELECT * FROM negotiations WHERE id = ?", (negotiation_id,))
        return decode_row(row, json_columns=_JSON_COLUMNS)

    def find_for_pair(self, campaign_id: str, creator_id: str) -> dict[str, Any] | None:
        """Fetch the negotiation between a campaign and a creator, if any."""
        row = self._db.fetch_one(
            "SELECT * FROM negotiations WHERE campaign_id = ? AND creator_id = ?",
            (campaign_id, creator_id),
        )
        return decode_row(row, json_columns=_JSON_COLUMNS)

    def list_for_campaign(self, campaign_id: str) -> list[dict[str, Any]]:
        """List a campaign's negotiations, most recently updated first."""
        rows = self._db.fetch_all(
            "SELECT * FROM negotiations WHERE campaign_id = ? ORDER BY updated_at DESC",
            (campaign_id,),
        )
        return [decode_row(row, json_columns=_JSON_COLUMNS) for row in rows]

    # ------------------------------------------------------------------
    # Rounds
    # ------------------------------------------------------------------

    def add_round(
        self,
        *,
        negotiation_id: str,
        round_number: int,
        initiated_by: str,
        proposed_terms: dict[str, Any],
        ai_analysis: dict[str, Any],
        response_type: str,
        response_message: str | None,
    ) -> str:
        """Insert a negotiation round and return its id."""
        round_id = new_id()
        self._db.execute(
            """
            INSERT INTO negotiation_rounds (
                id, negotiation_id, round_number, initiated_by, proposed_terms,
                ai_analysis, response_type, response_message, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                round_id,
                negotiation_id,
                round_number,
                initiated_by,
                dump_json(proposed_terms),
                dump_json(ai_analysis),
                response_type,
                response_message,
                now_iso(),
            ),
        )
        return round_id

    def list_rounds(self, negotiation_id: str) -> list[dict[str, Any]]:
        """List a negotiation's rounds in ascending round order."""
        rows = self._db.fetch_all(
            "SELECT * FROM negotiation_rounds WHERE negotiation_id = ? "
            "ORDER BY round_number ASC, created_at ASC",
            (negotiation_id,),
        )
        return [decode_row(row, json_columns=_ROUND_JSON_COLUMNS) for row in rows]
