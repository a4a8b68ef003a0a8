"""Collaboration and payment repository."""

from __future__ import annotations

from typing import Any

from influencerflow.store.schema import Database
from influencerflow.store.serializers import new_id, now_iso, require_row


class CollaborationStore:
    """Persist collaborations and the payments made against them."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Collaborations
    # ------------------------------------------------------------------

    def create(
        self,
        *,
        campaign_id: str,
        creator_id: str,
        brand_id: str | None,
        contract_id: str | None,
        agreed_rate: float,
        total_deliverables: int,
        status: str = "active",
    ) -> dict[str, Any]:
        """Insert a collaboration starting now and return the stored row."""
        collaboration_id = new_id()
        now = now_iso()
        self._db.execute(
            """
            INSERT INTO collaborations (
                id, campaign_id, creator_id, brand_id, contract_id, status,
                agreed_rate, start_date, end_date, deliverables_completed,
                total_deliverables, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, NULL, 0, ?, ?)
            """,
            (
                collaboration_id,
                campaign_id,
                creator_id,
                brand_id,
                contract_id,
                status,
                agreed_rate,
                now,
                total_deliverables,
                now,
            ),
        )
        return require_row(self.get(collaboration_id), "collaborations", collaboration_id)

    def get(self, collaboration_id: str) -> dict[str, Any] | None:
        """Fetch a collaboration by id."""
        return self._db.fetch_one(
            "SELECT * FROM collaborations WHERE id = ?", (collaboration_id,)
        )

    def get_by_contract(self, contract_id: str) -> dict[str, Any] | None:
        """Fetch the collaboration created from a contract."""
        return self._db.fetch_one(
            "SELECT * FROM collaborations WHERE contract_id = ?", (contract_id,)
        )

    def list_for_campaign(self, campaign_id: str) -> list[dict[str, Any]]:
        """A campaign's collaborations, newest first."""
        return self._db.fetch_all(
            "SELECT * FROM collaborations WHERE campaign_id = ? ORDER BY created_at DESC",
            (campaign_id,),
        )

    def list_for_brand(self, brand_id: str) -> list[dict[str, Any]]:
        """A brand's collaborations, newest first."""
        return self._db.fetch_all(
            "SELECT * FROM collaborations WHERE brand_id = ? ORDER BY created_at DESC",
            (brand_id,),
        )

    def list_for_creator(self, creator_id: str) -> list[dict[str, Any]]:
        """A creator's collaborations with campaign title, newest first."""
        rows = self._db.fetch_all(
            """
            SELECT c.*, cp.title AS campaign_title
            FROM collaborations c
            LEFT JOIN campaigns cp ON cp.id = c.campaign_id
            WHERE c.creator_id = ?
            ORDER BY c.created_at DESC
            """,
            (creator_id,),
        )
        for row in rows:
            row["campaigns"] = {"title": row.pop("campaign_title")}
        return rows

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    def create_payment(
        self,
        *,
        payer_id: str,
        recipient_id: str,
        amount: float,
        collaboration_id: str | None = None,
        status: str = "pending",
    ) -> str:
        """Insert a payment record and return its id."""
        payment_id = new_id()
        self._db.execute(
            """
            INSERT INTO payments (id, collaboration_id, payer_id, recipient_id, amount, status, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (payment_id, collaboration_id, payer_id, recipient_id, amount, status, now_iso()),
        )
        return payment_id

    def list_payments_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Payments where the user is payer or recipient, newest first.

        Each row carries ``payer``/``recipient`` name summaries and the
        campaign title under ``collaborations``.
        """
        rows = self._db.fetch_all(
            """
            SELECT p.*,
                   payer.full_name AS payer_name, payer.user_type AS payer_type,
                   recipient.full_name AS recipient_name, recipient.user_type AS recipient_type,
                   cp.title AS campaign_title
            FROM payments p
            LEFT JOIN users payer ON payer.id = p.payer_id
            LEFT JOIN users recipient ON recipient.id = p.recipient_id
            LEFT JOIN collaborations c ON c.id = p.collaboration_id
            LEFT JOIN campaigns cp ON cp.id = c.campaign_id
            WHERE p.payer_id = ? OR p.recipient_id = ?
            ORDER BY p.created_at DESC
            """,
            (user_id, user_id),
        )
        for row in rows:
            row["payer"] = {"full_name": row.pop("payer_name"), "user_type": row.pop("payer_type")}
            row["recipient"] = {
                "full_name": row.pop("recipient_name"),
                "user_type": row.pop("recipient_type"),
            }
            row["collaborations"] = {"campaigns": {"title": row.pop("campaign_title")}}
        return rows

    def completed_total(self, *, payer_id: str | None = None, recipient_id: str | None = None) -> float:
        """Sum of completed payments made by *payer_id* or received by *recipient_id*."""
        if payer_id is not None:
            row = self._db.fetch_one(
                "SELECT COALESCE(SUM(amount), 0) AS total FROM payments "
                "WHERE payer_id = ? AND status = 'completed'",
                (payer_id,),
            )
        elif recipient_id is not None:
            row = self._db.fetch_one(
                "SELECT COALESCE(SUM(amount), 0) AS total FROM payments "
                "WHERE recipient_id = ? AND status = 'completed'",
                (recipient_id,),
            )
        else:
            msg = "completed_total needs payer_id or recipient_id"
            raise ValueError(msg)
        return float(row["total"]) if row is not None else 0.0
