"""Communication log repository.

The log records every inbound and outbound message across channels, and also
carries contract documents as ``message_type = 'contract'`` rows keyed by
``external_id``.  Uses parameterized queries exclusively.
"""

from __future__ import annotations

from typing import Any

from influencerflow.domain.types import Direction, MessageType
from influencerflow.store.schema import Database
from influencerflow.store.serializers import decode_row, new_id, now_iso, require_row

_BOOL_COLUMNS = ("ai_generated", "delivered", "read", "responded")

# Flags the email provider's webhooks may update
_TRACKING_FLAGS = frozenset({"delivered", "read"})


class CommunicationLogStore:
    """Insert, look up and update communication log rows."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def insert(
        self,
        *,
        channel: str,
        direction: str,
        message_type: str,
        subject: str | None,
        content: str | None,
        campaign_id: str | None = None,
        creator_id: str | None = None,
        ai_generated: bool = False,
        external_id: str | None = None,
        thread_id: str | None = None,
        delivered: bool = False,
        read: bool = False,
        responded: bool = False,
    ) -> dict[str, Any]:
        """Insert a log entry and return the stored row.

        Returns:
            The inserted row as a dict.
        """
        entry_id = new_id()
        self._db.execute(
            """
            INSERT INTO communication_log (
                id, campaign_id, creator_id, channel, direction, message_type,
                subject, content, ai_generated, external_id, thread_id,
                delivered, read, responded, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                entry_id,
                campaign_id,
                creator_id,
                channel,
                direction,
                message_type,
                subject,
                content,
                int(ai_generated),
                external_id,
                thread_id,
                int(delivered),
                int(read),
                int(responded),
                now_iso(),
            ),
        )
        return require_row(self.get(entry_id), "communication_log", entry_id)

    def set_tracking_flag(self, external_id: str, flag: str, value: bool) -> int:
        """Set ``delivered`` or ``read`` on every row with *external_id*.

        Args:
            external_id: The provider message id.
            flag: ``"delivered"`` or ``"read"``.
            value: The new flag value.

        Returns:
            Number of rows updated.
        """
        if flag not in _TRACKING_FLAGS:
            msg = f"Unsupported tracking flag: {flag!r}"
            raise ValueError(msg)
        cursor = self._db.execute(
            f"UPDATE communication_log SET {flag} = ? WHERE external_id = ?",
            (int(value), external_id),
        )
        return cursor.rowcount

    def mark_responded(self, entry_id: str) -> None:
        """Mark a single outbound row as responded."""
        self._db.execute(
            "UPDATE communication_log SET responded = 1 WHERE id = ?",
            (entry_id,),
        )

    def update_content(self, entry_id: str, content: str) -> None:
        """Replace the content of a row."""
        self._db.execute(
            "UPDATE communication_log SET content = ? WHERE id = ?",
            (content, entry_id),
        )

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get(self, entry_id: str) -> dict[str, Any] | None:
        """Fetch one row by primary key."""
        row = self._db.fetch_one("SELECT * FROM communication_log WHERE id = ?", (entry_id,))
        return decode_row(row, bool_columns=_BOOL_COLUMNS)

    def get_by_external_id(
        self, external_id: str, message_type: str | None = None
    ) -> dict[str, Any] | None:
        """Fetch the newest row with *external_id*, optionally of one message type."""
        if message_type is None:
            row = self._db.fetch_one(
                "SELECT * FROM communication_log WHERE external_id = ? "
                "ORDER BY created_at DESC LIMIT 1",
                (external_id,),
            )
        else:
            row = self._db.fetch_one(
                "SELECT * FROM communication_log WHERE external_id = ? AND message_type = ? "
                "ORDER BY created_at DESC LIMIT 1",
                (external_id, message_type),
            )
        return decode_row(row, bool_columns=_BOOL_COLUMNS)

    def find_outbound_by_external_id(self, external_id: str) -> dict[str, Any] | None:
        """Fetch the outbound, non-contract row a reply's In-Reply-To points at."""
        row = self._db.fetch_one(
            """
            SELECT * FROM communication_log
            WHERE external_id = ? AND direction = ? AND message_type != ?
            ORDER BY created_at DESC LIMIT 1
            """,
            (external_id, Direction.OUTBOUND.value, MessageType.CONTRACT.value),
        )
        return decode_row(row, bool_columns=_BOOL_COLUMNS)

    def outbound_emails_with_subject(self) -> list[dict[str, Any]]:
        """Outbound non-contract email rows that carry a subject, newest first."""
        rows = self._db.fetch_all(
            """
            SELECT * FROM communication_log
            WHERE direction = ? AND channel = 'email' AND message_type != ?
              AND subject IS NOT NULL AND subject != ''
            ORDER BY created_at DESC
            """,
            (Direction.OUTBOUND.value, MessageType.CONTRACT.value),
        )
        return [decode_row(row, bool_columns=_BOOL_COLUMNS) for row in rows]

    def list_for_campaign(
        self,
        campaign_id: str,
        *,
        message_type: str | None = None,
        exclude_message_type: str | None = None,
    ) -> list[dict[str, Any]]:
        """List a campaign's entries newest first, each with ``creator_name``.

        Args:
            campaign_id: The campaign to list.
            message_type: Only include this message type.
            exclude_message_type: Exclude this message type.

        Returns:
            Row dicts, newest first.
        """
        conditions = ["c.campaign_id = ?"]
        params: list[Any] = [campaign_id]
        if message_type is not None:
            conditions.append("c.message_type = ?")
            params.append(message_type)
        if exclude_message_type is not None:
            conditions.append("c.message_type != ?")
            params.append(exclude_message_type)

        rows = self._db.fetch_all(
            f"""
            SELECT c.*,
                   COALESCE(p.display_name, u.full_name, 'Unknown Creator') AS creator_name
            FROM communication_log c
            LEFT JOIN creator_profiles p ON p.user_id = c.creator_id
            LEFT JOIN users u ON u.id = c.creator_id
            WHERE {" AND ".join(conditions)}
            ORDER BY c.created_at DESC
            """,
            params,
        )
        return [decode_row(row, bool_columns=_BOOL_COLUMNS) for row in rows]

    def query(
        self,
        *,
        campaign_id: str | None = None,
        creator_id: str | None = None,
        direction: str | None = None,
        message_type: str | None = None,
        from_date: str | None = None,
        to_date: str | None = None,
        limit: int = 50,
    ) -> list[dict[str, Any]]:
        """Query the log with flexible filtering, newest first.

        All filters are optional.

        Args:
            campaign_id: Filter by campaign ID.
            creator_id: Filter by creator ID.
            direction: ``inbound`` or ``outbound``.
            message_type: Filter by message type.
            from_date: Entries on or after this ISO 8601 date.
            to_date: Entries on or before this ISO 8601 date.
            limit: Maximum number of results (default 50).

        Returns:
            A list of row dicts.
        """
        conditions: list[str] = []
        params: list[str | int] = []

        if campaign_id is not None:
            conditions.append("campaign_id = ?")
            params.append(campaign_id)

        if creator_id is not None:
            conditions.append("creator_id = ?")
            params.append(creator_id)

        if direction is not None:
            conditions.append("direction = ?")
            params.append(direction)

        if message_type is not None:
            conditions.append("message_type = ?")
            params.append(message_type)

        if from_date is not None:
            conditions.append("created_at >= ?")
            params.append(from_date)

        if to_date is not None:
            conditions.append("created_at <= ?")
            params.append(to_date)

        where_clause = ""
        if conditions:
            where_clause = "WHERE " + " AND ".join(conditions)

        params.append(limit)
        rows = self._db.fetch_all(
            f"SELECT * FROM communication_log {where_clause} ORDER BY created_at DESC LIMIT ?",
            params,
        )
        return [decode_row(row, bool_columns=_BOOL_COLUMNS) for row in rows]
