"""Direct message and notification repository."""

from __future__ import annotations

from typing import Any

from influencerflow.store.schema import Database
from influencerflow.store.serializers import decode_row, new_id, now_iso, require_row

_PARTICIPANT_COLUMNS = """
    s.id AS sender_user_id, s.full_name AS sender_full_name,
    s.avatar_url AS sender_avatar_url, s.user_type AS sender_user_type,
    r.id AS recipient_user_id, r.full_name AS recipient_full_name,
    r.avatar_url AS recipient_avatar_url, r.user_type AS recipient_user_type
"""


def _nest_participants(row: dict[str, Any]) -> dict[str, Any]:
    """Fold the joined sender/recipient columns into nested dicts."""
    for role in ("sender", "recipient"):
        user_id = row.pop(f"{role}_user_id")
        summary = {
            "full_name": row.pop(f"{role}_full_name"),
            "avatar_url": row.pop(f"{role}_avatar_url"),
            "user_type": row.pop(f"{role}_user_type"),
        }
        row[role] = {"id": user_id, **summary} if user_id is not None else None
    return row


class MessageStore:
    """Persist user-to-user (and system) messages."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(
        self,
        *,
        recipient_id: str,
        content: str,
        sender_id: str | None = None,
        campaign_id: str | None = None,
        collaboration_id: str | None = None,
        subject: str | None = None,
        message_type: str = "text",
    ) -> dict[str, Any]:
        """Insert a message and return it with sender/recipient summaries."""
        message_id = new_id()
        self._db.execute(
            """
            INSERT INTO messages (
                id, sender_id, recipient_id, campaign_id, collaboration_id,
                subject, content, message_type, read_at, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, NULL, ?)
            """,
            (
                message_id,
                sender_id,
                recipient_id,
                campaign_id,
                collaboration_id,
                subject,
                content,
                message_type,
                now_iso(),
            ),
        )
        return require_row(self.get(message_id), "messages", message_id)

    def get(self, message_id: str) -> dict[str, Any] | None:
        """Fetch one message with sender/recipient summaries."""
        row = self._db.fetch_one(
            f"""
            SELECT m.*, {_PARTICIPANT_COLUMNS}
            FROM messages m
            LEFT JOIN users s ON s.id = m.sender_id
            LEFT JOIN users r ON r.id = m.recipient_id
            WHERE m.id = ?
            """,
            (message_id,),
        )
        return _nest_participants(row) if row is not None else None

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """Messages sent or received by *user_id*, newest first."""
        rows = self._db.fetch_all(
            f"""
            SELECT m.*, {_PARTICIPANT_COLUMNS}
            FROM messages m
            LEFT JOIN users s ON s.id = m.sender_id
            LEFT JOIN users r ON r.id = m.recipient_id
            WHERE m.sender_id = ? OR m.recipient_id = ?
            ORDER BY m.created_at DESC
            """,
            (user_id, user_id),
        )
        return [_nest_participants(row) for row in rows]


class NotificationStore:
    """Persist in-app notifications."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def create(
        self,
        *,
        user_id: str,
        title: str,
        message: str,
        type_: str,
        related_id: str | None = None,
        action_url: str | None = None,
    ) -> str:
        """Insert an unread notification and return its id."""
        notification_id = new_id()
        self._db.execute(
            """
            INSERT INTO notifications (id, user_id, title, message, type, related_id, action_url, read, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, 0, ?)
            """,
            (notification_id, user_id, title, message, type_, related_id, action_url, now_iso()),
        )
        return notification_id

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """A user's notifications, newest first."""
        rows = self._db.fetch_all(
            "SELECT * FROM notifications WHERE user_id = ? ORDER BY created_at DESC",
            (user_id,),
        )
        return [decode_row(row, bool_columns=("read",)) for row in rows]
