"""Group a user's direct messages into conversations."""

from __future__ import annotations

from typing import Any


def _other_participant(message: dict[str, Any], user_id: str) -> dict[str, Any] | None:
    sender = message.get("sender")
    if sender is not None and sender["id"] == user_id:
        return message.get("recipient")
    return sender


def group_conversations(messages: list[dict[str, Any]], user_id: str) -> list[dict[str, Any]]:
    """Group *messages* by the other participant.

    Each conversation holds its messages oldest first, the latest message and
    the count of unread messages addressed to *user_id*.  System messages
    (no sender) share one conversation whose participant is ``None``.
    Conversations are ordered by their latest message, newest first.

    Args:
        messages: Messages with nested ``sender``/``recipient`` summaries.
        user_id: The user whose inbox is being built.

    Returns:
        A list of ``{participant, messages, lastMessage, unreadCount}`` dicts.
    """
    conversations: dict[str | None, dict[str, Any]] = {}
    for message in messages:
        participant = _other_participant(message, user_id)
        key = participant["id"] if participant is not None else None
        conversation = conversations.setdefault(
            key,
            {"participant": participant, "messages": [], "lastMessage": message, "unreadCount": 0},
        )
        conversation["messages"].append(message)
        if message["created_at"] > conversation["lastMessage"]["created_at"]:
            conversation["lastMessage"] = message
        if message.get("recipient_id") == user_id and not message.get("read_at"):
            conversation["unreadCount"] += 1

    for conversation in conversations.values():
        conversation["messages"].sort(key=lambda m: m["created_at"])

    return sorted(
        conversations.values(),
        key=lambda c: c["lastMessage"]["created_at"],
        reverse=True,
    )
