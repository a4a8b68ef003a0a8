"""Direct messaging between brands and creators."""

from influencerflow.messaging.conversations import group_conversations

__all__ = ["group_conversations"]
