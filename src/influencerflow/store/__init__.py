"""SQLite persistence: schema, connection management and repositories."""

from influencerflow.store.campaigns import CampaignStore
from influencerflow.store.collaborations import CollaborationStore
from influencerflow.store.communications import CommunicationLogStore
from influencerflow.store.directory import DirectoryStore
from influencerflow.store.messages import MessageStore, NotificationStore
from influencerflow.store.negotiations import NegotiationStore
from influencerflow.store.schema import Database, close_db, init_db

__all__ = [
    "CampaignStore",
    "CollaborationStore",
    "CommunicationLogStore",
    "Database",
    "DirectoryStore",
    "MessageStore",
    "NegotiationStore",
    "NotificationStore",
    "close_db",
    "init_db",
]
