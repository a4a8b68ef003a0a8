"""SQLite schema and connection management for the InfluencerFlow store.

``init_db`` opens the database in WAL mode, creates every table and index,
and wraps the connection in a ``Database`` whose ``transaction()`` context is
re-entrant: nested use joins the outermost transaction, so a service can group
several repository writes into one atomic unit.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

_TABLES = (
    """
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        email TEXT UNIQUE,
        full_name TEXT,
        avatar_url TEXT,
        user_type TEXT NOT NULL DEFAULT 'creator',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS brand_profiles (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE REFERENCES users (id),
        company_name TEXT NOT NULL,
        industry TEXT,
        location TEXT,
        website TEXT,
        description TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS creator_profiles (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL UNIQUE REFERENCES users (id),
        display_name TEXT NOT NULL,
        bio TEXT,
        niche TEXT NOT NULL DEFAULT '[]',
        location TEXT,
        follower_count_instagram INTEGER NOT NULL DEFAULT 0,
        follower_count_youtube INTEGER NOT NULL DEFAULT 0,
        follower_count_tiktok INTEGER NOT NULL DEFAULT 0,
        engagement_rate REAL NOT NULL DEFAULT 0,
        rate_per_post REAL NOT NULL DEFAULT 0,
        instagram_handle TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS campaigns (
        id TEXT PRIMARY KEY,
        brand_id TEXT NOT NULL,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        objective TEXT,
        status TEXT NOT NULL DEFAULT 'active',
        budget_min REAL NOT NULL,
        budget_max REAL NOT NULL,
        timeline_start TEXT,
        timeline_end TEXT,
        target_audience TEXT NOT NULL DEFAULT '{}',
        requirements TEXT NOT NULL DEFAULT '{}',
        deliverables TEXT NOT NULL DEFAULT '[]',
        applications_count INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS campaign_applications (
        id TEXT PRIMARY KEY,
        campaign_id TEXT NOT NULL,
        creator_id TEXT NOT NULL,
        proposal_text TEXT NOT NULL,
        proposed_rate REAL,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TEXT NOT NULL,
        UNIQUE (campaign_id, creator_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS creator_recommendations (
        id TEXT PRIMARY KEY,
        campaign_id TEXT NOT NULL,
        creator_id TEXT NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        confidence_score REAL,
        match_reasoning TEXT,
        recommended_budget REAL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS negotiations (
        id TEXT PRIMARY KEY,
        campaign_id TEXT NOT NULL,
        creator_id TEXT NOT NULL,
        communication_id TEXT,
        status TEXT NOT NULL DEFAULT 'draft',
        current_terms TEXT NOT NULL DEFAULT '{}',
        creator_terms TEXT NOT NULL DEFAULT '{}',
        strategy TEXT NOT NULL DEFAULT '{}',
        ai_analysis TEXT NOT NULL DEFAULT '{}',
        contract_data TEXT,
        current_round INTEGER NOT NULL DEFAULT 0,
        max_rounds INTEGER NOT NULL DEFAULT 3,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (campaign_id, creator_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS negotiation_rounds (
        id TEXT PRIMARY KEY,
        negotiation_id TEXT NOT NULL REFERENCES negotiations (id),
        round_number INTEGER NOT NULL,
        initiated_by TEXT NOT NULL,
        proposed_terms TEXT NOT NULL DEFAULT '{}',
        ai_analysis TEXT NOT NULL DEFAULT '{}',
        response_type TEXT,
        response_message TEXT,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS communication_log (
        id TEXT PRIMARY KEY,
        campaign_id TEXT,
        creator_id TEXT,
        channel TEXT NOT NULL,
        direction TEXT NOT NULL,
        message_type TEXT NOT NULL,
        subject TEXT,
        content TEXT,
        ai_generated INTEGER NOT NULL DEFAULT 0,
        external_id TEXT,
        thread_id TEXT,
        delivered INTEGER NOT NULL DEFAULT 0,
        read INTEGER NOT NULL DEFAULT 0,
        responded INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS collaborations (
        id TEXT PRIMARY KEY,
        campaign_id TEXT NOT NULL,
        creator_id TEXT NOT NULL,
        brand_id TEXT,
        contract_id TEXT UNIQUE,
        status TEXT NOT NULL DEFAULT 'active',
        agreed_rate REAL NOT NULL DEFAULT 0,
        start_date TEXT,
        end_date TEXT,
        deliverables_completed INTEGER NOT NULL DEFAULT 0,
        total_deliverables INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS notifications (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        title TEXT NOT NULL,
        message TEXT NOT NULL,
        type TEXT NOT NULL,
        related_id TEXT,
        action_url TEXT,
        read INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS payments (
        id TEXT PRIMARY KEY,
        collaboration_id TEXT,
        payer_id TEXT NOT NULL,
        recipient_id TEXT NOT NULL,
        amount REAL NOT NULL,
        status TEXT NOT NULL DEFAULT 'pending',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS messages (
        id TEXT PRIMARY KEY,
        sender_id TEXT,
        recipient_id TEXT NOT NULL,
        campaign_id TEXT,
        collaboration_id TEXT,
        subject TEXT,
        content TEXT NOT NULL,
        message_type TEXT NOT NULL DEFAULT 'text',
        read_at TEXT,
        created_at TEXT NOT NULL
    )
    """,
)

_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_comm_campaign ON communication_log (campaign_id)",
    "CREATE INDEX IF NOT EXISTS idx_comm_external_id ON communication_log (external_id)",
    "CREATE INDEX IF NOT EXISTS idx_comm_type ON communication_log (message_type)",
    "CREATE INDEX IF NOT EXISTS idx_comm_created ON communication_log (created_at)",
    "CREATE INDEX IF NOT EXISTS idx_neg_campaign ON negotiations (campaign_id)",
    "CREATE INDEX IF NOT EXISTS idx_rounds_negotiation ON negotiation_rounds (negotiation_id)",
    "CREATE INDEX IF NOT EXISTS idx_campaigns_brand ON campaigns (brand_id)",
    "CREATE INDEX IF NOT EXISTS idx_collab_campaign ON collaborations (campaign_id)",
    "CREATE INDEX IF NOT EXISTS idx_messages_sender ON messages (sender_id)",
    "CREATE INDEX IF NOT EXISTS idx_messages_recipient ON messages (recipient_id)",
    "CREATE INDEX IF NOT EXISTS idx_payments_payer ON payments (payer_id)",
    "CREATE INDEX IF NOT EXISTS idx_payments_recipient ON payments (recipient_id)",
)


class Database:
    """A shared SQLite connection with a re-entrant transaction scope.

    Repositories read through ``fetch_all`` / ``fetch_one`` and write inside
    ``transaction()``.  Only the outermost ``transaction()`` commits (or rolls
    back on error), so services can nest repository calls freely.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize with an open connection that already has the schema.

        Args:
            conn: An open sqlite3.Connection (see ``init_db``).
        """
        self.conn = conn
        self.conn.row_factory = sqlite3.Row
        self._lock = threading.RLock()
        self._depth = 0

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run the enclosed writes atomically.

        Yields:
            The underlying connection.
        """
        with self._lock:
            self._depth += 1
            try:
                yield self.conn
            except BaseException:
                self._depth -= 1
                if self._depth == 0:
                    self.conn.rollback()
                raise
            self._depth -= 1
            if self._depth == 0:
                self.conn.commit()

    def execute(self, sql: str, params: Sequence[Any] = ()) -> sqlite3.Cursor:
        """Execute a single write statement inside a transaction."""
        with self.transaction() as conn:
            return conn.execute(sql, params)

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run a query and return every row as a plain dict."""
        with self._lock:
            rows = self.conn.execute(sql, params).fetchall()
        return [dict(row) for row in rows]

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> dict[str, Any] | None:
        """Run a query and return the first row as a dict, or ``None``."""
        with self._lock:
            row = self.conn.execute(sql, params).fetchone()
        return dict(row) if row is not None else None

    def ping(self) -> None:
        """Raise if the connection is unusable."""
        with self._lock:
            self.conn.execute("SELECT 1")


def init_db(db_path: Path | str) -> Database:
    """Open (creating if needed) the database with WAL mode and all tables.

    Args:
        db_path: Path to the SQLite database file, or ``":memory:"``.

    Returns:
        A ``Database`` wrapping the open connection.
    """
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    for ddl in _TABLES:
        conn.execute(ddl)
    for ddl in _INDEXES:
        conn.execute(ddl)

    conn.commit()
    return Database(conn)


def close_db(db: Database) -> None:
    """Close the database connection.

    Args:
        db: The database to close.
    """
    db.conn.close()
