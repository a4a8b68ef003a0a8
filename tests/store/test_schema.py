"""Tests for the Database wrapper and schema initialization."""

from __future__ import annotations

import sqlite3

import pytest

from influencerflow.store.schema import Database, close_db, init_db

EXPECTED_TABLES = {
    "users",
    "brand_profiles",
    "creator_profiles",
    "campaigns",
    "campaign_applications",
    "creator_recommendations",
    "negotiations",
    "negotiation_rounds",
    "communication_log",
    "collaborations",
    "notifications",
    "payments",
    "messages",
}


@pytest.fixture
def db() -> Database:
    database = init_db(":memory:")
    yield database
    close_db(database)


class TestInitDb:
    def test_creates_all_tables(self, db: Database) -> None:
        rows = db.fetch_all("SELECT name FROM sqlite_master WHERE type = 'table'")
        assert EXPECTED_TABLES <= {row["name"] for row in rows}

    def test_is_idempotent(self, tmp_path) -> None:
        path = tmp_path / "twice.db"
        close_db(init_db(path))
        db = init_db(path)
        db.ping()
        close_db(db)


class TestTransaction:
    def _insert_user(self, conn: sqlite3.Connection, user_id: str) -> None:
        conn.execute(
            "INSERT INTO users (id, email, full_name, user_type, created_at, updated_at) "
            "VALUES (?, ?, 'Test', 'brand', 'now', 'now')",
            (user_id, f"{user_id}@example.com"),
        )

    def test_commits_on_success(self, db: Database) -> None:
        with db.transaction() as conn:
            self._insert_user(conn, "u1")
        assert db.fetch_one("SELECT id FROM users WHERE id = 'u1'") == {"id": "u1"}

    def test_rolls_back_on_error(self, db: Database) -> None:
        with pytest.raises(RuntimeError), db.transaction() as conn:
            self._insert_user(conn, "u1")
            raise RuntimeError("boom")
        assert db.fetch_one("SELECT id FROM users WHERE id = 'u1'") is None

    def test_nested_failure_rolls_back_outer_writes(self, db: Database) -> None:
        with pytest.raises(RuntimeError), db.transaction() as conn:
            self._insert_user(conn, "outer")
            with db.transaction() as inner:
                self._insert_user(inner, "inner")
            raise RuntimeError("after inner commit point")
        assert db.fetch_all("SELECT id FROM users") == []

    def test_execute_outside_transaction_commits(self, db: Database) -> None:
        db.execute(
            "INSERT INTO users (id, email, full_name, user_type, created_at, updated_at) "
            "VALUES ('u2', 'u2@example.com', 'Two', 'creator', 'now', 'now')"
        )
        assert db.fetch_one("SELECT full_name FROM users WHERE id = 'u2'") == {"full_name": "Two"}


class TestPing:
    def test_raises_after_close(self) -> None:
        db = init_db(":memory:")
        close_db(db)
        with pytest.raises(sqlite3.Error):
            db.ping()
