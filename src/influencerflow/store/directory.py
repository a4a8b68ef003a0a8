"""User and profile repository (users, brand_profiles, creator_profiles)."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from influencerflow.store.schema import Database
from influencerflow.store.serializers import decode_row, dump_json, new_id, now_iso, require_row

_CREATOR_JSON_COLUMNS = ("niche",)

# Fields of a user embedded in other records
USER_SUMMARY_FIELDS = ("id", "full_name", "email", "avatar_url", "user_type")


class DirectoryStore:
    """Look up and create users and their brand/creator profiles."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(
        self,
        *,
        email: str | None,
        full_name: str | None,
        user_type: str,
        user_id: str | None = None,
        avatar_url: str | None = None,
    ) -> dict[str, Any]:
        """Insert a user and return the stored row.

        *email* may be ``None`` for accounts without one, such as phone logins.
        """
        user_id = user_id or new_id()
        now = now_iso()
        self._db.execute(
            """
            INSERT INTO users (id, email, full_name, avatar_url, user_type, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (user_id, email, full_name, avatar_url, user_type, now, now),
        )
        return require_row(self.get_user(user_id), "users", user_id)

    def get_user(self, user_id: str) -> dict[str, Any] | None:
        """Fetch a user by id."""
        return self._db.fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))

    def get_user_by_email(self, email: str) -> dict[str, Any] | None:
        """Fetch a user by email (case-insensitive)."""
        return self._db.fetch_one(
            "SELECT * FROM users WHERE lower(email) = lower(?)", (email,)
        )

    def user_summary(self, user_id: str | None) -> dict[str, Any] | None:
        """The public subset of a user's fields, or ``None``."""
        if user_id is None:
            return None
        user = self.get_user(user_id)
        if user is None:
            return None
        return {field: user.get(field) for field in USER_SUMMARY_FIELDS}

    # ------------------------------------------------------------------
    # Brand profiles
    # ------------------------------------------------------------------

    def create_brand_profile(
        self,
        *,
        user_id: str,
        company_name: str,
        industry: str | None = None,
        location: str | None = None,
        website: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        """Insert a brand profile and return it."""
        self._db.execute(
            """
            INSERT INTO brand_profiles (id, user_id, company_name, industry, location, website, description)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (new_id(), user_id, company_name, industry, location, website, description),
        )
        return require_row(self.get_brand_profile(user_id), "brand_profiles", user_id)

    def get_brand_profile(self, user_id: str | None) -> dict[str, Any] | None:
        """Fetch the brand profile owned by *user_id*."""
        if user_id is None:
            return None
        return self._db.fetch_one(
            "SELECT user_id, company_name, industry, location, website, description "
            "FROM brand_profiles WHERE user_id = ?",
            (user_id,),
        )

    def brand_profiles_for(self, user_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Map each brand user id to its profile (missing ids are omitted)."""
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._db.fetch_all(
            f"SELECT user_id, company_name, industry, location FROM brand_profiles "
            f"WHERE user_id IN ({placeholders})",
            ids,
        )
        return {row["user_id"]: row for row in rows}

    # ------------------------------------------------------------------
    # Creator profiles
    # ------------------------------------------------------------------

    def create_creator_profile(
        self,
        *,
        user_id: str,
        display_name: str,
        niche: list[str] | None = None,
        follower_count_instagram: int = 0,
        follower_count_youtube: int = 0,
        follower_count_tiktok: int = 0,
        engagement_rate: float = 0.0,
        rate_per_post: float = 0.0,
        instagram_handle: str | None = None,
        bio: str | None = None,
        location: str | None = None,
    ) -> dict[str, Any]:
        """Insert a creator profile and return it."""
        self._db.execute(
            """
            INSERT INTO creator_profiles (
                id, user_id, display_name, bio, niche, location,
                follower_count_instagram, follower_count_youtube, follower_count_tiktok,
                engagement_rate, rate_per_post, instagram_handle
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                new_id(),
                user_id,
                display_name,
                bio,
                dump_json(niche or []),
                location,
                follower_count_instagram,
                follower_count_youtube,
                follower_count_tiktok,
                engagement_rate,
                rate_per_post,
                instagram_handle,
            ),
        )
        return require_row(self.get_creator_profile(user_id), "creator_profiles", user_id)

    def get_creator_profile(self, user_id: str | None) -> dict[str, Any] | None:
        """Fetch the creator profile owned by *user_id*."""
        if user_id is None:
            return None
        row = self._db.fetch_one(
            "SELECT * FROM creator_profiles WHERE user_id = ?", (user_id,)
        )
        return decode_row(row, json_columns=_CREATOR_JSON_COLUMNS)

    def list_creators(self) -> list[dict[str, Any]]:
        """Creator profiles with their user, by Instagram followers descending."""
        rows = self._db.fetch_all(
            """
            SELECT p.*, u.full_name AS user_full_name, u.avatar_url AS user_avatar_url,
                   u.email AS user_email
            FROM creator_profiles p
            LEFT JOIN users u ON u.id = p.user_id
            ORDER BY p.follower_count_instagram DESC
            """
        )
        creators: list[dict[str, Any]] = []
        for row in rows:
            decode_row(row, json_columns=_CREATOR_JSON_COLUMNS)
            row["users"] = {
                "id": row["user_id"],
                "full_name": row.pop("user_full_name"),
                "avatar_url": row.pop("user_avatar_url"),
                "email": row.pop("user_email"),
            }
            creators.append(row)
        return creators

    def creator_cards(self, user_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
        """Map creator user ids to their profile plus a ``users`` name/avatar summary.

        Ids with neither a profile nor a user row are omitted.
        """
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        placeholders = ", ".join("?" for _ in ids)
        rows = self._db.fetch_all(
            f"""
            SELECT u.id AS card_user_id, u.full_name AS user_full_name,
                   u.avatar_url AS user_avatar_url, p.*
            FROM users u
            LEFT JOIN creator_profiles p ON p.user_id = u.id
            WHERE u.id IN ({placeholders})
            """,
            ids,
        )
        cards: dict[str, dict[str, Any]] = {}
        for row in rows:
            user_id = row.pop("card_user_id")
            decode_row(row, json_columns=_CREATOR_JSON_COLUMNS)
            row["user_id"] = user_id
            row["users"] = {
                "full_name": row.pop("user_full_name"),
                "avatar_url": row.pop("user_avatar_url"),
            }
            cards[user_id] = row
        return cards
