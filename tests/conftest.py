"""Shared pytest fixtures for the InfluencerFlow API test suite."""

from __future__ import annotations

import time
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jose import jwt

from influencerflow.app import close_services, create_app, initialize_services
from influencerflow.config import Settings

JWT_SECRET = "test-jwt-secret"


def make_token(
    sub: str,
    email: str | None = None,
    user_metadata: dict[str, Any] | None = None,
    expires_in: int = 3600,
    secret: str = JWT_SECRET,
) -> str:
    """Build a Supabase-style HS256 access token."""
    claims: dict[str, Any] = {
        "sub": sub,
        "aud": "authenticated",
        "exp": int(time.time()) + expires_in,
    }
    if email is not None:
        claims["email"] = email
    if user_metadata is not None:
        claims["user_metadata"] = user_metadata
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(sub: str, email: str | None = None) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, email)}"}


def make_settings(tmp_path: Path, **overrides: Any) -> Settings:
    """Settings backed by a temp database with every external credential empty."""
    defaults: dict[str, Any] = {
        "database_path": tmp_path / "test.db",
        "supabase_jwt_secret": JWT_SECRET,
        "supabase_project_ref": "testref",
        "openai_api_key": "",
        "resend_api_key": "",
        "resend_webhook_secret": "",
        "instagram_access_token": "",
        "sentry_dsn": "",
    }
    defaults.update(overrides)
    return Settings(_env_file=None, **defaults)  # type: ignore[call-arg]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def services(settings: Settings) -> Iterator[dict[str, Any]]:
    services = initialize_services(settings)
    yield services
    close_services(services)


@pytest.fixture
def app(services: dict[str, Any]) -> FastAPI:
    return create_app(services)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_client(tmp_path: Path) -> Iterator[Any]:
    """Factory for a client over freshly initialized services with setting overrides."""
    opened: list[dict[str, Any]] = []

    def _make(**overrides: Any) -> TestClient:
        overrides.setdefault("database_path", tmp_path / f"custom-{len(opened)}.db")
        services = initialize_services(make_settings(tmp_path, **overrides))
        opened.append(services)
        return TestClient(create_app(services))

    yield _make
    for services in opened:
        close_services(services)


@pytest.fixture
def brand(services: dict[str, Any]) -> dict[str, Any]:
    """A brand user with a brand profile."""
    directory = services["directory"]
    user = directory.create_user(
        email="brand@example.com", full_name="Brand Owner", user_type="brand"
    )
    directory.create_brand_profile(
        user_id=user["id"], company_name="Glow Cosmetics", industry="Beauty"
    )
    return user


@pytest.fixture
def creator(services: dict[str, Any]) -> dict[str, Any]:
    """A creator user with a creator profile."""
    directory = services["directory"]
    user = directory.create_user(
        email="maya@example.com", full_name="Maya Chen", user_type="creator"
    )
    directory.create_creator_profile(
        user_id=user["id"],
        display_name="Maya Creates",
        niche=["beauty", "lifestyle"],
        follower_count_instagram=52000,
        engagement_rate=4.1,
        rate_per_post=800,
        instagram_handle="mayacreates",
    )
    return user


@pytest.fixture
def campaign(services: dict[str, Any], brand: dict[str, Any]) -> dict[str, Any]:
    return services["campaigns"].create(
        brand_id=brand["id"],
        title="Summer Glow Launch",
        description="Launch of our summer skincare line.",
        budget_min=1000,
        budget_max=3000,
        timeline_start="2026-06-01",
        timeline_end="2026-07-15",
        deliverables=["instagram_post", "instagram_story"],
    )


@pytest.fixture
def token_factory():
    """``make_token`` for tests that need custom claims."""
    return make_token


@pytest.fixture
def brand_headers(brand: dict[str, Any]) -> dict[str, str]:
    return bearer(brand["id"], brand["email"])


@pytest.fixture
def creator_headers(creator: dict[str, Any]) -> dict[str, str]:
    return bearer(creator["id"], creator["email"])


@pytest.fixture
def make_negotiation(
    services: dict[str, Any], campaign: dict[str, Any], creator: dict[str, Any]
):
    """Factory creating a negotiation between the seeded creator and campaign."""

    def _make(
        status: str = "draft",
        creator_terms: dict[str, Any] | None = None,
        current_terms: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        terms = creator_terms if creator_terms is not None else {
            "total_rate": 2000,
            "deliverables": ["instagram_post", "instagram_story"],
            "timeline": "2 weeks",
        }
        return services["negotiations"].create(
            campaign_id=campaign["id"],
            creator_id=creator["id"],
            status=status,
            creator_terms=terms,
            current_terms=current_terms if current_terms is not None else terms,
        )

    return _make
