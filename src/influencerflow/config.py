"""Centralized, typed configuration using pydantic-settings.

Provides a single ``Settings`` class backed by ``.env`` file and environment
variables, a cached ``get_settings()`` accessor, and a ``validate_credentials()``
startup gate that enforces credential presence in production mode.

IMPORTANT: This module has ZERO imports from the ``influencerflow`` package to
prevent circular imports.  Only stdlib, pydantic, pydantic_settings, and
structlog are used.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path

import structlog
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = structlog.get_logger()


class Settings(BaseSettings):
    """Application settings loaded from environment variables and ``.env`` file.

    ``SecretStr`` fields prevent accidental leaks in logs or error output.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- General ---------------------------------------------------------------
    production: bool = False
    port: int = 8000
    app_url: str = "http://localhost:3000"
    demo_mode: bool = False
    sentry_dsn: str = ""

    # -- Storage ---------------------------------------------------------------
    database_path: Path = Path("data/influencerflow.db")

    # -- Supabase auth ---------------------------------------------------------
    supabase_url: str = ""
    supabase_project_ref: str = ""
    supabase_jwt_secret: SecretStr = SecretStr("")

    # -- OpenAI ----------------------------------------------------------------
    openai_api_key: SecretStr = SecretStr("")
    openai_base_url: str = ""
    openai_api_version: str = "2024-02-15-preview"
    openai_model: str = "gpt-4.1"

    # -- Resend ----------------------------------------------------------------
    resend_api_key: SecretStr = SecretStr("")
    resend_webhook_secret: SecretStr = SecretStr("")
    resend_from_address: str = "InfluencerFlow <team@influencerflow.app>"
    resend_reply_to: str = "replies@influencerflow.app"

    # -- Instagram -------------------------------------------------------------
    instagram_access_token: SecretStr = SecretStr("")
    facebook_app_secret: SecretStr = SecretStr("")

    @property
    def auth_cookie_name(self) -> str:
        """Name of the Supabase session cookie, ``sb-<ref>-auth-token``."""
        ref = self.supabase_project_ref
        if not ref and self.supabase_url:
            host = self.supabase_url.split("://", 1)[-1]
            ref = host.split(".", 1)[0]
        return f"sb-{ref}-auth-token"


@lru_cache
def get_settings() -> Settings:
    """Return a cached ``Settings`` instance.

    Call ``get_settings.cache_clear()`` in tests to reset.

    Returns:
        The application ``Settings``.
    """
    try:
        return Settings()
    except ValidationError as exc:
        # Only the structured errors list; the exception text may carry secrets.
        logger.error("settings_validation_failed", errors=exc.errors())
        sys.exit(1)


def validate_credentials(settings: Settings) -> None:
    """Enforce credential presence at startup.

    In **production** mode the application exits with a clear error block if
    any required credential is missing.  In **development** mode each missing
    credential is logged as a warning and startup continues; the matching
    feature is disabled at service initialization.

    Args:
        settings: The loaded application settings.
    """
    errors: list[str] = []

    if not settings.supabase_jwt_secret.get_secret_value():
        errors.append("SUPABASE_JWT_SECRET is empty or not set")

    if not settings.resend_api_key.get_secret_value():
        errors.append("RESEND_API_KEY is empty or not set")

    if not settings.openai_api_key.get_secret_value():
        errors.append("OPENAI_API_KEY is empty or not set")

    if not errors:
        logger.info("credential_validation_passed")
        return

    if settings.production:
        for err in errors:
            logger.error("credential_missing", detail=err)
        print("\n=== STARTUP FAILED ===", file=sys.stderr)
        print("Missing required credentials for production mode:", file=sys.stderr)
        for err in errors:
            print(f"  - {err}", file=sys.stderr)
        print("======================\n", file=sys.stderr)
        sys.exit(1)
    else:
        for err in errors:
            logger.warning("credential_missing_dev", detail=err)
