"""Supabase token authentication and the profile route."""

from influencerflow.auth.session import AuthUser, get_current_user, verify_token

__all__ = ["AuthUser", "get_current_user", "verify_token"]
