"""Supabase session authentication for FastAPI routes.

A request is authenticated by a Supabase access token (HS256, audience
``authenticated``) read from the ``Authorization: Bearer`` header or, failing
that, from the ``sb-<ref>-auth-token`` cookie.  The cookie may hold a JSON
array ``[access_token, refresh_token, ...]``, a JSON session object, or be
split across ``.0``/``.1``... chunks; values may carry a ``base64-`` prefix.

Usage::

    @router.post("/protected")
    def protected(user: AuthUser = Depends(get_current_user)):
        return {"user_id": user.id}
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

import structlog
from fastapi import HTTPException, Request, status
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel, Field

logger = structlog.get_logger()

AUDIENCE = "authenticated"
ALGORITHM = "HS256"
_BASE64_PREFIX = "base64-"


class AuthUser(BaseModel):
    """The authenticated caller, from verified token claims."""

    id: str
    email: str | None = None
    user_metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def default_full_name(self) -> str:
        """Full name from metadata, else the email's local part, else ``User``."""
        full_name = self.user_metadata.get("full_name")
        if full_name:
            return str(full_name)
        if self.email:
            return self.email.split("@", 1)[0]
        return "User"

    @property
    def default_user_type(self) -> str:
        return str(self.user_metadata.get("user_type") or "creator")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_cookie_value(raw: str) -> str:
    if raw.startswith(_BASE64_PREFIX):
        encoded = raw[len(_BASE64_PREFIX) :]
        try:
            return base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4)).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return ""
    return raw


def token_from_cookie_value(raw: str) -> str | None:
    """Extract the access token from a Supabase auth cookie value.

    Args:
        raw: The (reassembled) cookie value.

    Returns:
        The access token, or ``None`` if the value holds none.
    """
    value = _decode_cookie_value(raw).strip()
    if not value:
        return None
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        # A bare JWT
        return value if value.count(".") == 2 else None

    if isinstance(parsed, list) and parsed and isinstance(parsed[0], str):
        return parsed[0]
    if isinstance(parsed, dict):
        token = parsed.get("access_token")
        if isinstance(token, str):
            return token
        session = parsed.get("currentSession")
        if isinstance(session, dict) and isinstance(session.get("access_token"), str):
            return session["access_token"]
    return None


def cookie_token(cookies: dict[str, str], cookie_name: str) -> str | None:
    """Find the access token in the named cookie or its numbered chunks."""
    if cookie_name in cookies:
        return token_from_cookie_value(cookies[cookie_name])

    chunks: list[str] = []
    index = 0
    while f"{cookie_name}.{index}" in cookies:
        chunks.append(cookies[f"{cookie_name}.{index}"])
        index += 1
    if not chunks:
        return None
    return token_from_cookie_value("".join(chunks))


def request_token(request: Request) -> str | None:
    """The bearer token of a request, from its header or Supabase cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    settings = request.app.state.settings
    return cookie_token(dict(request.cookies), settings.auth_cookie_name)


def verify_token(token: str, secret: str) -> AuthUser:
    """Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if the token is expired, invalid or lacks ``sub``.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("auth_token_expired")
        raise _unauthorized("Token has expired") from None
    except JWTError as exc:
        logger.warning("auth_token_invalid", error=str(exc))
        raise _unauthorized("Invalid token") from None

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("auth_token_missing_sub")
        raise _unauthorized("Invalid token: missing user ID")

    return AuthUser(
        id=str(user_id),
        email=payload.get("email"),
        user_metadata=payload.get("user_metadata") or {},
    )


def get_current_user(request: Request) -> AuthUser:
    """FastAPI dependency requiring an authenticated caller.

    Raises:
        HTTPException: 401 when no valid token is presented.
    """
    token = request_token(request)
    if token is None:
        raise _unauthorized("Authentication required")

    secret = request.app.state.settings.supabase_jwt_secret.get_secret_value()
    if not secret:
        logger.error("auth_secret_not_configured")
        raise _unauthorized("Authentication is not configured")

    user = verify_token(token, secret)
    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user
