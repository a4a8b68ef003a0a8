"""Sentry error reporting for the API.

Events leave the process with credentials removed: Supabase access tokens
travel in ``Authorization`` headers and ``sb-*-auth-token`` cookies, and
webhook requests carry Svix signatures.  ERROR-level structlog events reach
Sentry through :func:`get_sentry_processor`.
"""

from __future__ import annotations

import logging
from typing import Any

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor

FILTERED = "[Filtered]"

SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "svix-signature", "x-api-key"})


def scrub_event(event: dict[str, Any], hint: dict[str, Any] | None = None) -> dict[str, Any]:
    """Replace credential headers and cookies in a Sentry event's request data."""
    request = event.get("request")
    if not isinstance(request, dict):
        return event

    headers = request.get("headers")
    if isinstance(headers, dict):
        request["headers"] = {
            name: FILTERED if name.lower() in SENSITIVE_HEADERS else value
            for name, value in headers.items()
        }
    if request.get("cookies"):
        request["cookies"] = FILTERED
    return event


def init_sentry(dsn: str, environment: str = "development") -> None:
    """Start the Sentry SDK; does nothing when *dsn* is empty.

    Args:
        dsn: Sentry DSN string.
        environment: Environment tag for every event.
    """
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        traces_sample_rate=0.1,
        send_default_pii=False,
        before_send=scrub_event,
        # Log events arrive through structlog-sentry only
        integrations=[LoggingIntegration(event_level=None, level=None)],
    )


def get_sentry_processor() -> structlog.types.Processor:
    """structlog processor forwarding ERROR events; place it before the renderer."""
    return SentryProcessor(event_level=logging.ERROR)
