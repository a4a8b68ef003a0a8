"""Resend HTTP client for outbound email.

Wraps ``POST /emails`` with an explicit timeout and the shared retry policy.
Outreach emails carry ``X-Campaign-ID``, ``X-Creator-ID`` and
``X-Message-Type`` headers and a reply-to address routed back to the inbound
reply webhook.
"""

from __future__ import annotations

import html
from typing import Any

import httpx
import structlog

from influencerflow.resilience import resilient_api_call

logger = structlog.get_logger()

RESEND_API_URL = "https://api.resend.com"
DEFAULT_TIMEOUT = httpx.Timeout(15.0, connect=5.0)


def render_outreach_html(message: str, *, campaign_url: str, recipient_email: str) -> str:
    """Render the branded outreach email body.

    Args:
        message: The plain-text outreach message (escaped, whitespace preserved).
        campaign_url: Link for the "View Campaign Details" button.
        recipient_email: Shown in the footer.

    Returns:
        The HTML document.
    """
    body = html.escape(message)
    return f"""
<div style="max-width: 600px; margin: 0 auto; font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; line-height: 1.6; color: #333;">
  <div style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px 20px; text-align: center; border-radius: 12px 12px 0 0;">
    <h1 style="color: white; margin: 0; font-size: 28px; font-weight: 600;">InfluencerFlow</h1>
    <p style="color: #e0e7ff; margin: 8px 0 0 0; font-size: 16px;">Partnership Opportunity</p>
  </div>
  <div style="padding: 40px 30px; background: white; border-radius: 0 0 12px 12px;">
    <div style="white-space: pre-wrap; line-height: 1.8; color: #374151; font-size: 16px;">{body}</div>
    <div style="margin: 40px 0 30px 0; padding: 25px; background: #f8faff; border-radius: 12px; text-align: center; border: 1px solid #c7d2fe;">
      <p style="margin: 0 0 20px 0; color: #4f46e5; font-weight: 600; font-size: 18px;">Ready to collaborate?</p>
      <a href="{html.escape(campaign_url, quote=True)}" style="display: inline-block; background: #667eea; color: white; padding: 14px 28px; text-decoration: none; border-radius: 8px; font-weight: 600;">View Campaign Details</a>
    </div>
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #e5e7eb; text-align: center;">
      <p style="margin: 0; color: #6b7280; font-size: 14px;">Sent via <strong>InfluencerFlow</strong> - Connecting Brands with Creators</p>
      <p style="margin: 8px 0 0 0; color: #9ca3af; font-size: 12px;">This email was sent to {html.escape(recipient_email)}</p>
    </div>
  </div>
</div>
"""


class ResendClient:
    """Minimal Resend API client.

    Args:
        api_key: The Resend API key.
        from_address: Verified ``From`` address.
        reply_to: Address inbound replies are routed through.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        api_key: str,
        from_address: str,
        reply_to: str,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._from_address = from_address
        self._reply_to = reply_to
        self._http = httpx.Client(
            base_url=RESEND_API_URL,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=DEFAULT_TIMEOUT,
            transport=transport,
        )

    @resilient_api_call("resend")
    def send_email(
        self,
        *,
        to: str,
        subject: str,
        html_body: str,
        headers: dict[str, str] | None = None,
    ) -> str:
        """Send one email and return the provider message id.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response (after retries for 5xx/429).
            ValueError: If the response carries no message id.
        """
        payload: dict[str, Any] = {
            "from": self._from_address,
            "to": [to],
            "reply_to": self._reply_to,
            "subject": subject,
            "html": html_body,
        }
        if headers:
            payload["headers"] = headers

        response = self._http.post("/emails", json=payload)
        response.raise_for_status()
        message_id = response.json().get("id")
        if not message_id:
            msg = "Resend response did not include a message id"
            raise ValueError(msg)
        logger.info("email_sent", provider="resend", message_id=message_id)
        return str(message_id)

    def close(self) -> None:
        self._http.close()
