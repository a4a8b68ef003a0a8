"""Outbound email via Resend and inbound reply handling."""

from influencerflow.email.replies import ReplyProcessor, normalize_subject
from influencerflow.email.resend import ResendClient

__all__ = ["ReplyProcessor", "ResendClient", "normalize_subject"]
