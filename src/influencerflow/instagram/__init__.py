"""Instagram Graph API integration."""

from influencerflow.instagram.client import InstagramClient

__all__ = ["InstagramClient"]
