"""Campaigns, applications, recommendations and their routes."""

from influencerflow.campaigns.service import CampaignService

__all__ = ["CampaignService"]
