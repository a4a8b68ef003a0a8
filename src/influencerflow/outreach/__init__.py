"""Creator outreach and rule-based reply analysis."""

from influencerflow.outreach.response_analysis import analyze_creator_response
from influencerflow.outreach.service import OutreachService
from influencerflow.outreach.templates import render_outreach_message

__all__ = ["OutreachService", "analyze_creator_response", "render_outreach_message"]
