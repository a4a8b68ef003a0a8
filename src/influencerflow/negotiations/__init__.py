"""Negotiation analysis, counter-offer rounds and routes."""

from influencerflow.negotiations.analysis import analyze_counter_offer, generate_auto_response
from influencerflow.negotiations.service import NegotiationService

__all__ = [
    "NegotiationService",
    "analyze_counter_offer",
    "generate_auto_response",
]
