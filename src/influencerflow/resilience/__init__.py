"""Resilience infrastructure for third-party API calls."""

from influencerflow.resilience.retry import is_retryable, resilient_api_call

__all__ = [
    "is_retryable",
    "resilient_api_call",
]
