"""OpenAI-backed content generation.

Re-exports key functions for convenient access:
    from influencerflow.llm import ContentGenerator, get_openai_client
"""

from influencerflow.llm.client import get_openai_client
from influencerflow.llm.content import ContentGenerator, build_generation_request

__all__ = ["ContentGenerator", "build_generation_request", "get_openai_client"]
