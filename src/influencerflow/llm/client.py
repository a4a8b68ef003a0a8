"""OpenAI client factory and generation defaults."""

from __future__ import annotations

from openai import OpenAI

from influencerflow.config import Settings

DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.7


def get_openai_client(settings: Settings) -> OpenAI | None:
    """Create an OpenAI client, or ``None`` when no API key is configured.

    With ``OPENAI_BASE_URL`` set, requests go to the Azure-style deployment
    ``{base}openai/deployments/{model}`` with the ``api-version`` query and
    ``api-key`` header that endpoint expects.

    Returns:
        Configured client instance, or ``None``.
    """
    api_key = settings.openai_api_key.get_secret_value()
    if not api_key:
        return None
    if not settings.openai_base_url:
        return OpenAI(api_key=api_key)

    base = settings.openai_base_url
    if not base.endswith("/"):
        base += "/"
    return OpenAI(
        api_key=api_key,
        base_url=f"{base}openai/deployments/{settings.openai_model}",
        default_query={"api-version": settings.openai_api_version},
        default_headers={"api-key": api_key},
    )
