"""Chat-completion content generation for campaign copy.

Each generation type maps to a prompt template; ``custom`` sends the caller's
prompt as-is, with optional ``maxTokens``/``temperature``/``model`` overrides.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog
from openai import OpenAI

from influencerflow.domain.errors import ValidationFailedError
from influencerflow.llm.client import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from influencerflow.llm.prompts import (
    CAMPAIGN_DESCRIPTION_PROMPT,
    CONTENT_IDEAS_PROMPT,
    OUTREACH_MESSAGE_PROMPT,
)
from influencerflow.resilience import resilient_api_call

logger = structlog.get_logger()


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    model: str | None = None


def _text(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _campaign_description(data: dict[str, Any]) -> GenerationRequest:
    return GenerationRequest(
        CAMPAIGN_DESCRIPTION_PROMPT.format(
            brand_name=_text(data, "brandName"),
            product_type=_text(data, "productType"),
            target_audience=_text(data, "targetAudience"),
            campaign_goals=_text(data, "campaignGoals"),
        )
    )


def _outreach_message(data: dict[str, Any]) -> GenerationRequest:
    return GenerationRequest(
        OUTREACH_MESSAGE_PROMPT.format(
            influencer_name=_text(data, "influencerName"),
            brand_name=_text(data, "brandName"),
            campaign_type=_text(data, "campaignType"),
            compensation=_text(data, "compensation"),
        )
    )


def _content_ideas(data: dict[str, Any]) -> GenerationRequest:
    return GenerationRequest(
        CONTENT_IDEAS_PROMPT.format(
            niche=_text(data, "niche"),
            platform=_text(data, "platform"),
            campaign_theme=_text(data, "campaignTheme"),
        )
    )


def _custom(data: dict[str, Any]) -> GenerationRequest:
    prompt = data.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        raise ValidationFailedError("A prompt is required for custom generation")
    options = data.get("options")
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise ValidationFailedError("options must be an object")

    max_tokens = options.get("maxTokens", DEFAULT_MAX_TOKENS)
    temperature = options.get("temperature", DEFAULT_TEMPERATURE)
    if isinstance(max_tokens, bool) or not isinstance(max_tokens, int) or max_tokens < 1:
        raise ValidationFailedError("options.maxTokens must be a positive integer")
    if isinstance(temperature, bool) or not isinstance(temperature, int | float):
        raise ValidationFailedError("options.temperature must be a number")
    return GenerationRequest(
        prompt,
        max_tokens=max_tokens,
        temperature=float(temperature),
        model=options.get("model"),
    )


PROMPT_BUILDERS: dict[str, Callable[[dict[str, Any]], GenerationRequest]] = {
    "campaign-description": _campaign_description,
    "outreach-message": _outreach_message,
    "content-ideas": _content_ideas,
    "custom": _custom,
}


def build_generation_request(generation_type: str, data: dict[str, Any]) -> GenerationRequest:
    """Resolve a generation type and its data into a prompt.

    Raises:
        ValidationFailedError: On an unknown type or malformed ``custom`` data.
    """
    builder = PROMPT_BUILDERS.get(generation_type)
    if builder is None:
        raise ValidationFailedError(
            "Invalid generation type",
            details={"allowed": sorted(PROMPT_BUILDERS)},
        )
    return builder(data)


class ContentGenerator:
    """Single-turn chat completions against the configured deployment."""

    def __init__(self, client: OpenAI, model: str) -> None:
        self._client = client
        self._model = model

    @resilient_api_call("openai")
    def generate(self, request: GenerationRequest) -> str:
        """Return the completion text (empty when the model returns none)."""
        response = self._client.chat.completions.create(
            model=request.model or self._model,
            messages=[{"role": "user", "content": request.prompt}],
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )
        content = response.choices[0].message.content if response.choices else None
        usage = response.usage
        logger.info(
            "content_generated",
            model=request.model or self._model,
            total_tokens=usage.total_tokens if usage else None,
        )
        return content or ""
