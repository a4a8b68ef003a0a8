"""Tests for prompt resolution and chat-completion content generation."""

from unittest.mock import MagicMock

import httpx
import openai
import pytest

from influencerflow.domain.errors import ValidationFailedError
from influencerflow.llm.client import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE
from influencerflow.llm.content import (
    PROMPT_BUILDERS,
    ContentGenerator,
    GenerationRequest,
    build_generation_request,
)


def _make_mock_client(content: str | None = "Generated copy", total_tokens: int = 321) -> MagicMock:
    """Create a mock OpenAI client with a canned chat completion."""
    mock_client = MagicMock()
    mock_response = MagicMock()
    mock_choice = MagicMock()
    mock_choice.message.content = content
    mock_response.choices = [mock_choice]
    mock_response.usage.total_tokens = total_tokens
    mock_client.chat.completions.create.return_value = mock_response
    return mock_client


class TestBuildGenerationRequest:
    def test_campaign_description(self):
        request = build_generation_request(
            "campaign-description",
            {
                "brandName": "Glow Cosmetics",
                "productType": "sunscreen",
                "targetAudience": "women 25-34",
                "campaignGoals": "awareness",
            },
        )
        assert request.prompt.startswith(
            "Create a compelling campaign description for Glow Cosmetics promoting "
            "their sunscreen to women 25-34."
        )
        assert "Campaign goals: awareness" in request.prompt
        assert request.max_tokens == DEFAULT_MAX_TOKENS
        assert request.temperature == DEFAULT_TEMPERATURE
        assert request.model is None

    def test_outreach_message(self):
        request = build_generation_request(
            "outreach-message",
            {
                "influencerName": "Maya",
                "brandName": "Glow",
                "campaignType": "product launch",
                "compensation": "$1,500",
            },
        )
        assert "to influencer Maya for a product launch campaign with Glow." in request.prompt
        assert "Compensation: $1,500" in request.prompt

    def test_content_ideas_with_missing_fields(self):
        request = build_generation_request("content-ideas", {"niche": "fitness"})
        assert "for a fitness influencer on  for a campaign about ." in request.prompt

    def test_custom_with_options(self):
        request = build_generation_request(
            "custom",
            {
                "prompt": "Write a tagline",
                "options": {"maxTokens": 50, "temperature": 0, "model": "gpt-4o-mini"},
            },
        )
        assert request == GenerationRequest(
            "Write a tagline", max_tokens=50, temperature=0.0, model="gpt-4o-mini"
        )

    def test_custom_null_options_use_defaults(self):
        request = build_generation_request("custom", {"prompt": "Write a tagline", "options": None})
        assert request.max_tokens == DEFAULT_MAX_TOKENS
        assert request.temperature == DEFAULT_TEMPERATURE

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"prompt": "   "},
            {"prompt": "x", "options": []},
            {"prompt": "x", "options": ""},
            {"prompt": "x", "options": {"maxTokens": 0}},
            {"prompt": "x", "options": {"maxTokens": True}},
            {"prompt": "x", "options": {"temperature": "hot"}},
        ],
    )
    def test_custom_rejects_malformed_data(self, data):
        with pytest.raises(ValidationFailedError):
            build_generation_request("custom", data)

    def test_unknown_type(self):
        with pytest.raises(ValidationFailedError) as exc_info:
            build_generation_request("poem", {})
        assert exc_info.value.message == "Invalid generation type"
        assert exc_info.value.details == {"allowed": sorted(PROMPT_BUILDERS)}


class TestContentGenerator:
    def test_returns_completion_text(self):
        mock_client = _make_mock_client("Fresh summer copy")
        generator = ContentGenerator(mock_client, "gpt-4.1")

        assert generator.generate(GenerationRequest("Write copy")) == "Fresh summer copy"
        mock_client.chat.completions.create.assert_called_once_with(
            model="gpt-4.1",
            messages=[{"role": "user", "content": "Write copy"}],
            max_tokens=DEFAULT_MAX_TOKENS,
            temperature=DEFAULT_TEMPERATURE,
        )

    def test_request_model_overrides_default(self):
        mock_client = _make_mock_client()
        generator = ContentGenerator(mock_client, "gpt-4.1")

        generator.generate(GenerationRequest("x", model="gpt-4o-mini", temperature=0.0))

        kwargs = mock_client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-4o-mini"
        assert kwargs["temperature"] == 0.0

    def test_empty_completion(self):
        generator = ContentGenerator(_make_mock_client(None), "gpt-4.1")
        assert generator.generate(GenerationRequest("x")) == ""

    def test_connection_errors_are_retried(self, monkeypatch):
        monkeypatch.setattr("time.sleep", lambda _: None)
        mock_client = _make_mock_client("Recovered")
        response = mock_client.chat.completions.create.return_value
        mock_client.chat.completions.create.side_effect = [
            openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com")),
            response,
        ]
        generator = ContentGenerator(mock_client, "gpt-4.1")

        assert generator.generate(GenerationRequest("x")) == "Recovered"
        assert mock_client.chat.completions.create.call_count == 2
