"""Tests for the OpenAI client factory."""

from openai import OpenAI

from influencerflow.config import Settings
from influencerflow.llm.client import get_openai_client


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


def test_no_key_returns_none():
    assert get_openai_client(_settings(openai_api_key="")) is None


def test_default_endpoint():
    client = get_openai_client(_settings(openai_api_key="sk-test", openai_base_url=""))
    assert isinstance(client, OpenAI)
    assert client.api_key == "sk-test"
    assert str(client.base_url).startswith("https://api.openai.com/v1")


def test_deployment_endpoint():
    client = get_openai_client(
        _settings(
            openai_api_key="sk-test",
            openai_base_url="https://example.openai.azure.com",
            openai_model="gpt-4.1",
        )
    )
    assert client is not None
    assert str(client.base_url).startswith(
        "https://example.openai.azure.com/openai/deployments/gpt-4.1"
    )
