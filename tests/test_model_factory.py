"""Tests for completion provider resolution and the completion client."""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from visit_planner.config.settings import DEFAULT_AZURE_API_VERSION, Settings
from visit_planner.llm.completion import ChatMessage, CompletionClient, CompletionResult
from visit_planner.llm.model_factory import (
    AzureOpenAIProvider,
    ModelFactory,
    OpenAIProvider,
    build_completion_client,
)


def test_auto_prefers_azure(make_settings):
    config = make_settings(OPENAI_API_KEY="sk-test")
    provider = ModelFactory(config).resolve_provider()
    assert isinstance(provider, AzureOpenAIProvider)


def test_auto_falls_back_to_openai_compatible(make_settings):
    config = make_settings(ENDPOINT_URL="", AZURE_OPENAI_API_KEY="", OPENAI_API_KEY="sk-test")
    client = build_completion_client(config)
    assert client is not None
    assert client.name == "openai"


def test_no_credentials_means_no_client(make_settings):
    config = make_settings(ENDPOINT_URL="https://visits.openai.azure.com/", AZURE_OPENAI_API_KEY="")
    assert build_completion_client(config) is None


def test_explicit_provider_without_credentials(make_settings):
    config = make_settings(COMPLETION_PROVIDER="openai")
    assert ModelFactory(config).resolve_provider() is None


def test_unknown_provider_raises(make_settings):
    config = make_settings(COMPLETION_PROVIDER="bedrock")
    with pytest.raises(ValueError, match="Unknown provider: bedrock"):
        build_completion_client(config)


def test_azure_provider_builds_deployment_model(make_settings):
    pytest.importorskip("langchain_openai")
    config = make_settings()
    model = AzureOpenAIProvider(config).create(deployment="gpt-4o", max_tokens=2000, temperature=0.3)

    assert model.deployment_name == "gpt-4o"
    assert model.openai_api_version == DEFAULT_AZURE_API_VERSION
    assert model.temperature == 0.3
    assert model.max_retries == 0


def test_openai_provider_uses_deployment_as_model(make_settings):
    pytest.importorskip("langchain_openai")
    config = make_settings(OPENAI_API_KEY="sk-test")
    model = OpenAIProvider(config).create(deployment="gpt-4o-mini", max_tokens=2000, temperature=0.3)

    assert model.model_name == "gpt-4o-mini"
    assert model.temperature == 0.3


def test_completion_client_converts_messages():
    provider = MagicMock()
    provider.name = "fake"
    provider.create.return_value.ainvoke = AsyncMock(return_value=AIMessage(content="好的"))
    client = CompletionClient(provider)

    result = asyncio.run(
        client.complete(
            "gpt-4o",
            [ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="hi")],
            max_tokens=2000,
            temperature=0.3,
        )
    )

    assert result.text == "好的"
    provider.create.assert_called_once_with(deployment="gpt-4o", max_tokens=2000, temperature=0.3)
    sent = provider.create.return_value.ainvoke.call_args.args[0]
    assert isinstance(sent[0], SystemMessage)
    assert isinstance(sent[1], HumanMessage)


def test_completion_result_text():
    assert CompletionResult().text == ""
    assert CompletionResult.from_message(None).text == ""
    assert CompletionResult(choices=["a", "b"]).text == "a"
    message = AIMessage(content=[{"type": "text", "text": "{\"a\": "}, {"type": "text", "text": "1}"}])
    assert CompletionResult.from_message(message).text == '{"a": 1}'


def test_settings_defaults(monkeypatch):
    for name in ("AZURE_OPENAI_API_VERSION", "PORT", "DEPLOYMENT_NAME", "SCHEDULE_MAX_TOKENS"):
        monkeypatch.delenv(name, raising=False)
    config = Settings(_env_file=None)

    assert config.AZURE_OPENAI_API_VERSION == "2025-01-01-preview"
    assert config.PORT == 3000
    assert config.SCHEDULE_MAX_TOKENS == 2000
    assert config.SCHEDULE_TEMPERATURE == 0.3
    assert config.MAX_BODY_BYTES == 1024 * 1024
    assert config.deployment == ""


def test_settings_are_immutable(make_settings):
    config = make_settings()
    with pytest.raises(Exception):
        config.DEPLOYMENT_NAME = "other"
