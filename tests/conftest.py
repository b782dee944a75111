from __future__ import annotations

import sys
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

PROJECT_DIR = Path(__file__).resolve().parents[1]
if str(PROJECT_DIR) not in sys.path:
    sys.path.insert(0, str(PROJECT_DIR))

from visit_planner.config.settings import Settings
from visit_planner.llm.completion import CompletionClient
from visit_planner.llm.model_factory import BaseCompletionProvider


class FakeProvider(BaseCompletionProvider):
    """Hands out one mocked chat model whose ``ainvoke`` returns ``reply``."""

    name = "fake"

    def __init__(self, config: Settings, reply: str = "", error: Exception | None = None) -> None:
        super().__init__(config)
        self.model = MagicMock()
        self.model.ainvoke = AsyncMock(return_value=AIMessage(content=reply), side_effect=error)
        self.create_calls: list[dict[str, Any]] = []

    def is_available(self) -> bool:
        return True

    def create(self, deployment: str, max_tokens: int, temperature: float) -> Any:
        self.create_calls.append(
            {"deployment": deployment, "max_tokens": max_tokens, "temperature": temperature}
        )
        return self.model


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides: Any) -> Settings:
        values: dict[str, Any] = {
            "ENDPOINT_URL": "https://visits.openai.azure.com/",
            "AZURE_OPENAI_API_KEY": "test-key",
            "DEPLOYMENT_NAME": "gpt-4o",
            "COMPLETION_PROVIDER": "",
            "OPENAI_API_KEY": "",
            "OPENAI_BASE_URL": "",
            "STATIC_DIR": str(tmp_path),
            "LOG_DIR": "",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def build_client(make_settings):
    """Return a factory producing ``(TestClient, FakeProvider | None)``.

    ``configured=False`` builds the app from settings without credentials so
    no completion client exists at all.
    """
    import api.main as main

    def _build(
        reply: str = "",
        error: Exception | None = None,
        configured: bool = True,
        **overrides: Any,
    ) -> tuple[TestClient, FakeProvider | None]:
        if not configured:
            overrides.setdefault("ENDPOINT_URL", "")
            overrides.setdefault("AZURE_OPENAI_API_KEY", "")
        config = make_settings(**overrides)
        provider = FakeProvider(config, reply=reply, error=error) if configured else None
        client = CompletionClient(provider) if provider is not None else None
        app = main.create_app(config, client=client)
        return TestClient(app), provider

    return _build
